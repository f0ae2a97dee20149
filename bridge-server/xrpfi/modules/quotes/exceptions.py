"""Quote service exceptions."""


class QuoteError(Exception):
    """Base class for quote errors."""


class InvalidQuoteRequestError(QuoteError, ValueError):
    """Raised when a prepare request fails validation."""


class StrategyNotFoundError(QuoteError):
    """Raised when a strategy id is not in the catalog."""


class OperatorNotConfiguredError(QuoteError):
    """Raised when no XRPL operator account is available to receive payments."""
