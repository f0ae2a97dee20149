"""Destination-chain client exceptions."""


class ChainError(Exception):
    """Base class for destination-chain client errors."""


class ChainConfigurationError(ChainError):
    """Raised when a signing operation is attempted without an operator key."""


class ChainSubmissionRevertedError(ChainError):
    """Raised when a call reverts, either in simulation or once mined."""

    def __init__(self, function: str, reason: str, tx_hash: str | None = None) -> None:
        where = f" in {tx_hash}" if tx_hash else " during simulation"
        super().__init__(f"{function} reverted{where}: {reason}")
        self.function = function
        self.reason = reason
        self.tx_hash = tx_hash


class ConfirmationTimeoutError(ChainError):
    """Raised when a broadcast transaction is not mined within the timeout."""

    def __init__(self, tx_hash: str, timeout: float) -> None:
        super().__init__(f"Transaction {tx_hash} not confirmed after {timeout:.0f}s")
        self.tx_hash = tx_hash
        self.timeout = timeout
