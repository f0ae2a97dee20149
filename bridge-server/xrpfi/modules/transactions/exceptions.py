"""Transaction ledger specific exceptions."""


class TransactionError(Exception):
    """Base class for transaction ledger errors."""


class DuplicateTransactionError(TransactionError):
    """Raised when a record already exists for the source transaction hash."""


class TransactionNotFoundError(TransactionError):
    """Raised when no record matches the source transaction hash."""


class InvalidStatusTransitionError(TransactionError):
    """Raised when a status change is not allowed by the lifecycle."""

    def __init__(self, source_tx_hash: str, current: str, target: str) -> None:
        super().__init__(f"Transaction {source_tx_hash} cannot move from {current} to {target}")
        self.source_tx_hash = source_tx_hash
        self.current = current
        self.target = target
