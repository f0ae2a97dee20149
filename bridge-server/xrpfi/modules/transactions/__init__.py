"""Exports for the transaction ledger"""

from .exceptions import (
    DuplicateTransactionError,
    InvalidStatusTransitionError,
    TransactionError,
    TransactionNotFoundError,
)
from .models import UNSET, TERMINAL_STATUSES, TransactionRecord, TransactionStatus
from .service import TransactionLedger

__all__ = [
    "UNSET",
    "TERMINAL_STATUSES",
    "TransactionRecord",
    "TransactionStatus",
    "TransactionLedger",
    "TransactionError",
    "DuplicateTransactionError",
    "InvalidStatusTransitionError",
    "TransactionNotFoundError",
]
