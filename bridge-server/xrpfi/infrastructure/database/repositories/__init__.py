"""SQLAlchemy-backed repository implementations."""

from .transaction_repository import SqlTransactionRepository

__all__ = [
    "SqlTransactionRepository",
]
