"""Domain models for bridge transaction records."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Final, Optional

from xrpfi.db import models as orm


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Final[Any] = _Unset()


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PROVING = "proving"
    EXECUTING = "executing"
    COMPLETED = "completed"
    PARTIALLY_COMPLETED = "partially_completed"
    FAILED = "failed"


TERMINAL_STATUSES = frozenset(
    {
        TransactionStatus.COMPLETED,
        TransactionStatus.PARTIALLY_COMPLETED,
        TransactionStatus.FAILED,
    }
)

# Forward transitions only; failed -> pending goes through retry().
ALLOWED_PREDECESSORS: dict[TransactionStatus, frozenset[TransactionStatus]] = {
    TransactionStatus.PENDING: frozenset(),
    TransactionStatus.PROVING: frozenset({TransactionStatus.PENDING}),
    TransactionStatus.EXECUTING: frozenset({TransactionStatus.PROVING}),
    TransactionStatus.COMPLETED: frozenset({TransactionStatus.EXECUTING}),
    TransactionStatus.PARTIALLY_COMPLETED: frozenset({TransactionStatus.EXECUTING}),
    TransactionStatus.FAILED: frozenset(
        {TransactionStatus.PENDING, TransactionStatus.PROVING, TransactionStatus.EXECUTING}
    ),
}


@dataclass(slots=True)
class TransactionRecord:
    id: int
    source_tx_hash: str
    source_address: str
    source_amount: str
    instruction_type: str
    instruction_data: str
    status: TransactionStatus
    destination_account: Optional[str]
    destination_tx_hash: Optional[str]
    error_message: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @classmethod
    def from_orm(cls, instance: orm.BridgeTransaction) -> "TransactionRecord":
        return cls(
            id=instance.id,
            source_tx_hash=instance.source_tx_hash,
            source_address=instance.source_address,
            source_amount=instance.source_amount,
            instruction_type=instance.instruction_type,
            instruction_data=instance.instruction_data,
            status=TransactionStatus(instance.status),
            destination_account=instance.destination_account,
            destination_tx_hash=instance.destination_tx_hash,
            error_message=instance.error_message,
            created_at=instance.created_at,
            updated_at=instance.updated_at,
        )
