"""Transaction ledger: keyed store of bridge records with guarded status transitions."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from xrpfi.infrastructure.database.repositories.transaction_repository import SqlTransactionRepository
from xrpfi.infrastructure.database.session import session_scope

from .exceptions import DuplicateTransactionError, InvalidStatusTransitionError, TransactionNotFoundError
from .models import (
    ALLOWED_PREDECESSORS,
    UNSET,
    TransactionRecord,
    TransactionStatus,
)
from .repository import TransactionRepository

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (
    TransactionStatus.PENDING,
    TransactionStatus.PROVING,
    TransactionStatus.EXECUTING,
)


class TransactionLedger:
    """Every call runs in its own unit of work; the database enforces uniqueness
    and the status guard, so concurrent orchestrations never share a session."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        repository_factory: Callable[[AsyncSession], TransactionRepository] = SqlTransactionRepository,
    ) -> None:
        self._session_factory = session_factory
        self._repository_factory = repository_factory

    async def create(
        self,
        *,
        source_tx_hash: str,
        source_address: str,
        source_amount: str,
        instruction_type: str,
        instruction_data: str,
    ) -> TransactionRecord:
        try:
            async with session_scope(self._session_factory) as session:
                model = await self._repository_factory(session).insert(
                    source_tx_hash=source_tx_hash,
                    source_address=source_address,
                    source_amount=source_amount,
                    instruction_type=instruction_type,
                    instruction_data=instruction_data,
                )
                record = TransactionRecord.from_orm(model)
        except IntegrityError as exc:
            raise DuplicateTransactionError(f"Transaction already recorded: {source_tx_hash}") from exc
        logger.info("Recorded transaction %s from %s (%s XRP, %s)", source_tx_hash, source_address, source_amount, instruction_type)
        return record

    async def find(self, source_tx_hash: str) -> Optional[TransactionRecord]:
        async with session_scope(self._session_factory) as session:
            model = await self._repository_factory(session).get(source_tx_hash)
            return TransactionRecord.from_orm(model) if model else None

    async def get(self, source_tx_hash: str) -> TransactionRecord:
        record = await self.find(source_tx_hash)
        if record is None:
            raise TransactionNotFoundError(source_tx_hash)
        return record

    async def update(
        self,
        source_tx_hash: str,
        *,
        status: TransactionStatus | None = None,
        destination_account: Any = UNSET,
        destination_tx_hash: Any = UNSET,
        error_message: Any = UNSET,
    ) -> TransactionRecord:
        values: dict[str, Any] = {}
        if destination_account is not UNSET:
            values["destination_account"] = destination_account
        if destination_tx_hash is not UNSET:
            values["destination_tx_hash"] = destination_tx_hash
        if error_message is not UNSET:
            values["error_message"] = error_message

        expected: Optional[list[str]] = None
        if status is not None:
            status = TransactionStatus(status)
            predecessors = ALLOWED_PREDECESSORS[status]
            if not predecessors:
                current = await self.get(source_tx_hash)
                raise InvalidStatusTransitionError(source_tx_hash, current.status.value, status.value)
            values["status"] = status.value
            expected = [s.value for s in predecessors]

        async with session_scope(self._session_factory) as session:
            repository = self._repository_factory(session)
            model = await repository.update(source_tx_hash, values, expected_statuses=expected)
            if model is None:
                current = await repository.get(source_tx_hash)
                if current is None:
                    raise TransactionNotFoundError(source_tx_hash)
                raise InvalidStatusTransitionError(source_tx_hash, current.status, values["status"])
            record = TransactionRecord.from_orm(model)

        if status is not None:
            logger.debug("Transaction %s -> %s", source_tx_hash, status.value)
        return record

    async def retry(self, source_tx_hash: str) -> TransactionRecord:
        """failed -> pending, clearing the error; the only way back from failed."""
        async with session_scope(self._session_factory) as session:
            repository = self._repository_factory(session)
            model = await repository.update(
                source_tx_hash,
                {"status": TransactionStatus.PENDING.value, "error_message": None},
                expected_statuses=[TransactionStatus.FAILED.value],
            )
            if model is None:
                current = await repository.get(source_tx_hash)
                if current is None:
                    raise TransactionNotFoundError(source_tx_hash)
                raise InvalidStatusTransitionError(source_tx_hash, current.status, TransactionStatus.PENDING.value)
            record = TransactionRecord.from_orm(model)
        logger.info("Transaction %s reset to pending for retry", source_tx_hash)
        return record

    async def list_by_address(self, source_address: str, limit: int = 100, offset: int = 0) -> list[TransactionRecord]:
        async with session_scope(self._session_factory) as session:
            rows = await self._repository_factory(session).list_by_address(source_address, limit, offset)
            return [TransactionRecord.from_orm(row) for row in rows]

    async def list_by_status(self, *statuses: TransactionStatus) -> list[TransactionRecord]:
        async with session_scope(self._session_factory) as session:
            rows = await self._repository_factory(session).list_by_status([s.value for s in statuses])
            return [TransactionRecord.from_orm(row) for row in rows]

    async def fail_interrupted(self, message: str) -> list[TransactionRecord]:
        """Mark records left mid-flight by a previous process as failed so they can be retried."""
        async with session_scope(self._session_factory) as session:
            rows = await self._repository_factory(session).update_where_status(
                [s.value for s in ACTIVE_STATUSES],
                {"status": TransactionStatus.FAILED.value, "error_message": message},
            )
            records = [TransactionRecord.from_orm(row) for row in rows]
        for record in records:
            logger.warning("Transaction %s was interrupted; marked failed for manual retry", record.source_tx_hash)
        return records
