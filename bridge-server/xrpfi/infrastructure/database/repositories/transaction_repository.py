"""SQLAlchemy implementation for TransactionRepository"""

from __future__ import annotations

from typing import Any, Collection, Sequence

from sqlalchemy import desc, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from xrpfi.db.models import BridgeTransaction, utcnow


class SqlTransactionRepository:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def insert(
        self,
        *,
        source_tx_hash: str,
        source_address: str,
        source_amount: str,
        instruction_type: str,
        instruction_data: str,
    ) -> BridgeTransaction:
        now = utcnow()
        tx = BridgeTransaction(
            source_tx_hash=source_tx_hash,
            source_address=source_address,
            source_amount=source_amount,
            instruction_type=instruction_type,
            instruction_data=instruction_data,
            status="pending",
            created_at=now,
            updated_at=now,
        )
        self.session.add(tx)
        await self.session.flush()
        return tx

    async def get(self, source_tx_hash: str) -> BridgeTransaction | None:
        stmt = select(BridgeTransaction).where(BridgeTransaction.source_tx_hash == source_tx_hash)
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update(
        self,
        source_tx_hash: str,
        values: dict[str, Any],
        *,
        expected_statuses: Collection[str] | None = None,
    ) -> BridgeTransaction | None:
        stmt = update(BridgeTransaction).where(BridgeTransaction.source_tx_hash == source_tx_hash)
        if expected_statuses is not None:
            stmt = stmt.where(BridgeTransaction.status.in_(list(expected_statuses)))
        stmt = (
            stmt.values(**values, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
            .returning(BridgeTransaction)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def update_where_status(
        self,
        statuses: Collection[str],
        values: dict[str, Any],
    ) -> Sequence[BridgeTransaction]:
        stmt = (
            update(BridgeTransaction)
            .where(BridgeTransaction.status.in_(list(statuses)))
            .values(**values, updated_at=utcnow())
            .execution_options(synchronize_session="fetch")
            .returning(BridgeTransaction)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_by_address(self, source_address: str, limit: int, offset: int) -> Sequence[BridgeTransaction]:
        stmt = (
            select(BridgeTransaction)
            .where(BridgeTransaction.source_address == source_address)
            .order_by(desc(BridgeTransaction.created_at), desc(BridgeTransaction.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_by_status(self, statuses: Collection[str]) -> Sequence[BridgeTransaction]:
        stmt = (
            select(BridgeTransaction)
            .where(BridgeTransaction.status.in_(list(statuses)))
            .order_by(BridgeTransaction.created_at)
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
