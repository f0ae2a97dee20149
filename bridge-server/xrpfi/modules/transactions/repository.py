"""Repository protocol for bridge transaction records."""

from __future__ import annotations

from typing import Any, Collection, Protocol, Sequence

from xrpfi.db.models import BridgeTransaction as BridgeTransactionModel


class TransactionRepository(Protocol):
    async def insert(
        self,
        *,
        source_tx_hash: str,
        source_address: str,
        source_amount: str,
        instruction_type: str,
        instruction_data: str,
    ) -> BridgeTransactionModel:
        ...

    async def get(self, source_tx_hash: str) -> BridgeTransactionModel | None:
        ...

    async def update(
        self,
        source_tx_hash: str,
        values: dict[str, Any],
        *,
        expected_statuses: Collection[str] | None = None,
    ) -> BridgeTransactionModel | None:
        ...

    async def update_where_status(
        self,
        statuses: Collection[str],
        values: dict[str, Any],
    ) -> Sequence[BridgeTransactionModel]:
        ...

    async def list_by_address(self, source_address: str, limit: int, offset: int) -> Sequence[BridgeTransactionModel]:
        ...

    async def list_by_status(self, statuses: Collection[str]) -> Sequence[BridgeTransactionModel]:
        ...
