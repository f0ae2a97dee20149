"""Strategy catalog and payment preparation."""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Mapping, Optional

from xrpl.utils import XRPRangeException, xrp_to_drops

from xrpfi.core.config import QuoteSettings, VaultSettings
from xrpfi.modules.addresses import is_valid_xrpl_address
from xrpfi.modules.instructions import (
    InstructionEncodeError,
    InstructionKind,
    amount_to_lots,
    encode,
    encode_split,
    to_memo_hex,
)

from .exceptions import InvalidQuoteRequestError, OperatorNotConfiguredError, StrategyNotFoundError
from .models import FeeEstimate, Quote, Strategy, StrategySummary

logger = logging.getLogger(__name__)

FEE_QUANTUM = Decimal("0.000001")
SPLIT_PAIR = (InstructionKind.FIRELIGHT.value, InstructionKind.UPSHIFT.value)


class StrategyCatalog:
    def __init__(self, vaults: Mapping[str, VaultSettings]) -> None:
        self._strategies: dict[str, Strategy] = {}
        for key, vault in vaults.items():
            try:
                kind = InstructionKind(key)
            except ValueError:
                logger.warning("Vault %s has no instruction code; not offered as a strategy", key)
                continue
            self._strategies[key] = Strategy(
                id=key,
                name=vault.name,
                description=vault.description,
                apy=vault.apy,
                risk=vault.risk,
                enabled=vault.enabled,
                instruction_code=kind.code,
                vault_address=vault.address,
            )

    def list_strategies(self) -> list[Strategy]:
        return list(self._strategies.values())

    def get_strategy(self, strategy_id: str) -> Strategy:
        strategy = self._strategies.get(strategy_id)
        if strategy is None:
            raise StrategyNotFoundError(f"Strategy not found: {strategy_id}")
        return strategy


class QuoteService:
    """Builds the payment a user has to send; never touches the network."""

    def __init__(
        self,
        settings: QuoteSettings,
        catalog: StrategyCatalog,
        operator_address: Optional[str],
    ) -> None:
        self._settings = settings
        self._catalog = catalog
        self._operator_address = operator_address

    def prepare(
        self,
        source_address: str,
        amount_xrp: Decimal,
        allocation: Optional[Mapping[str, int]] = None,
    ) -> Quote:
        if not self._operator_address:
            raise OperatorNotConfiguredError("XRPL operator account is not configured")
        if not is_valid_xrpl_address(source_address):
            raise InvalidQuoteRequestError(f"Invalid XRPL address: {source_address}")

        alloc = self._normalize_allocation(allocation)
        amount = Decimal(amount_xrp)
        if amount < self._settings.min_amount:
            raise InvalidQuoteRequestError(f"Minimum amount is {self._settings.min_amount} XRP")

        try:
            amount_drops = xrp_to_drops(amount)
            lots = amount_to_lots(amount, self._settings.lot_size)
            memo, summary = self._build_memo(alloc, lots)
        except (XRPRangeException, InstructionEncodeError) as exc:
            raise InvalidQuoteRequestError(str(exc)) from exc

        minting_fee = (amount * self._settings.minting_fee_rate).quantize(FEE_QUANTUM, rounding=ROUND_HALF_UP)
        total = (amount + minting_fee + self._settings.xrpl_fee).quantize(FEE_QUANTUM, rounding=ROUND_HALF_UP)
        return Quote(
            destination_address=self._operator_address,
            memo=to_memo_hex(memo),
            amount_drops=amount_drops,
            lots=lots,
            fees=FeeEstimate(xrpl_fee=self._settings.xrpl_fee, minting_fee=minting_fee, total=total),
            strategy=summary,
            allocation=alloc,
        )

    def _normalize_allocation(self, allocation: Optional[Mapping[str, int]]) -> dict[str, int]:
        alloc = dict(allocation or self._settings.default_allocation)
        unknown = set(alloc) - set(SPLIT_PAIR)
        if unknown:
            raise InvalidQuoteRequestError(f"Unknown allocation keys: {', '.join(sorted(unknown))}")
        alloc = {key: int(alloc.get(key, 0)) for key in SPLIT_PAIR}
        if any(not 0 <= value <= 100 for value in alloc.values()):
            raise InvalidQuoteRequestError("Allocation percentages must be between 0 and 100")
        if sum(alloc.values()) != 100:
            raise InvalidQuoteRequestError("Allocation must total 100%")
        return alloc

    def _build_memo(self, alloc: dict[str, int], lots: int) -> tuple[bytes, StrategySummary]:
        for key in SPLIT_PAIR:
            if alloc[key] == 100:
                strategy = self._catalog.get_strategy(key)
                memo = encode(InstructionKind(key), strategy.vault_address, 0, lots)
                return memo, StrategySummary(id=key, name=strategy.name, apy=strategy.apy)

        first, second = (self._catalog.get_strategy(key) for key in SPLIT_PAIR)
        pct_a, pct_b = alloc[first.id], alloc[second.id]
        blended = (first.apy_value * pct_a + second.apy_value * pct_b) / Decimal(100)
        summary = StrategySummary(
            id=InstructionKind.SPLIT.value,
            name=f"{pct_a}% {first.name} / {pct_b}% {second.name}",
            apy=f"{blended.quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)}%",
        )
        return encode_split(pct_a, lots), summary


__all__ = ["QuoteService", "StrategyCatalog"]
