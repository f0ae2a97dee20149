"""Strategy catalog entries and prepared payment quotes."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(slots=True)
class Strategy:
    id: str
    name: str
    description: str
    apy: str
    risk: str
    enabled: bool
    instruction_code: int
    vault_address: str

    @property
    def apy_value(self) -> Decimal:
        """Upper bound of the advertised APY as a number, e.g. ``"4-10%"`` -> 10."""
        text = self.apy.strip().rstrip("%").split("-")[-1].strip()
        try:
            return Decimal(text)
        except ArithmeticError:
            return Decimal(0)


@dataclass(slots=True)
class FeeEstimate:
    xrpl_fee: Decimal
    minting_fee: Decimal
    total: Decimal


@dataclass(slots=True)
class StrategySummary:
    id: str
    name: str
    apy: str


@dataclass(slots=True)
class Quote:
    destination_address: str
    memo: str
    amount_drops: str
    lots: int
    fees: FeeEstimate
    strategy: StrategySummary
    allocation: dict[str, int] = field(default_factory=dict)
