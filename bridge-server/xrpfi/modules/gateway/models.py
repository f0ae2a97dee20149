"""Gateway result types and derived vault positions."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from typing import Optional

from .exceptions import PartialSplitFailureError


@dataclass(slots=True)
class VaultDeposit:
    vault_key: str
    amount: Decimal
    tx_hash: str
    shares_received: int
    share_transfer_tx_hash: Optional[str] = None

    @property
    def tx_hashes(self) -> list[str]:
        hashes = [self.tx_hash]
        if self.share_transfer_tx_hash:
            hashes.append(self.share_transfer_tx_hash)
        return hashes


@dataclass(slots=True)
class LegResult:
    vault_key: str
    amount: Decimal
    deposit: Optional[VaultDeposit] = None
    error: Optional[Exception] = None

    @property
    def succeeded(self) -> bool:
        return self.deposit is not None


@dataclass(slots=True)
class SplitDeposit:
    legs: list[LegResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[LegResult]:
        return [leg for leg in self.legs if leg.succeeded]

    @property
    def failed(self) -> list[LegResult]:
        return [leg for leg in self.legs if not leg.succeeded]

    @property
    def tx_hashes(self) -> list[str]:
        return [tx for leg in self.succeeded for tx in leg.deposit.tx_hashes]

    def raise_for_failure(self) -> None:
        failed = self.failed
        if not failed:
            return
        if self.succeeded:
            raise PartialSplitFailureError(self)
        raise failed[0].error


@dataclass(slots=True)
class VaultStatus:
    vault_key: str
    address: str
    asset: str
    total_assets: Decimal
    total_supply: Decimal
    exchange_rate: Decimal


@dataclass(slots=True)
class VaultPosition:
    vault_key: str
    shares: Decimal
    assets_value: Decimal
    exchange_rate: Decimal


@dataclass(slots=True)
class Holdings:
    address: str
    asset_balance: Decimal
    positions: dict[str, VaultPosition] = field(default_factory=dict)

    @property
    def total_value(self) -> Decimal:
        return self.asset_balance + sum((p.assets_value for p in self.positions.values()), Decimal(0))


@dataclass(slots=True)
class OperatorBalances:
    address: str
    native_balance: Decimal
    asset_balance: Optional[Decimal]


def exchange_rate(total_assets: Decimal, total_supply: Decimal) -> Decimal:
    if total_supply <= 0:
        return Decimal(1)
    return total_assets / total_supply


def to_base_units(amount: Decimal, decimals: int) -> int:
    return int((Decimal(amount) * (Decimal(10) ** decimals)).to_integral_value(rounding=ROUND_DOWN))


def from_base_units(value: int, decimals: int) -> Decimal:
    return Decimal(int(value)) / (Decimal(10) ** decimals)
