"""Pydantic schemas used across the project."""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def format_amount(value: Optional[Decimal], places: int = 6) -> Optional[str]:
    if value is None:
        return None
    return f"{value:.{places}f}"


class HealthResponse(BaseModel):
    name: str
    version: str
    status: str = "running"


class TransactionResponse(BaseModel):
    source_tx_hash: str
    source_address: str
    source_amount: str
    instruction_type: str
    instruction_data: str
    status: str
    destination_account: Optional[str] = None
    destination_tx_hash: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TransactionListResponse(BaseModel):
    address: str
    transactions: list[TransactionResponse]


class PrepareRequest(BaseModel):
    source_address: str = Field(..., min_length=25, max_length=35)
    amount_xrp: Decimal = Field(..., gt=0)
    allocation: Optional[dict[str, int]] = None


class FeeEstimateResponse(BaseModel):
    xrpl_fee: str
    minting_fee: str
    total: str


class StrategySummaryResponse(BaseModel):
    id: str
    name: str
    apy: str


class PrepareResponse(BaseModel):
    destination_address: str
    memo: str
    amount_drops: str
    lots: int
    estimated_fees: FeeEstimateResponse
    strategy: StrategySummaryResponse
    allocation: dict[str, int]


class StrategyResponse(BaseModel):
    id: str
    name: str
    description: str
    apy: str
    risk: str
    enabled: bool

    model_config = ConfigDict(from_attributes=True)


class StrategyListResponse(BaseModel):
    strategies: list[StrategyResponse]


class VaultPositionResponse(BaseModel):
    shares: str
    assets_value: str
    exchange_rate: str


class HoldingsResponse(BaseModel):
    xrpl_address: str
    destination_address: str
    asset_symbol: str
    asset_balance: str
    positions: dict[str, VaultPositionResponse] = Field(default_factory=dict)
    total_value: str


class VaultStatusResponse(BaseModel):
    id: str
    name: str
    address: str
    asset: str
    total_assets: str
    total_supply: str
    exchange_rate: str


class VaultListResponse(BaseModel):
    vaults: list[VaultStatusResponse]


class OperatorResponse(BaseModel):
    xrpl_address: Optional[str] = None
    flare_address: Optional[str] = None
    flare_balance: Optional[str] = None
    asset_balance: Optional[str] = None
    asset_token_address: str
