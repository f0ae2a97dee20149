"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3001
    reload: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000", "http://localhost:3001"])


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./xrpfi.db", alias="url")
    echo: bool = False
    pool_size: Optional[int] = None
    max_overflow: Optional[int] = None


class XrplSettings(BaseModel):
    node_url: str = "wss://s.altnet.rippletest.net:51233"
    operator_seed: Optional[str] = None
    # Watch-only alternative to the seed; the service never signs on XRPL.
    operator_address: Optional[str] = None
    reconnect_initial_delay: float = 1.0
    reconnect_max_delay: float = 60.0


class FlareSettings(BaseModel):
    rpc_url: str = "https://coston2-api.flare.network/ext/bc/C/rpc"
    chain_id: int = 114
    operator_private_key: Optional[str] = None
    contract_registry: str = "0xaD67FE66660Fb8dFE9d6b1b4240d8650e30F6019"
    confirmation_timeout: float = 120.0
    explorer_url: str = "https://coston2-explorer.flare.network"


class AttestationSettings(BaseModel):
    verifier_url: str = "https://fdc-verifiers-testnet.flare.network"
    da_layer_url: str = "https://da-layer-testnet.flare.network"
    api_key: str = ""
    attestation_type: str = "Payment"
    source_id: str = "testXRP"
    http_timeout: float = 30.0
    # Verifier lag: the payment is usually not indexed right after it validates.
    propagation_delay: float = 10.0
    not_found_retry_delay: float = 10.0
    max_not_found_retries: int = 5
    request_fee_wei: int = 10**15
    # Voting rounds take 90-180s to finalize.
    proof_initial_wait: float = 60.0
    proof_poll_interval: float = 15.0
    proof_round_window: int = 5
    proof_round_delay: float = 0.5
    proof_max_wait: float = 300.0


class VaultSettings(BaseModel):
    address: str = ZERO_ADDRESS
    name: str
    description: str = ""
    apy: str = ""
    risk: Literal["low", "medium", "high"] = "medium"
    enabled: bool = True


def _default_vaults() -> dict[str, VaultSettings]:
    return {
        "firelight": VaultSettings(
            address="0x91Bfe6A68aB035DFebb6A770FFfB748C03C0E40B",
            name="Firelight Staking",
            description=(
                "Stake FXRP to receive stXRP, a liquid staking token. "
                "Earn yield from DeFi cover fees and Firelight Points."
            ),
            apy="8.5%",
            risk="low",
        ),
        "upshift": VaultSettings(
            name="Upshift Vault",
            description="Deposit FXRP to earn yield from carry trades, AMM liquidity, and Firelight integration.",
            apy="12.3%",
            risk="medium",
        ),
    }


class AssetSettings(BaseModel):
    token_address: str = ZERO_ADDRESS
    symbol: str = "FXRP"
    vaults: dict[str, VaultSettings] = Field(default_factory=_default_vaults)


class QuoteSettings(BaseModel):
    lot_size: Decimal = Decimal("0.1")
    min_amount: Decimal = Decimal("0.1")
    xrpl_fee: Decimal = Decimal("0.000012")
    minting_fee_rate: Decimal = Decimal("0.002")
    default_allocation: dict[str, int] = Field(default_factory=lambda: {"firelight": 50, "upshift": 50})


class ExecutionSettings(BaseModel):
    max_concurrency: int = 8
    listener_enabled: bool = True


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "XRPfi Yield Maximizer"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    xrpl: XrplSettings = XrplSettings()
    flare: FlareSettings = FlareSettings()
    attestation: AttestationSettings = AttestationSettings()
    assets: AssetSettings = AssetSettings()
    quote: QuoteSettings = QuoteSettings()
    execution: ExecutionSettings = ExecutionSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def vaults(self) -> dict[str, VaultSettings]:
        return self.assets.vaults


@lru_cache()
def get_settings() -> Settings:
    return Settings()
