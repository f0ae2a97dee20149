"""Shared fixtures and fakes for the bridge server tests."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from web3 import Web3

from xrpfi.core.config import AssetSettings, VaultSettings
from xrpfi.infrastructure.database import build_session_factory, init_db
from xrpfi.modules.attestation import PaymentProof
from xrpfi.modules.chain import SentTransaction
from xrpfi.modules.gateway import LegResult, SplitDeposit, VaultDeposit
from xrpfi.modules.transactions import TransactionLedger

TOKEN = Web3.to_checksum_address("0x" + "11" * 20)
FIRELIGHT_VAULT = Web3.to_checksum_address("0x" + "22" * 20)
UPSHIFT_VAULT = Web3.to_checksum_address("0x" + "33" * 20)
OPERATOR = Web3.to_checksum_address("0x" + "44" * 20)
FDC_HUB = Web3.to_checksum_address("0x" + "55" * 20)
SYSTEMS_MANAGER = Web3.to_checksum_address("0x" + "66" * 20)

# Genesis account; its account id is well known.
USER_XRPL = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"
USER_EVM = Web3.to_checksum_address("0xb5f762798a53d543a014caf8b297cff8f2f937e8")
OPERATOR_XRPL = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"

TX_HASH = "A" * 64


def units(amount: str, decimals: int = 6) -> int:
    return int(Decimal(amount) * 10**decimals)


# ---------------------------------------------------------------------------
# Fake chain client
# ---------------------------------------------------------------------------


class FakeChain:
    """In-memory stand-in for ChainClient keyed by (contract, function)."""

    def __init__(self, operator: str = OPERATOR) -> None:
        self.operator_address = operator
        self.has_signer = True
        self.native_balance = 0
        self.contracts = {"FdcHub": FDC_HUB, "FlareSystemsManager": SYSTEMS_MANAGER}
        self._reads: dict[tuple[str, str], Any] = {}
        self._results: dict[tuple[str, str], Any] = {}
        self._send_errors: dict[tuple[str, str], Exception] = {}
        self._events: dict[tuple[str, str], list[dict[str, Any]]] = {}
        self.sent: list[tuple[str, str, tuple, int]] = []
        self.closed = False

    def set_read(self, address: str, function: str, value: Any) -> None:
        self._reads[(address.lower(), function)] = value

    def set_result(self, address: str, function: str, value: Any) -> None:
        self._results[(address.lower(), function)] = value

    def fail_send(self, address: str, function: str, error: Exception) -> None:
        self._send_errors[(address.lower(), function)] = error

    def set_events(self, address: str, event: str, events: list[dict[str, Any]]) -> None:
        self._events[(address.lower(), event)] = events

    def sent_functions(self, address: Optional[str] = None) -> list[str]:
        return [fn for addr, fn, _, _ in self.sent if address is None or addr == address.lower()]

    async def read(self, address: str, abi: Any, function: str, *args: Any) -> Any:
        value = self._reads[(address.lower(), function)]
        if isinstance(value, Exception):
            raise value
        return value(*args) if callable(value) else value

    async def send(self, address: str, abi: Any, function: str, *args: Any, value: int = 0) -> SentTransaction:
        key = (address.lower(), function)
        if key in self._send_errors:
            raise self._send_errors[key]
        self.sent.append((address.lower(), function, args, value))
        result = self._results.get(key)
        if callable(result):
            result = result(*args)
        return SentTransaction(
            tx_hash=f"0x{len(self.sent):064x}",
            block_number=len(self.sent),
            result=result,
            receipt={"status": 1},
        )

    def decode_events(self, address: str, abi: Any, event: str, sent: SentTransaction) -> list[dict[str, Any]]:
        return list(self._events.get((address.lower(), event), []))

    async def get_native_balance(self, address: str) -> int:
        return self.native_balance

    async def get_contract_address(self, name: str) -> str:
        return self.contracts[name]

    async def close(self) -> None:
        self.closed = True


def funded_chain(balance: str = "100", max_deposit: str = "1000") -> FakeChain:
    """Operator holds ``balance`` of the asset; both vaults accept ``max_deposit``."""
    chain = FakeChain()
    chain.set_read(TOKEN, "decimals", 6)
    chain.set_read(TOKEN, "balanceOf", lambda owner: units(balance) if owner == OPERATOR else 0)
    chain.set_read(TOKEN, "allowance", 0)
    for vault in (FIRELIGHT_VAULT, UPSHIFT_VAULT):
        chain.set_read(vault, "decimals", 6)
        chain.set_read(vault, "maxDeposit", units(max_deposit))
        chain.set_read(vault, "totalAssets", units("500"))
        chain.set_read(vault, "totalSupply", units("400"))
        chain.set_read(vault, "asset", TOKEN)
        chain.set_read(vault, "balanceOf", 0)
        chain.set_result(vault, "deposit", lambda assets, receiver: assets * 4 // 5)
    return chain


def asset_settings(upshift_address: str = UPSHIFT_VAULT) -> AssetSettings:
    return AssetSettings(
        token_address=TOKEN,
        symbol="FXRP",
        vaults={
            "firelight": VaultSettings(address=FIRELIGHT_VAULT, name="Firelight Staking", apy="8.5%", risk="low"),
            "upshift": VaultSettings(address=upshift_address, name="Upshift Vault", apy="12.3%", risk="medium"),
        },
    )


# ---------------------------------------------------------------------------
# Fake attestation and gateway for orchestration tests
# ---------------------------------------------------------------------------


class FakeAttestation:
    def __init__(self, error: Optional[Exception] = None, data: Any = None) -> None:
        self.error = error
        self.data = data
        self.calls: list[str] = []

    async def get_payment_proof(self, source_tx_hash: str) -> PaymentProof:
        self.calls.append(source_tx_hash)
        if self.error is not None:
            raise self.error
        return PaymentProof(voting_round_id=42, request_bytes="0xabcd", merkle_proof=["0x01"], data=self.data)

    async def close(self) -> None:
        pass


class FakeGateway:
    def __init__(self, configured: tuple[str, ...] = ("firelight", "upshift")) -> None:
        self.configured = set(configured)
        self.deposit_errors: dict[str, Exception] = {}
        self.transfer_error: Optional[Exception] = None
        self.calls: list[tuple] = []

    def vault_configured(self, vault_key: str) -> bool:
        return vault_key in self.configured

    async def deposit_to_vault(self, vault_key: str, amount: Decimal, receiver: str) -> VaultDeposit:
        self.calls.append(("deposit", vault_key, amount, receiver))
        if vault_key in self.deposit_errors:
            raise self.deposit_errors[vault_key]
        return VaultDeposit(
            vault_key=vault_key,
            amount=amount,
            tx_hash=f"0xdeposit-{vault_key}",
            shares_received=int(amount * 10**6),
            share_transfer_tx_hash=f"0xshares-{vault_key}",
        )

    async def deposit_split(self, amounts_by_vault: dict[str, Decimal], receiver: str) -> SplitDeposit:
        self.calls.append(("split", dict(amounts_by_vault), receiver))
        split = SplitDeposit()
        for vault_key, amount in amounts_by_vault.items():
            if amount <= 0:
                continue
            leg = LegResult(vault_key=vault_key, amount=amount)
            try:
                leg.deposit = await self.deposit_to_vault(vault_key, amount, receiver)
            except Exception as exc:
                leg.error = exc
            split.legs.append(leg)
        return split

    async def transfer_asset(self, to: str, amount: Decimal) -> str:
        self.calls.append(("transfer", to, amount))
        if self.transfer_error is not None:
            raise self.transfer_error
        return "0xtransfer"


# ---------------------------------------------------------------------------
# Ledger
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def ledger(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await init_db(engine)
    yield TransactionLedger(build_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def record_factory(ledger) -> Callable:
    async def _create(
        source_tx_hash: str = TX_HASH,
        memo_hex: str = "10" + "00" + "22" * 20 + "00000000" + "000000000064",
        instruction_type: str = "firelight",
        source_amount: str = "10",
        source_address: str = USER_XRPL,
    ):
        return await ledger.create(
            source_tx_hash=source_tx_hash,
            source_address=source_address,
            source_amount=source_amount,
            instruction_type=instruction_type,
            instruction_data=memo_hex,
        )

    return _create
