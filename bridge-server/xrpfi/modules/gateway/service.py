"""Destination-chain gateway: asset transfers, vault deposits and read-only positions."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Awaitable, Mapping, Optional, TypeVar

from web3 import Web3

from xrpfi.core.config import ZERO_ADDRESS, AssetSettings, VaultSettings
from xrpfi.modules.chain import ERC20_ABI, ERC4626_ABI, ChainClient

from .exceptions import (
    DepositNotAllowedError,
    GatewayConfigurationError,
    InsufficientBalanceError,
    ShareTransferError,
    VaultCapExceededError,
)
from .models import (
    Holdings,
    LegResult,
    OperatorBalances,
    SplitDeposit,
    VaultDeposit,
    VaultPosition,
    VaultStatus,
    exchange_rate,
    from_base_units,
    to_base_units,
)

logger = logging.getLogger(__name__)

MAX_UINT256 = 2**256 - 1
NATIVE_DECIMALS = 18

T = TypeVar("T")


class DestinationGateway:
    def __init__(self, chain: ChainClient, assets: AssetSettings) -> None:
        self._chain = chain
        self._assets = assets
        self._decimals: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Configuration helpers

    @property
    def asset_configured(self) -> bool:
        return _is_set(self._assets.token_address)

    def vault_keys(self) -> list[str]:
        return list(self._assets.vaults)

    def vault_configured(self, vault_key: str) -> bool:
        vault = self._assets.vaults.get(vault_key)
        return vault is not None and vault.enabled and _is_set(vault.address)

    def _vault(self, vault_key: str) -> VaultSettings:
        vault = self._assets.vaults.get(vault_key)
        if vault is None:
            raise GatewayConfigurationError(f"Unknown vault: {vault_key}")
        if not vault.enabled or not _is_set(vault.address):
            raise GatewayConfigurationError(f"Vault {vault_key} is not configured")
        return vault

    def _token(self) -> str:
        if not self.asset_configured:
            raise GatewayConfigurationError(f"{self._assets.symbol} token address is not configured")
        return Web3.to_checksum_address(self._assets.token_address)

    async def _decimals_of(self, address: str, abi=ERC20_ABI) -> int:
        key = address.lower()
        if key not in self._decimals:
            self._decimals[key] = int(await self._chain.read(address, abi, "decimals"))
        return self._decimals[key]

    # ------------------------------------------------------------------
    # Writes

    async def transfer_asset(self, to: str, amount: Decimal) -> str:
        token = self._token()
        decimals = await self._decimals_of(token)
        units = to_base_units(amount, decimals)
        await self._require_balance(token, units, decimals)

        sent = await self._chain.send(token, ERC20_ABI, "transfer", Web3.to_checksum_address(to), units)
        logger.info("Transferred %s %s to %s: %s", amount, self._assets.symbol, to, sent.tx_hash)
        return sent.tx_hash

    async def deposit_to_vault(self, vault_key: str, amount: Decimal, receiver: str) -> VaultDeposit:
        vault_address = Web3.to_checksum_address(self._vault(vault_key).address)
        token = self._token()
        operator = self._chain.operator_address
        decimals = await self._decimals_of(token)
        units = to_base_units(amount, decimals)

        await self._require_balance(token, units, decimals)

        max_deposit = int(await self._chain.read(vault_address, ERC4626_ABI, "maxDeposit", operator))
        if max_deposit == 0:
            raise DepositNotAllowedError(vault_key)
        if max_deposit < units:
            total_assets = int(await self._chain.read(vault_address, ERC4626_ABI, "totalAssets"))
            raise VaultCapExceededError(
                vault_key,
                requested=amount,
                available=from_base_units(max_deposit, decimals),
                total_assets=from_base_units(total_assets, decimals),
            )

        await self.ensure_allowance(token, vault_address, units)

        sent = await self._chain.send(vault_address, ERC4626_ABI, "deposit", units, operator)
        events = self._chain.decode_events(vault_address, ERC4626_ABI, "Deposit", sent)
        shares = sum(int(e["shares"]) for e in events if str(e["owner"]).lower() == operator.lower())
        if not shares:
            shares = int(sent.result or 0)
        logger.info("Deposited %s into %s for %d shares: %s", amount, vault_key, shares, sent.tx_hash)

        deposit = VaultDeposit(vault_key=vault_key, amount=amount, tx_hash=sent.tx_hash, shares_received=shares)
        if receiver.lower() == operator.lower() or shares == 0:
            return deposit

        try:
            transfer = await self._chain.send(
                vault_address, ERC4626_ABI, "transfer", Web3.to_checksum_address(receiver), shares
            )
        except Exception as exc:
            raise ShareTransferError(vault_key, shares, sent.tx_hash, receiver, str(exc)) from exc
        deposit.share_transfer_tx_hash = transfer.tx_hash
        logger.info("Transferred %d %s shares to %s: %s", shares, vault_key, receiver, transfer.tx_hash)
        return deposit

    async def deposit_split(self, amounts_by_vault: Mapping[str, Decimal], receiver: str) -> SplitDeposit:
        """Attempt every non-zero leg in order; failures are collected per leg, not raised."""
        split = SplitDeposit()
        for vault_key, amount in amounts_by_vault.items():
            if amount <= 0:
                continue
            leg = LegResult(vault_key=vault_key, amount=amount)
            try:
                leg.deposit = await self.deposit_to_vault(vault_key, amount, receiver)
            except Exception as exc:
                logger.warning("Split leg %s (%s) failed: %s", vault_key, amount, exc)
                leg.error = exc
            split.legs.append(leg)
        return split

    async def ensure_allowance(self, token: str, spender: str, amount: int) -> Optional[str]:
        operator = self._chain.operator_address
        allowance = int(await self._chain.read(token, ERC20_ABI, "allowance", operator, spender))
        if allowance >= amount:
            return None
        sent = await self._chain.send(token, ERC20_ABI, "approve", spender, MAX_UINT256)
        logger.info("Approved %s to spend operator %s: %s", spender, self._assets.symbol, sent.tx_hash)
        return sent.tx_hash

    async def _require_balance(self, token: str, units: int, decimals: int) -> None:
        balance = int(await self._chain.read(token, ERC20_ABI, "balanceOf", self._chain.operator_address))
        if balance < units:
            raise InsufficientBalanceError(
                from_base_units(units, decimals),
                from_base_units(balance, decimals),
                self._assets.symbol,
            )

    # ------------------------------------------------------------------
    # Reads

    async def get_vault_status(self, vault_key: str) -> VaultStatus:
        vault_address = Web3.to_checksum_address(self._vault(vault_key).address)
        decimals = await self._decimals_of(vault_address, ERC4626_ABI)
        asset = await self._chain.read(vault_address, ERC4626_ABI, "asset")
        total_assets = from_base_units(await self._chain.read(vault_address, ERC4626_ABI, "totalAssets"), decimals)
        total_supply = from_base_units(await self._chain.read(vault_address, ERC4626_ABI, "totalSupply"), decimals)
        return VaultStatus(
            vault_key=vault_key,
            address=vault_address,
            asset=str(asset),
            total_assets=total_assets,
            total_supply=total_supply,
            exchange_rate=exchange_rate(total_assets, total_supply),
        )

    async def get_holdings(self, address: str) -> Holdings:
        """Balances for ``address``; any field that cannot be read counts as zero."""
        owner = Web3.to_checksum_address(address)
        holdings = Holdings(address=owner, asset_balance=Decimal(0))

        if self.asset_configured:
            holdings.asset_balance = await _degrade(
                f"{self._assets.symbol} balance of {owner}", self._asset_balance(owner), Decimal(0)
            )

        for vault_key in self.vault_keys():
            if not self.vault_configured(vault_key):
                continue
            holdings.positions[vault_key] = await _degrade(
                f"{vault_key} position of {owner}",
                self._vault_position(vault_key, owner),
                VaultPosition(vault_key, Decimal(0), Decimal(0), Decimal(1)),
            )
        return holdings

    async def get_operator_balances(self) -> OperatorBalances:
        operator = self._chain.operator_address
        native = from_base_units(await self._chain.get_native_balance(operator), NATIVE_DECIMALS)
        asset: Optional[Decimal] = None
        if self.asset_configured:
            asset = await _degrade("operator asset balance", self._asset_balance(operator), None)
        return OperatorBalances(address=operator, native_balance=native, asset_balance=asset)

    async def _asset_balance(self, owner: str) -> Decimal:
        token = self._token()
        decimals = await self._decimals_of(token)
        return from_base_units(await self._chain.read(token, ERC20_ABI, "balanceOf", owner), decimals)

    async def _vault_position(self, vault_key: str, owner: str) -> VaultPosition:
        vault_address = Web3.to_checksum_address(self._vault(vault_key).address)
        decimals = await self._decimals_of(vault_address, ERC4626_ABI)
        shares = from_base_units(await self._chain.read(vault_address, ERC4626_ABI, "balanceOf", owner), decimals)
        status = await _degrade(
            f"{vault_key} vault status",
            self.get_vault_status(vault_key),
            None,
        )
        rate = status.exchange_rate if status else Decimal(1)
        return VaultPosition(vault_key=vault_key, shares=shares, assets_value=shares * rate, exchange_rate=rate)


def _is_set(address: Optional[str]) -> bool:
    return bool(address) and address.lower() != ZERO_ADDRESS


async def _degrade(label: str, awaitable: Awaitable[T], default: Any) -> T:
    try:
        return await awaitable
    except Exception as exc:
        logger.warning("Could not read %s: %s", label, exc)
        return default


__all__ = ["DestinationGateway", "MAX_UINT256"]
