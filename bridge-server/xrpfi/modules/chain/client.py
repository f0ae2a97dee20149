"""Async web3 client owning the operator signer for the destination chain."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.contract import AsyncContract
from web3.exceptions import ContractLogicError, TimeExhausted
from web3.logs import DISCARD
from web3.providers import AsyncHTTPProvider

from xrpfi.core.config import FlareSettings

from .abis import CONTRACT_REGISTRY_ABI
from .exceptions import ChainConfigurationError, ChainSubmissionRevertedError, ConfirmationTimeoutError

logger = logging.getLogger(__name__)

Abi = Sequence[dict[str, Any]]


@dataclass(slots=True)
class SentTransaction:
    tx_hash: str
    block_number: int
    result: Any
    receipt: Any


class ChainClient:
    """Reads are free-standing; writes go simulate -> build -> sign -> send -> wait.

    Nonce lookup, signing and broadcast are serialized on a single lock so
    concurrent orchestrations sharing the operator key never reuse a nonce.
    Receipt waiting happens outside the lock.
    """

    def __init__(
        self,
        web3: AsyncWeb3,
        account: Optional[LocalAccount],
        *,
        chain_id: int,
        registry_address: str,
        confirmation_timeout: float = 120.0,
    ) -> None:
        self._web3 = web3
        self._account = account
        self._chain_id = chain_id
        self._registry_address = registry_address
        self._confirmation_timeout = confirmation_timeout
        self._send_lock = asyncio.Lock()
        self._contracts: dict[tuple[str, int], AsyncContract] = {}

    @classmethod
    def from_settings(cls, settings: FlareSettings) -> "ChainClient":
        web3 = AsyncWeb3(AsyncHTTPProvider(settings.rpc_url))
        account = Account.from_key(settings.operator_private_key) if settings.operator_private_key else None
        if account is None:
            logger.warning("Flare operator key not configured; chain writes are disabled")
        return cls(
            web3,
            account,
            chain_id=settings.chain_id,
            registry_address=settings.contract_registry,
            confirmation_timeout=settings.confirmation_timeout,
        )

    @property
    def has_signer(self) -> bool:
        return self._account is not None

    @property
    def operator_address(self) -> str:
        if self._account is None:
            raise ChainConfigurationError("Flare operator private key is not configured")
        return self._account.address

    def contract(self, address: str, abi: Abi) -> AsyncContract:
        key = (address.lower(), id(abi))
        contract = self._contracts.get(key)
        if contract is None:
            contract = self._web3.eth.contract(address=Web3.to_checksum_address(address), abi=list(abi))
            self._contracts[key] = contract
        return contract

    async def read(self, address: str, abi: Abi, function: str, *args: Any) -> Any:
        fn = self.contract(address, abi).functions[function](*args)
        return await fn.call()

    async def get_native_balance(self, address: str) -> int:
        return await self._web3.eth.get_balance(Web3.to_checksum_address(address))

    async def get_contract_address(self, name: str) -> str:
        address = await self.read(self._registry_address, CONTRACT_REGISTRY_ABI, "getContractAddressByName", name)
        return Web3.to_checksum_address(address)

    async def send(self, address: str, abi: Abi, function: str, *args: Any, value: int = 0) -> SentTransaction:
        sender = self.operator_address
        fn = self.contract(address, abi).functions[function](*args)

        try:
            result = await fn.call({"from": sender, "value": value})
        except ContractLogicError as exc:
            raise ChainSubmissionRevertedError(function, str(exc)) from exc

        async with self._send_lock:
            nonce = await self._web3.eth.get_transaction_count(sender, "pending")
            tx = await fn.build_transaction(
                {
                    "from": sender,
                    "value": value,
                    "nonce": nonce,
                    "chainId": self._chain_id,
                }
            )
            signed = self._account.sign_transaction(tx)
            raw_hash = await self._web3.eth.send_raw_transaction(signed.raw_transaction)
        tx_hash = Web3.to_hex(raw_hash)
        logger.info("Submitted %s to %s: %s (nonce %s)", function, address, tx_hash, nonce)

        try:
            receipt = await self._web3.eth.wait_for_transaction_receipt(raw_hash, timeout=self._confirmation_timeout)
        except TimeExhausted as exc:
            raise ConfirmationTimeoutError(tx_hash, self._confirmation_timeout) from exc

        if receipt["status"] == 0:
            raise ChainSubmissionRevertedError(function, "execution reverted", tx_hash=tx_hash)

        logger.info("Confirmed %s in block %s (gas used: %s)", tx_hash, receipt["blockNumber"], receipt.get("gasUsed"))
        return SentTransaction(tx_hash=tx_hash, block_number=receipt["blockNumber"], result=result, receipt=receipt)

    def decode_events(self, address: str, abi: Abi, event: str, sent: SentTransaction) -> list[dict[str, Any]]:
        contract = self.contract(address, abi)
        logs = contract.events[event]().process_receipt(sent.receipt, errors=DISCARD)
        emitter = address.lower()
        return [dict(log["args"]) for log in logs if log["address"].lower() == emitter]

    async def close(self) -> None:
        await self._web3.provider.disconnect()


__all__ = ["ChainClient", "SentTransaction"]
