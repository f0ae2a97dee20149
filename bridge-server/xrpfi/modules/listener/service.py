"""XRPL account subscription that turns qualifying payments into ledger records."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Optional

from xrpl.asyncio.clients import AsyncWebsocketClient
from xrpl.models.requests import Subscribe
from xrpl.utils import drops_to_xrp

from xrpfi.core.config import XrplSettings
from xrpfi.modules.instructions import InstructionError, decode, resolve_kind
from xrpfi.modules.transactions import DuplicateTransactionError, TransactionLedger, TransactionRecord

from .exceptions import ConnectivityLostError

logger = logging.getLogger(__name__)

Dispatch = Callable[[str], Any]


class PaymentListener:
    """Subscribes to the operator account and records instruction payments.

    Every rejected event is dropped with a log line; nothing raised here ever
    reaches the caller of :meth:`run`. Each recorded payment is handed to
    ``dispatch`` by hash, which must not block.
    """

    def __init__(
        self,
        settings: XrplSettings,
        operator_address: str,
        ledger: TransactionLedger,
        dispatch: Dispatch,
        client_factory: Callable[[str], AsyncWebsocketClient] = AsyncWebsocketClient,
    ) -> None:
        self._settings = settings
        self._operator_address = operator_address
        self._ledger = ledger
        self._dispatch = dispatch
        self._client_factory = client_factory
        self._task: Optional[asyncio.Task] = None

    @property
    def operator_address(self) -> str:
        return self._operator_address

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        if not self.running:
            self._task = asyncio.create_task(self.run(), name="xrpl-payment-listener")
        return self._task

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Payment listener stopped")

    async def run(self) -> None:
        delay = self._settings.reconnect_initial_delay
        while True:
            try:
                async for _ in self._subscription():
                    delay = self._settings.reconnect_initial_delay
                raise ConnectivityLostError("XRPL subscription stream closed")
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("XRPL connectivity lost (%s); reconnecting in %.1fs", exc, delay)
            await asyncio.sleep(delay)
            delay = min(delay * 2, self._settings.reconnect_max_delay)

    async def _subscription(self):
        """Yield once per handled message so the caller can reset its backoff."""
        async with self._client_factory(self._settings.node_url) as client:
            response = await client.request(Subscribe(accounts=[self._operator_address]))
            if not response.is_successful():
                raise ConnectivityLostError(f"Subscribe rejected: {response.result}")
            logger.info("Listening for payments to %s on %s", self._operator_address, self._settings.node_url)
            yield None
            async for message in client:
                try:
                    await self.handle_message(message)
                except Exception:
                    logger.exception("Unexpected error handling XRPL message")
                yield None

    async def handle_message(self, message: dict[str, Any]) -> Optional[TransactionRecord]:
        tx = message.get("transaction") or message.get("tx_json")
        if not isinstance(tx, dict) or not tx.get("TransactionType"):
            return None
        meta = message.get("meta") or message.get("metadata") or {}

        if message.get("validated") is False:
            return None
        if tx["TransactionType"] != "Payment":
            return None
        result = meta.get("TransactionResult")
        if result and result != "tesSUCCESS":
            logger.debug("Skipping payment with result %s", result)
            return None
        if tx.get("Destination") != self._operator_address:
            return None

        tx_hash = message.get("hash") or tx.get("hash")
        if not tx_hash:
            logger.info("Payment without a hash, skipping")
            return None

        # Amount and DeliverMax are only an upper bound when tfPartialPayment is set.
        delivered = meta.get("delivered_amount")
        if not isinstance(delivered, str):
            logger.info("Payment %s has no native delivered amount, skipping", tx_hash)
            return None
        if not delivered.isdigit() or int(delivered) == 0:
            logger.info("Payment %s delivered an unusable amount (%s), skipping", tx_hash, delivered)
            return None

        memo_hex = _first_memo(tx)
        if not memo_hex:
            logger.info("Payment %s has no memo, skipping", tx_hash)
            return None

        try:
            instruction = decode(memo_hex)
            kind = resolve_kind(instruction.code)
        except InstructionError as exc:
            logger.info("Payment %s carries an invalid instruction (%s), skipping", tx_hash, exc)
            return None

        source_address = tx.get("Account", "")
        xrp_amount = _xrp_text(delivered)
        try:
            record = await self._ledger.create(
                source_tx_hash=tx_hash,
                source_address=source_address,
                source_amount=xrp_amount,
                instruction_type=kind.value,
                instruction_data=_normalize_hex(memo_hex),
            )
        except DuplicateTransactionError:
            logger.debug("Payment %s already recorded", tx_hash)
            return None

        logger.info("Received %s XRP from %s (%s): %s", xrp_amount, source_address, kind.value, tx_hash)
        self._dispatch(tx_hash)
        return record


def _first_memo(tx: dict[str, Any]) -> Optional[str]:
    memos = tx.get("Memos") or []
    if not memos:
        return None
    return (memos[0].get("Memo") or {}).get("MemoData")


def _xrp_text(drops: str) -> str:
    """Plain decimal XRP without trailing zeros, e.g. ``"10"`` or ``"1.5"``."""
    return format(drops_to_xrp(drops).normalize(), "f")


def _normalize_hex(value: str) -> str:
    text = value.strip().lower()
    return text[2:] if text.startswith("0x") else text


__all__ = ["PaymentListener"]
