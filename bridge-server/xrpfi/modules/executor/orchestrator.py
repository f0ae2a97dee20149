"""Drives one recorded payment from pending to a terminal status."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_DOWN, Decimal
from typing import Any, Callable, Iterable, Optional

from xrpfi.modules.addresses import derive_destination_address
from xrpfi.modules.attestation import AttestationClient, PaymentProof, ProofMismatchError
from xrpfi.modules.gateway import DestinationGateway, PartialSplitFailureError
from xrpfi.modules.instructions import Instruction, InstructionKind, decode, resolve_kind
from xrpfi.modules.transactions import (
    InvalidStatusTransitionError,
    TransactionLedger,
    TransactionRecord,
    TransactionStatus,
)

logger = logging.getLogger(__name__)

FailureHook = Callable[[str, BaseException], None]

# Smallest XRP unit; split legs are cut at drop precision.
AMOUNT_QUANTUM = Decimal("0.000001")
DROPS_PER_XRP = Decimal(10**6)
SPLIT_VAULTS = (InstructionKind.FIRELIGHT.value, InstructionKind.UPSHIFT.value)


@dataclass(slots=True)
class _Outcome:
    status: TransactionStatus
    tx_hashes: list[str] = field(default_factory=list)
    error: Optional[str] = None


def split_amounts(amount: Decimal, percent_a: int) -> dict[str, Decimal]:
    """Leg A gets ``amount * percent_a / 100`` at drop precision, leg B the remainder."""
    first, second = SPLIT_VAULTS
    amount_a = (amount * Decimal(percent_a) / Decimal(100)).quantize(AMOUNT_QUANTUM, rounding=ROUND_DOWN)
    return {first: amount_a, second: amount - amount_a}


def _check_proof(record: TransactionRecord, proof: PaymentProof) -> None:
    """Execution is sized by the recorded amount; refuse it when the proof attests a different one."""
    attested = proof.received_drops
    if attested is None:
        logger.debug("Proof for %s has no decoded response body; amount not cross-checked", record.source_tx_hash)
        return
    recorded = int(Decimal(record.source_amount) * DROPS_PER_XRP)
    if attested != recorded:
        raise ProofMismatchError(record.source_tx_hash, recorded, attested)


class ExecutionOrchestrator:
    def __init__(
        self,
        ledger: TransactionLedger,
        attestation: AttestationClient,
        gateway: DestinationGateway,
        *,
        dispatch: Optional[Callable[[str], Any]] = None,
        failure_hooks: Iterable[FailureHook] = (),
    ) -> None:
        self._ledger = ledger
        self._attestation = attestation
        self._gateway = gateway
        self._dispatch = dispatch
        self._failure_hooks: list[FailureHook] = list(failure_hooks)

    def add_failure_hook(self, hook: FailureHook) -> None:
        self._failure_hooks.append(hook)

    async def process(self, source_tx_hash: str) -> Optional[TransactionRecord]:
        """Run the full pipeline; errors end up on the record and are never raised."""
        record = await self._ledger.find(source_tx_hash)
        if record is None:
            logger.warning("No record for %s, nothing to process", source_tx_hash)
            return None
        if record.status is not TransactionStatus.PENDING:
            logger.debug("Transaction %s is %s, not pending; skipping", source_tx_hash, record.status.value)
            return record

        try:
            return await self._run(record)
        except InvalidStatusTransitionError as exc:
            logger.warning("Transaction %s changed underneath this orchestration: %s", source_tx_hash, exc)
            return None
        except Exception as exc:
            logger.exception("Processing %s failed", source_tx_hash)
            return await self._fail(source_tx_hash, exc)

    async def retry(self, source_tx_hash: str) -> TransactionRecord:
        record = await self._ledger.retry(source_tx_hash)
        if self._dispatch is not None:
            self._dispatch(source_tx_hash)
        return record

    async def _run(self, record: TransactionRecord) -> TransactionRecord:
        source_tx_hash = record.source_tx_hash
        instruction = decode(record.instruction_data)
        kind = resolve_kind(instruction.code)

        await self._ledger.update(source_tx_hash, status=TransactionStatus.PROVING)
        proof = await self._attestation.get_payment_proof(source_tx_hash)
        logger.info("Proof for %s found in round %d", source_tx_hash, proof.voting_round_id)
        _check_proof(record, proof)

        await self._ledger.update(source_tx_hash, status=TransactionStatus.EXECUTING)
        destination = derive_destination_address(record.source_address)
        outcome = await self._execute(kind, instruction, Decimal(record.source_amount), destination)

        updated = await self._ledger.update(
            source_tx_hash,
            status=outcome.status,
            destination_account=destination,
            destination_tx_hash=",".join(outcome.tx_hashes) or None,
            error_message=outcome.error,
        )
        logger.info("Transaction %s %s: %s", source_tx_hash, outcome.status.value, updated.destination_tx_hash)
        return updated

    async def _execute(
        self,
        kind: InstructionKind,
        instruction: Instruction,
        amount: Decimal,
        destination: str,
    ) -> _Outcome:
        if kind.is_split:
            split = await self._gateway.deposit_split(
                split_amounts(amount, instruction.split_percent_a or 0), destination
            )
            if not split.failed:
                return _Outcome(TransactionStatus.COMPLETED, split.tx_hashes)
            if split.succeeded:
                return _Outcome(
                    TransactionStatus.PARTIALLY_COMPLETED,
                    split.tx_hashes,
                    error=str(PartialSplitFailureError(split)),
                )
            split.raise_for_failure()

        vault_key = kind.value
        if self._gateway.vault_configured(vault_key):
            deposit = await self._gateway.deposit_to_vault(vault_key, amount, destination)
            return _Outcome(TransactionStatus.COMPLETED, deposit.tx_hashes)

        logger.info("Vault %s not configured; transferring the asset to %s instead", vault_key, destination)
        tx_hash = await self._gateway.transfer_asset(destination, amount)
        return _Outcome(TransactionStatus.COMPLETED, [tx_hash])

    async def _fail(self, source_tx_hash: str, exc: BaseException) -> Optional[TransactionRecord]:
        message = str(exc) or type(exc).__name__
        record: Optional[TransactionRecord] = None
        try:
            record = await self._ledger.update(
                source_tx_hash, status=TransactionStatus.FAILED, error_message=message
            )
        except Exception:
            logger.exception("Could not record failure of %s", source_tx_hash)
        for hook in self._failure_hooks:
            try:
                hook(source_tx_hash, exc)
            except Exception:
                logger.exception("Failure hook raised for %s", source_tx_hash)
        return record


__all__ = ["ExecutionOrchestrator", "FailureHook", "split_amounts"]
