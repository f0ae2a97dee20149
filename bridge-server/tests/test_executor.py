"""Tests for the execution orchestrator and its supervisor.

The ledger is real (SQLite); attestation and gateway are fakes that record
what they were asked to do.
"""

import asyncio
from decimal import Decimal

import pytest

from xrpfi.modules.attestation import AttestationUnavailableError, ProofMismatchError
from xrpfi.modules.executor import ExecutionOrchestrator, ExecutionSupervisor, split_amounts
from xrpfi.modules.gateway import DepositNotAllowedError, VaultCapExceededError
from xrpfi.modules.instructions import encode_split
from xrpfi.modules.transactions import TransactionStatus

from .conftest import TX_HASH, USER_EVM, FakeAttestation, FakeGateway

SPLIT_MEMO = encode_split(30, 100).hex()
UPSHIFT_MEMO = "20" + "00" * 31


def make_orchestrator(ledger, attestation=None, gateway=None, **kwargs) -> ExecutionOrchestrator:
    return ExecutionOrchestrator(ledger, attestation or FakeAttestation(), gateway or FakeGateway(), **kwargs)


# ---------------------------------------------------------------------------
# Amount splitting
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("amount", "percent", "first", "second"),
    [
        (Decimal("10"), 30, Decimal("3"), Decimal("7")),
        (Decimal("10"), 33, Decimal("3.3"), Decimal("6.7")),
        (Decimal("0.000003"), 50, Decimal("0.000001"), Decimal("0.000002")),
        (Decimal("5"), 0, Decimal("0"), Decimal("5")),
        (Decimal("5"), 100, Decimal("5"), Decimal("0")),
    ],
)
def test_split_amounts(amount: Decimal, percent: int, first: Decimal, second: Decimal) -> None:
    legs = split_amounts(amount, percent)

    assert legs == {"firelight": first, "upshift": second}
    assert sum(legs.values()) == amount


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------


class TestProcess:
    @pytest.mark.asyncio
    async def test_vault_deposit_completes(self, ledger, record_factory) -> None:
        await record_factory()
        attestation, gateway = FakeAttestation(), FakeGateway()

        record = await make_orchestrator(ledger, attestation, gateway).process(TX_HASH)

        assert record.status is TransactionStatus.COMPLETED
        assert record.destination_account == USER_EVM
        assert record.destination_tx_hash == "0xdeposit-firelight,0xshares-firelight"
        assert record.error_message is None
        assert attestation.calls == [TX_HASH]
        assert gateway.calls == [("deposit", "firelight", Decimal("10"), USER_EVM)]

    @pytest.mark.asyncio
    async def test_unconfigured_vault_falls_back_to_transfer(self, ledger, record_factory) -> None:
        await record_factory(memo_hex=UPSHIFT_MEMO, instruction_type="upshift")
        gateway = FakeGateway(configured=("firelight",))

        record = await make_orchestrator(ledger, gateway=gateway).process(TX_HASH)

        assert record.status is TransactionStatus.COMPLETED
        assert record.destination_tx_hash == "0xtransfer"
        assert gateway.calls == [("transfer", USER_EVM, Decimal("10"))]

    @pytest.mark.asyncio
    async def test_attestation_failure_fails_the_record(self, ledger, record_factory) -> None:
        await record_factory()
        gateway = FakeGateway()
        failures: list[tuple[str, BaseException]] = []
        orchestrator = make_orchestrator(
            ledger,
            FakeAttestation(AttestationUnavailableError("verifier never saw it")),
            gateway,
            failure_hooks=[lambda key, exc: failures.append((key, exc))],
        )

        record = await orchestrator.process(TX_HASH)

        assert record.status is TransactionStatus.FAILED
        assert record.error_message == "verifier never saw it"
        assert gateway.calls == []
        assert failures[0][0] == TX_HASH
        assert isinstance(failures[0][1], AttestationUnavailableError)

    @pytest.mark.asyncio
    async def test_attested_amount_must_match_the_record(self, ledger, record_factory) -> None:
        await record_factory(source_amount="10")
        gateway = FakeGateway()
        failures: list[BaseException] = []
        attestation = FakeAttestation(data={"responseBody": {"receivedAmount": "100000"}})
        orchestrator = make_orchestrator(
            ledger, attestation, gateway, failure_hooks=[lambda key, exc: failures.append(exc)]
        )

        record = await orchestrator.process(TX_HASH)

        assert record.status is TransactionStatus.FAILED
        assert "100000 drops received" in record.error_message
        assert isinstance(failures[0], ProofMismatchError)
        assert gateway.calls == []

    @pytest.mark.asyncio
    async def test_matching_attested_amount_executes(self, ledger, record_factory) -> None:
        await record_factory(source_amount="10")
        attestation = FakeAttestation(data={"response": {"responseBody": {"receivedAmount": "10000000"}}})

        record = await make_orchestrator(ledger, attestation).process(TX_HASH)

        assert record.status is TransactionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_gateway_error_fails_the_record(self, ledger, record_factory) -> None:
        await record_factory()
        gateway = FakeGateway()
        gateway.deposit_errors["firelight"] = VaultCapExceededError(
            "firelight", Decimal("10"), Decimal("1"), Decimal("99")
        )

        record = await make_orchestrator(ledger, gateway=gateway).process(TX_HASH)

        assert record.status is TransactionStatus.FAILED
        assert "capacity" in record.error_message

    @pytest.mark.asyncio
    async def test_split_routes_both_legs(self, ledger, record_factory) -> None:
        await record_factory(memo_hex=SPLIT_MEMO, instruction_type="split")
        gateway = FakeGateway()

        record = await make_orchestrator(ledger, gateway=gateway).process(TX_HASH)

        assert record.status is TransactionStatus.COMPLETED
        assert gateway.calls[0] == (
            "split",
            {"firelight": Decimal("3"), "upshift": Decimal("7")},
            USER_EVM,
        )
        assert record.destination_tx_hash.split(",") == [
            "0xdeposit-firelight",
            "0xshares-firelight",
            "0xdeposit-upshift",
            "0xshares-upshift",
        ]

    @pytest.mark.asyncio
    async def test_split_with_one_failed_leg_is_partial(self, ledger, record_factory) -> None:
        await record_factory(memo_hex=SPLIT_MEMO, instruction_type="split")
        gateway = FakeGateway()
        gateway.deposit_errors["upshift"] = DepositNotAllowedError("upshift")

        record = await make_orchestrator(ledger, gateway=gateway).process(TX_HASH)

        assert record.status is TransactionStatus.PARTIALLY_COMPLETED
        assert record.destination_tx_hash == "0xdeposit-firelight,0xshares-firelight"
        assert "upshift" in record.error_message

    @pytest.mark.asyncio
    async def test_split_with_every_leg_failed(self, ledger, record_factory) -> None:
        await record_factory(memo_hex=SPLIT_MEMO, instruction_type="split")
        gateway = FakeGateway()
        gateway.deposit_errors["firelight"] = DepositNotAllowedError("firelight")
        gateway.deposit_errors["upshift"] = DepositNotAllowedError("upshift")

        record = await make_orchestrator(ledger, gateway=gateway).process(TX_HASH)

        assert record.status is TransactionStatus.FAILED
        assert record.error_message == "Vault firelight is not accepting deposits"

    @pytest.mark.asyncio
    async def test_non_pending_record_is_left_alone(self, ledger, record_factory) -> None:
        await record_factory()
        await ledger.update(TX_HASH, status=TransactionStatus.PROVING)
        attestation = FakeAttestation()

        record = await make_orchestrator(ledger, attestation).process(TX_HASH)

        assert record.status is TransactionStatus.PROVING
        assert attestation.calls == []

    @pytest.mark.asyncio
    async def test_unknown_hash(self, ledger) -> None:
        assert await make_orchestrator(ledger).process("missing") is None

    @pytest.mark.asyncio
    async def test_retry_resets_and_dispatches(self, ledger, record_factory) -> None:
        await record_factory()
        await ledger.update(TX_HASH, status=TransactionStatus.FAILED, error_message="boom")
        dispatched: list[str] = []

        record = await make_orchestrator(ledger, dispatch=dispatched.append).retry(TX_HASH)

        assert record.status is TransactionStatus.PENDING
        assert record.error_message is None
        assert dispatched == [TX_HASH]


# ---------------------------------------------------------------------------
# Supervisor
# ---------------------------------------------------------------------------


class TestSupervisor:
    @pytest.mark.asyncio
    async def test_concurrency_is_bounded(self) -> None:
        running = 0
        peak = 0
        done: list[str] = []

        async def handler(key: str) -> None:
            nonlocal running, peak
            running += 1
            peak = max(peak, running)
            await asyncio.sleep(0.01)
            running -= 1
            done.append(key)

        supervisor = ExecutionSupervisor(handler, max_concurrency=2)
        for index in range(6):
            supervisor.submit(f"tx-{index}")
        await supervisor.join()

        assert peak == 2
        assert sorted(done) == [f"tx-{index}" for index in range(6)]
        assert supervisor.in_flight == []

    @pytest.mark.asyncio
    async def test_escaped_errors_reach_failure_hooks(self) -> None:
        failures: list[tuple[str, BaseException]] = []

        async def handler(key: str) -> None:
            raise RuntimeError(f"broken {key}")

        supervisor = ExecutionSupervisor(handler, failure_hooks=[lambda key, exc: failures.append((key, exc))])
        await supervisor.submit("tx-1")

        assert failures[0][0] == "tx-1"
        assert str(failures[0][1]) == "broken tx-1"

    @pytest.mark.asyncio
    async def test_shutdown_cancels_in_flight_work(self) -> None:
        started = asyncio.Event()

        async def handler(key: str) -> None:
            started.set()
            await asyncio.Event().wait()

        supervisor = ExecutionSupervisor(handler)
        task = supervisor.submit("tx-1")
        await started.wait()

        await supervisor.shutdown()

        assert task.cancelled()
        with pytest.raises(RuntimeError):
            supervisor.submit("tx-2")

    def test_rejects_empty_pool(self) -> None:
        with pytest.raises(ValueError):
            ExecutionSupervisor(lambda key: None, max_concurrency=0)
