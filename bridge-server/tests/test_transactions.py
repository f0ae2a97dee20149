"""Tests for the transaction ledger backed by a throwaway SQLite database."""

import pytest

from xrpfi.modules.transactions import (
    DuplicateTransactionError,
    InvalidStatusTransitionError,
    TransactionNotFoundError,
    TransactionStatus,
)

from .conftest import TX_HASH, USER_XRPL

OTHER_HASH = "B" * 64


class TestCreate:
    @pytest.mark.asyncio
    async def test_new_records_start_pending(self, ledger, record_factory) -> None:
        record = await record_factory()

        assert record.status is TransactionStatus.PENDING
        assert record.source_tx_hash == TX_HASH
        assert record.source_amount == "10"
        assert record.destination_tx_hash is None
        assert record.error_message is None
        assert record.is_terminal is False

    @pytest.mark.asyncio
    async def test_duplicate_hash_is_rejected(self, ledger, record_factory) -> None:
        await record_factory()

        with pytest.raises(DuplicateTransactionError):
            await record_factory()

        assert len(await ledger.list_by_address(USER_XRPL)) == 1

    @pytest.mark.asyncio
    async def test_get_unknown_hash(self, ledger) -> None:
        assert await ledger.find("missing") is None
        with pytest.raises(TransactionNotFoundError):
            await ledger.get("missing")


class TestStatusTransitions:
    @pytest.mark.asyncio
    async def test_forward_path_to_completed(self, ledger, record_factory) -> None:
        await record_factory()

        await ledger.update(TX_HASH, status=TransactionStatus.PROVING)
        await ledger.update(TX_HASH, status=TransactionStatus.EXECUTING)
        record = await ledger.update(
            TX_HASH,
            status=TransactionStatus.COMPLETED,
            destination_account="0xabc",
            destination_tx_hash="0xdef",
        )

        assert record.status is TransactionStatus.COMPLETED
        assert record.destination_account == "0xabc"
        assert record.destination_tx_hash == "0xdef"
        assert record.is_terminal is True

    @pytest.mark.asyncio
    async def test_skipping_a_stage_is_rejected(self, ledger, record_factory) -> None:
        await record_factory()

        with pytest.raises(InvalidStatusTransitionError) as excinfo:
            await ledger.update(TX_HASH, status=TransactionStatus.COMPLETED)

        assert excinfo.value.current == "pending"
        assert (await ledger.get(TX_HASH)).status is TransactionStatus.PENDING

    @pytest.mark.asyncio
    async def test_terminal_records_do_not_move(self, ledger, record_factory) -> None:
        await record_factory()
        await ledger.update(TX_HASH, status=TransactionStatus.FAILED, error_message="boom")

        with pytest.raises(InvalidStatusTransitionError):
            await ledger.update(TX_HASH, status=TransactionStatus.PROVING)

    @pytest.mark.asyncio
    async def test_pending_is_only_reachable_through_retry(self, ledger, record_factory) -> None:
        await record_factory()
        await ledger.update(TX_HASH, status=TransactionStatus.FAILED, error_message="boom")

        with pytest.raises(InvalidStatusTransitionError):
            await ledger.update(TX_HASH, status=TransactionStatus.PENDING)

    @pytest.mark.asyncio
    async def test_field_update_without_status_change(self, ledger, record_factory) -> None:
        await record_factory()

        record = await ledger.update(TX_HASH, error_message="note")

        assert record.status is TransactionStatus.PENDING
        assert record.error_message == "note"
        assert record.updated_at >= record.created_at

    @pytest.mark.asyncio
    async def test_update_unknown_hash(self, ledger) -> None:
        with pytest.raises(TransactionNotFoundError):
            await ledger.update("missing", error_message="x")


class TestRetry:
    @pytest.mark.asyncio
    async def test_failed_goes_back_to_pending_without_error(self, ledger, record_factory) -> None:
        await record_factory()
        await ledger.update(TX_HASH, status=TransactionStatus.FAILED, error_message="boom")

        record = await ledger.retry(TX_HASH)

        assert record.status is TransactionStatus.PENDING
        assert record.error_message is None

    @pytest.mark.asyncio
    async def test_only_failed_records_can_be_retried(self, ledger, record_factory) -> None:
        await record_factory()

        with pytest.raises(InvalidStatusTransitionError):
            await ledger.retry(TX_HASH)

    @pytest.mark.asyncio
    async def test_retry_unknown_hash(self, ledger) -> None:
        with pytest.raises(TransactionNotFoundError):
            await ledger.retry("missing")


class TestQueries:
    @pytest.mark.asyncio
    async def test_list_by_address_is_newest_first(self, ledger, record_factory) -> None:
        await record_factory(source_tx_hash=TX_HASH)
        await record_factory(source_tx_hash=OTHER_HASH)
        await record_factory(source_tx_hash="C" * 64, source_address="rSomeoneElse")

        records = await ledger.list_by_address(USER_XRPL)

        assert [r.source_tx_hash for r in records] == [OTHER_HASH, TX_HASH]
        assert [r.source_tx_hash for r in await ledger.list_by_address(USER_XRPL, limit=1, offset=1)] == [TX_HASH]

    @pytest.mark.asyncio
    async def test_list_by_status(self, ledger, record_factory) -> None:
        await record_factory(source_tx_hash=TX_HASH)
        await record_factory(source_tx_hash=OTHER_HASH)
        await ledger.update(OTHER_HASH, status=TransactionStatus.PROVING)

        proving = await ledger.list_by_status(TransactionStatus.PROVING)

        assert [r.source_tx_hash for r in proving] == [OTHER_HASH]

    @pytest.mark.asyncio
    async def test_fail_interrupted_marks_only_active_records(self, ledger, record_factory) -> None:
        await record_factory(source_tx_hash=TX_HASH)
        await record_factory(source_tx_hash=OTHER_HASH)
        await ledger.update(OTHER_HASH, status=TransactionStatus.FAILED, error_message="original")

        interrupted = await ledger.fail_interrupted("restarted")

        assert [r.source_tx_hash for r in interrupted] == [TX_HASH]
        assert (await ledger.get(TX_HASH)).error_message == "restarted"
        assert (await ledger.get(OTHER_HASH)).error_message == "original"
