"""End-to-end TransactionProcessor behaviour over the real SqlLedgerStore."""

import asyncio

import pytest

from src.lg_balance.application.service import BalanceReader
from src.lg_common.enums import TransactionStatus
from src.lg_common.errors import InsufficientBalanceError, TransactionFailedError
from src.lg_store.infrastructure.persistence import SqlLedgerStore
from src.lg_transaction.application.service import TransactionProcessor


@pytest.fixture
def reader(store: SqlLedgerStore) -> BalanceReader:
    return BalanceReader(store)


@pytest.fixture
def processor(store: SqlLedgerStore, reader: BalanceReader) -> TransactionProcessor:
    return TransactionProcessor(store, reader)


class TestRoundTrip:
    async def test_credit_then_read(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50)

        result = await processor.transact("k-1", "1", 10, "credit")

        assert result.message == "Transaction processed successfully. New balance: 60"
        assert await reader.get_balance("1") == 60

    async def test_debit_then_read(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50)

        await processor.transact("k-1", "1", 20, "debit")

        assert await reader.get_balance("1") == 30

    async def test_history_record_written(self, processor, seed_balance) -> None:
        await seed_balance("1", 50)

        result = await processor.transact("k-1", "1", 20, "debit")

        record = await processor.get_transaction("k-1")
        assert record is not None
        assert record.transaction_id == result.transaction_id
        assert record.amount == 20
        assert record.user_id == "1"

    async def test_commit_bumps_version(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50, version=3)

        await processor.transact("k-1", "1", 1, "credit")

        record = await reader.get_balance_record("1")
        assert record is not None
        assert record.version == 4


class TestIdempotence:
    async def test_same_request_twice_applies_once(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50)

        first = await processor.transact("k-1", "1", 10, "credit")
        second = await processor.transact("k-1", "1", 10, "credit")

        assert first.status is TransactionStatus.PROCESSED
        assert second.status is TransactionStatus.ALREADY_PROCESSED
        assert await reader.get_balance("1") == 60

    async def test_concurrent_same_key_commits_once(
        self, processor, reader, seed_balance
    ) -> None:
        await seed_balance("1", 50)

        outcomes = await asyncio.gather(
            *(processor.transact("k-1", "1", 10, "credit") for _ in range(3)),
            return_exceptions=True,
        )

        committed = [
            o for o in outcomes
            if not isinstance(o, BaseException) and o.status is TransactionStatus.PROCESSED
        ]
        assert len(committed) == 1
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                assert isinstance(outcome, TransactionFailedError)
        assert await reader.get_balance("1") == 60


class TestRejections:
    async def test_insufficient_balance_leaves_state(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50)

        with pytest.raises(InsufficientBalanceError):
            await processor.transact("k-1", "1", 51, "debit")

        assert await reader.get_balance("1") == 50
        assert await processor.get_transaction("k-1") is None

    async def test_unknown_user_cannot_commit(self, processor) -> None:
        # The reader defaults to 100, but the commit requires the row to exist
        with pytest.raises(TransactionFailedError) as exc_info:
            await processor.transact("k-1", "ghost", 10, "credit")

        assert exc_info.value.conflict is False
        assert exc_info.value.cause.failed_parts() == [0]
        assert await processor.get_transaction("k-1") is None


class TestOptimisticUpdate:
    async def test_read_modify_write(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50, version=0)
        current = await reader.get_balance_record("1")
        assert current is not None

        updated = await processor.update_balance_optimistic(
            "1", current.balance + 25, current.version
        )

        assert updated.balance == 75
        assert updated.version == 1
        assert await reader.get_balance("1") == 75

    async def test_stale_version_after_transact(self, processor, reader, seed_balance) -> None:
        await seed_balance("1", 50, version=0)
        stale = await reader.get_balance_record("1")
        assert stale is not None
        await processor.transact("k-1", "1", 10, "credit")

        with pytest.raises(TransactionFailedError) as exc_info:
            await processor.update_balance_optimistic("1", stale.balance + 1, stale.version)

        assert exc_info.value.conflict is True
        assert await reader.get_balance("1") == 60
