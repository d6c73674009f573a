"""Tests for domain models, policy, id generation and datetime utils."""

from datetime import UTC, datetime

from config.settings import Settings
from src.lg_balance.domain.models import UserBalance
from src.lg_balance.domain.policy import DegradedModePolicy
from src.lg_common.datetime_utils import utc_now, utc_now_iso
from src.lg_common.enums import TransactionStatus, TransactionType
from src.lg_common.id_generator import new_transaction_id
from src.lg_transaction.domain.models import TransactionRecord, TransactResult


def _make_record() -> TransactionRecord:
    return TransactionRecord(
        idempotent_key="k-1",
        user_id="user-1",
        amount=10,
        type=TransactionType.DEBIT,
        transaction_id="t-1",
        timestamp="2026-10-19T08:00:00.000Z",
    )


class TestTransactionRecord:
    def test_to_item_stores_type_as_string(self) -> None:
        item = _make_record().to_item()
        assert item["type"] == "debit"
        assert item["idempotent_key"] == "k-1"

    def test_from_item(self) -> None:
        item = _make_record().to_item()
        assert TransactionRecord.from_item(item) == _make_record()


class TestTransactResult:
    def test_processed_message(self) -> None:
        result = TransactResult(status=TransactionStatus.PROCESSED, new_balance=60)
        assert str(result) == "Transaction processed successfully. New balance: 60"

    def test_already_processed(self) -> None:
        result = TransactResult.already_processed()
        assert result.new_balance is None
        assert result.message == "Transaction already processed"


class TestUserBalance:
    def test_from_item_defaults_version(self) -> None:
        assert UserBalance.from_item({"user_id": "1", "balance": "5"}) == UserBalance("1", 5, 0)


class TestDegradedModePolicy:
    def test_defaults_absorb(self) -> None:
        policy = DegradedModePolicy()
        assert policy.default_balance == 100
        assert policy.absorb_balance_read_errors
        assert policy.absorb_idempotency_check_errors

    def test_strict(self) -> None:
        policy = DegradedModePolicy.strict()
        assert not policy.absorb_balance_read_errors
        assert not policy.absorb_idempotency_check_errors

    def test_from_settings(self) -> None:
        settings = Settings(DEFAULT_BALANCE=0, ABSORB_IDEMPOTENCY_CHECK_ERRORS=False)
        policy = DegradedModePolicy.from_settings(settings)
        assert policy.default_balance == 0
        assert policy.absorb_balance_read_errors
        assert not policy.absorb_idempotency_check_errors


class TestIdGenerator:
    def test_unique_ids(self) -> None:
        ids = {new_transaction_id() for _ in range(1000)}
        assert len(ids) == 1000


class TestUtcNow:
    def test_is_utc(self) -> None:
        now = utc_now()
        assert isinstance(now, datetime)
        assert now.tzinfo == UTC

    def test_iso_has_z_suffix(self) -> None:
        stamp = utc_now_iso()
        assert stamp.endswith("Z")
        assert datetime.fromisoformat(stamp.replace("Z", "+00:00")).tzinfo is not None
