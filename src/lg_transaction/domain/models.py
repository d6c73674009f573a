"""Domain models for lg_transaction — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import asdict, dataclass
from typing import Any

from src.lg_common.enums import TransactionStatus, TransactionType

ALREADY_PROCESSED_MESSAGE = "Transaction already processed"


@dataclass(frozen=True)
class TransactionRecord:
    """One accepted request. Append-only: written once at commit, never updated."""

    idempotent_key: str
    user_id: str
    amount: int                  # always positive; direction comes from type
    type: TransactionType
    transaction_id: str
    timestamp: str               # ISO-8601 UTC

    def to_item(self) -> dict[str, Any]:
        item = asdict(self)
        item["type"] = self.type.value
        return item

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "TransactionRecord":
        return cls(
            idempotent_key=item["idempotent_key"],
            user_id=item["user_id"],
            amount=int(item["amount"]),
            type=TransactionType(item["type"]),
            transaction_id=item["transaction_id"],
            timestamp=item["timestamp"],
        )


@dataclass(frozen=True)
class TransactResult:
    status: TransactionStatus
    new_balance: int | None = None
    transaction_id: str | None = None

    @property
    def message(self) -> str:
        if self.status is TransactionStatus.ALREADY_PROCESSED:
            return ALREADY_PROCESSED_MESSAGE
        return f"Transaction processed successfully. New balance: {self.new_balance}"

    def __str__(self) -> str:
        return self.message

    @classmethod
    def already_processed(cls) -> "TransactResult":
        return cls(status=TransactionStatus.ALREADY_PROCESSED)
