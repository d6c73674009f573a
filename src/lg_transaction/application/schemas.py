"""Pydantic schemas for lg_transaction API."""

from pydantic import BaseModel, Field, field_validator

from src.lg_common.enums import TransactionStatus
from src.lg_transaction.domain.models import TransactionRecord, TransactResult

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class TransactRequest(BaseModel):
    idempotent_key: str = Field(..., min_length=1, max_length=128)
    user_id: str = Field(..., min_length=1, max_length=64)
    # Left loose on purpose: amount/type rules live in TransactionProcessor so
    # API callers and library callers get the same errors.
    amount: float | int | str | None
    type: str

    @field_validator("idempotent_key", "user_id")
    @classmethod
    def no_whitespace(cls, v: str) -> str:
        if v != v.strip():
            raise ValueError("must not have leading or trailing whitespace")
        return v


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactResponse(BaseModel):
    status: TransactionStatus
    message: str
    new_balance: int | None
    transaction_id: str | None

    @classmethod
    def from_result(cls, result: TransactResult) -> "TransactResponse":
        return cls(
            status=result.status,
            message=result.message,
            new_balance=result.new_balance,
            transaction_id=result.transaction_id,
        )


class TransactionRecordResponse(BaseModel):
    idempotent_key: str
    user_id: str
    amount: int
    type: str
    transaction_id: str
    timestamp: str  # ISO8601 string

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionRecordResponse":
        return cls(**record.to_item())
