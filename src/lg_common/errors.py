"""Unified error codes and custom exceptions.

Error code ranges:
  2xxx: Balance / Transaction
  9xxx: System

Transaction errors form one tagged family: every subclass of
TransactionError carries a `kind` (TransactionErrorKind) and an optional
`cause` holding the underlying exception.
"""

from src.lg_common.enums import TransactionErrorKind


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 2xxx: Balance / Transaction ---

class TransactionError(AppError):
    """Base for every error raised by TransactionProcessor."""

    kind: TransactionErrorKind

    def __init__(
        self,
        kind: TransactionErrorKind,
        code: int,
        message: str,
        http_status: int,
        cause: BaseException | None = None,
    ) -> None:
        self.kind = kind
        self.cause = cause
        super().__init__(code, message, http_status)


class InsufficientBalanceError(TransactionError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            TransactionErrorKind.INSUFFICIENT_BALANCE,
            2001,
            "Insufficient balance.",
            422,
        )


class InvalidAmountError(TransactionError):
    def __init__(self, message: str, code: int = 2101) -> None:
        super().__init__(TransactionErrorKind.INVALID_AMOUNT, code, message, 422)


class InvalidTransactionTypeError(InvalidAmountError):
    def __init__(self, tx_type: object) -> None:
        super().__init__(
            f"Transaction type must be 'credit' or 'debit', got {tx_type!r}.", code=2103
        )


class TransactionFailedError(TransactionError):
    """Commit-step failure. `conflict` is True when a store precondition rejected it."""

    def __init__(self, cause: BaseException, conflict: bool = False) -> None:
        self.conflict = conflict
        detail = str(cause) or type(cause).__name__
        super().__init__(
            TransactionErrorKind.TRANSACTION_FAILED,
            2102,
            f"Transaction failed: {detail}",
            409 if conflict else 500,
            cause=cause,
        )


class TransactionNotFoundError(AppError):
    def __init__(self, idempotent_key: str) -> None:
        super().__init__(2104, f"Transaction not found: {idempotent_key}", 404)


# --- 9xxx: System ---


class StoreUnavailableError(AppError):
    """Raised only when DegradedModePolicy disables absorbing store read errors."""

    def __init__(self, operation: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(9003, f"Ledger store unavailable during {operation}: {cause}", 503)
