"""Store-level exceptions. Never surfaced to API callers directly —
lg_transaction wraps them in TransactionFailedError / StoreUnavailableError."""


class StoreError(Exception):
    """Transport / I/O failure talking to the ledger store."""


class ConditionalCheckFailedError(StoreError):
    def __init__(self, table: str, key: dict, reason: str) -> None:
        self.table = table
        self.key = key
        self.reason = reason
        super().__init__(f"Conditional check failed on {table} {key}: {reason}")


class TransactionCanceledError(StoreError):
    """An atomic multi-write was rejected; nothing was applied.

    reasons[i] is None when part i was fine, otherwise why it failed.
    """

    def __init__(self, reasons: list[str | None]) -> None:
        self.reasons = reasons
        listed = ", ".join(r or "None" for r in reasons)
        super().__init__(f"Transaction cancelled, reasons [{listed}]")

    def failed_parts(self) -> list[int]:
        return [i for i, reason in enumerate(self.reasons) if reason is not None]


# What a read can fail with when the store itself is unreachable or broken.
# Anything else (ValueError for an unknown table, TypeError, ...) is a bug
# in the caller and must propagate.
STORE_READ_ERRORS: tuple[type[BaseException], ...] = (StoreError, OSError)
