"""DegradedModePolicy — what to do when the ledger store cannot be read.

Absorbing is an availability-over-correctness trade:
  - balance read errors  -> the reader returns default_balance
  - idempotency check errors -> the request is treated as not yet processed,
    which risks a duplicate apply if the original commit did land

Both default to absorbing. Turn them off to surface StoreUnavailableError.
"""

from dataclasses import dataclass

from config.settings import Settings
from src.lg_balance.domain.constants import DEFAULT_BALANCE


@dataclass(frozen=True)
class DegradedModePolicy:
    default_balance: int = DEFAULT_BALANCE
    absorb_balance_read_errors: bool = True
    absorb_idempotency_check_errors: bool = True

    @classmethod
    def strict(cls, default_balance: int = DEFAULT_BALANCE) -> "DegradedModePolicy":
        return cls(
            default_balance=default_balance,
            absorb_balance_read_errors=False,
            absorb_idempotency_check_errors=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DegradedModePolicy":
        return cls(
            default_balance=settings.DEFAULT_BALANCE,
            absorb_balance_read_errors=settings.ABSORB_BALANCE_READ_ERRORS,
            absorb_idempotency_check_errors=settings.ABSORB_IDEMPOTENCY_CHECK_ERRORS,
        )
