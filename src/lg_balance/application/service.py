"""BalanceReader — current balance lookup with a default-balance fallback.

Missing rows, unparseable values and, while the policy absorbs read errors,
store outages (STORE_READ_ERRORS) all come back as policy.default_balance.
Other exceptions are caller bugs and propagate. get_balance_record is the
strict variant.
"""

import logging
from typing import Any

from src.lg_balance.domain.constants import USER_BALANCES_TABLE
from src.lg_balance.domain.models import UserBalance
from src.lg_balance.domain.policy import DegradedModePolicy
from src.lg_common.errors import StoreUnavailableError
from src.lg_store.domain.errors import STORE_READ_ERRORS
from src.lg_store.domain.store import LedgerStoreProtocol

logger = logging.getLogger(__name__)


def parse_balance(raw: Any) -> int | None:
    """Stored balance -> int, or None if it is not an integer.

    Accepts ints and integer strings ("50", " -3 "). Rejects bools, floats
    and anything else.
    """
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip(), 10)
        except ValueError:
            return None
    return None


class BalanceReader:
    def __init__(
        self,
        store: LedgerStoreProtocol,
        policy: DegradedModePolicy | None = None,
    ) -> None:
        self._store = store
        self._policy = policy or DegradedModePolicy()

    @property
    def policy(self) -> DegradedModePolicy:
        return self._policy

    async def get_balance(self, user_id: str) -> int:
        try:
            item = await self._store.get_item(USER_BALANCES_TABLE, {"user_id": user_id})
        except STORE_READ_ERRORS as exc:
            if not self._policy.absorb_balance_read_errors:
                raise StoreUnavailableError("balance read", exc) from exc
            logger.exception(
                "Error getting balance for user %s, returning default balance %d",
                user_id,
                self._policy.default_balance,
            )
            return self._policy.default_balance

        raw = item.get("balance") if item else None
        if raw is None:
            logger.warning(
                "Balance not found for user: %s, returning default balance.", user_id
            )
            return self._policy.default_balance

        balance = parse_balance(raw)
        if balance is None:
            logger.warning(
                "Invalid balance format for user: %s (%r), returning default balance.",
                user_id,
                raw,
            )
            return self._policy.default_balance
        return balance

    async def get_balance_record(self, user_id: str) -> UserBalance | None:
        """Raw balance row including version. Store errors always propagate."""
        try:
            item = await self._store.get_item(USER_BALANCES_TABLE, {"user_id": user_id})
        except STORE_READ_ERRORS as exc:
            raise StoreUnavailableError("balance record read", exc) from exc
        return UserBalance.from_item(item) if item else None
