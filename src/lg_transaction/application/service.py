"""TransactionProcessor — idempotent credit/debit against the ledger store.

transact() steps:
  1. Validate amount and type (no store access yet)
  2. Idempotency check on TransactionHistory
  3. Read balance through BalanceReader
  4. Sufficiency check (debit only)
  5. One atomic write: balance update (row must exist) + history insert
     (key must not exist)

Nothing here retries. A TransactionFailedError with conflict=True after a
clean idempotency check usually means a concurrent request with the same key
won the race; callers can re-check or retry with the same key.
"""

import logging
import math

from src.lg_balance.application.service import BalanceReader
from src.lg_balance.domain.constants import TRANSACTION_HISTORY_TABLE, USER_BALANCES_TABLE
from src.lg_balance.domain.models import UserBalance
from src.lg_balance.domain.policy import DegradedModePolicy
from src.lg_common.datetime_utils import utc_now_iso
from src.lg_common.enums import TransactionStatus, TransactionType
from src.lg_common.errors import (
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidTransactionTypeError,
    StoreUnavailableError,
    TransactionFailedError,
)
from src.lg_common.id_generator import IdGenerator, new_transaction_id
from src.lg_store.domain.errors import (
    STORE_READ_ERRORS,
    ConditionalCheckFailedError,
    TransactionCanceledError,
)
from src.lg_store.domain.models import Precondition, PutOp, UpdateOp, WriteOp
from src.lg_store.domain.store import LedgerStoreProtocol
from src.lg_transaction.domain.models import TransactionRecord, TransactResult

logger = logging.getLogger(__name__)

# Index of the history insert inside the commit ops
_HISTORY_PART = 1


def validate_amount(amount: object) -> int:
    """Return amount as int, or raise InvalidAmountError.

    Floats are accepted only when integral (10.0 -> 10).
    """
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise InvalidAmountError("Amount must be a valid number.")
    if isinstance(amount, float) and not math.isfinite(amount):
        raise InvalidAmountError("Amount must be a valid number.")
    if amount <= 0:
        raise InvalidAmountError("Amount must be greater than zero.")
    if isinstance(amount, float):
        if not amount.is_integer():
            raise InvalidAmountError("Amount must be a whole number.")
        return int(amount)
    return amount


def parse_transaction_type(tx_type: object) -> TransactionType:
    if isinstance(tx_type, TransactionType):
        return tx_type
    try:
        return TransactionType(tx_type)
    except ValueError as exc:
        raise InvalidTransactionTypeError(tx_type) from exc


def apply_amount(balance: int, amount: int, tx_type: TransactionType) -> int:
    if tx_type is TransactionType.DEBIT:
        if balance < amount:
            raise InsufficientBalanceError(required=amount, available=balance)
        return balance - amount
    return balance + amount


class TransactionProcessor:
    def __init__(
        self,
        store: LedgerStoreProtocol,
        reader: BalanceReader | None = None,
        policy: DegradedModePolicy | None = None,
        id_generator: IdGenerator = new_transaction_id,
    ) -> None:
        self._store = store
        self._reader = reader or BalanceReader(store, policy)
        self._policy = policy or self._reader.policy
        self._new_id = id_generator

    async def transact(
        self,
        idempotent_key: str,
        user_id: str,
        amount: object,
        tx_type: TransactionType | str,
    ) -> TransactResult:
        amount_int = validate_amount(amount)
        kind = parse_transaction_type(tx_type)

        if await self.check_idempotency(idempotent_key):
            logger.info("Transaction idempotency hit: key=%s", idempotent_key)
            return TransactResult.already_processed()

        balance = await self._reader.get_balance(user_id)
        logger.info("Retrieved balance for user %s: %d", user_id, balance)
        new_balance = apply_amount(balance, amount_int, kind)

        record = TransactionRecord(
            idempotent_key=idempotent_key,
            user_id=user_id,
            amount=amount_int,
            type=kind,
            transaction_id=self._new_id(),
            timestamp=utc_now_iso(),
        )
        try:
            await self._store.transact_write(self._commit_ops(record, new_balance))
        except TransactionCanceledError as exc:
            conflict = _HISTORY_PART in exc.failed_parts()
            if conflict:
                logger.warning(
                    "Transaction conflict: key=%s already committed concurrently",
                    idempotent_key,
                )
            else:
                logger.error("Transaction rejected for user %s: %s", user_id, exc)
            raise TransactionFailedError(exc, conflict=conflict) from exc
        except Exception as exc:
            logger.exception("Transaction failed: key=%s user=%s", idempotent_key, user_id)
            raise TransactionFailedError(exc) from exc

        logger.info(
            "Transaction successfully processed for user %s. New balance: %d",
            user_id,
            new_balance,
        )
        return TransactResult(
            status=TransactionStatus.PROCESSED,
            new_balance=new_balance,
            transaction_id=record.transaction_id,
        )

    async def check_idempotency(self, idempotent_key: str) -> bool:
        """True if a history record exists for the key.

        Store errors count as "not processed" unless the policy says otherwise.
        """
        try:
            item = await self._store.get_item(
                TRANSACTION_HISTORY_TABLE, {"idempotent_key": idempotent_key}
            )
        except STORE_READ_ERRORS as exc:
            if not self._policy.absorb_idempotency_check_errors:
                raise StoreUnavailableError("idempotency check", exc) from exc
            logger.exception("Error checking idempotency for key=%s", idempotent_key)
            return False
        return item is not None

    async def get_transaction(self, idempotent_key: str) -> TransactionRecord | None:
        try:
            item = await self._store.get_item(
                TRANSACTION_HISTORY_TABLE, {"idempotent_key": idempotent_key}
            )
        except STORE_READ_ERRORS as exc:
            raise StoreUnavailableError("transaction lookup", exc) from exc
        return TransactionRecord.from_item(item) if item else None

    async def update_balance_optimistic(
        self, user_id: str, new_balance: int, expected_version: int
    ) -> UserBalance:
        """Set balance and bump version, only if version still equals expected_version.

        Standalone read-modify-write primitive; transact() never calls it.
        A stale version raises TransactionFailedError(conflict=True).
        """
        if isinstance(new_balance, bool) or not isinstance(new_balance, int) or new_balance < 0:
            raise InvalidAmountError("Balance must be a non-negative whole number.")
        op = UpdateOp(
            table=USER_BALANCES_TABLE,
            key={"user_id": user_id},
            set_fields={"balance": new_balance, "version": expected_version + 1},
            expected={"version": expected_version},
        )
        try:
            item = await self._store.update_item(op)
        except ConditionalCheckFailedError as exc:
            logger.warning(
                "Version conflict for user %s: expected version %d", user_id, expected_version
            )
            raise TransactionFailedError(exc, conflict=True) from exc
        except Exception as exc:
            logger.exception("Optimistic balance update failed for user %s", user_id)
            raise TransactionFailedError(exc) from exc
        return UserBalance.from_item(item)

    def _commit_ops(self, record: TransactionRecord, new_balance: int) -> list[WriteOp]:
        return [
            UpdateOp(
                table=USER_BALANCES_TABLE,
                key={"user_id": record.user_id},
                set_fields={"balance": new_balance},
                increments={"version": 1},
                precondition=Precondition.ITEM_EXISTS,
            ),
            PutOp(
                table=TRANSACTION_HISTORY_TABLE,
                item=record.to_item(),
                precondition=Precondition.ITEM_NOT_EXISTS,
            ),
        ]
