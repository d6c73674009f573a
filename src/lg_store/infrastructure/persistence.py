"""SqlLedgerStore — concrete implementation of LedgerStoreProtocol.

Each public call opens its own session and owns its transaction, so the
store is safe to share across concurrent requests. A conditional UPDATE that
touches 0 rows means its precondition did not hold.

transact_write applies every part inside one database transaction and rolls
the whole thing back on the first failed precondition.
"""

from typing import Any

from sqlalchemy import Table, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.lg_common.database import Base
from src.lg_store.domain.errors import (
    ConditionalCheckFailedError,
    StoreError,
    TransactionCanceledError,
)
from src.lg_store.domain.models import Precondition, PutOp, UpdateOp, WriteOp

# Registers the ledger tables on Base.metadata
from src.lg_store.infrastructure import db_models  # noqa: F401


class SqlLedgerStore:
    """Key-value view over the ledger tables registered on Base.metadata."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None:
        tbl, pk = self._resolve(table, key)
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(tbl).where(tbl.c[pk] == key[pk]))
                row = result.mappings().first()
        except SQLAlchemyError as exc:
            raise StoreError(f"get_item on {table} failed: {exc}") from exc
        return dict(row) if row is not None else None

    async def update_item(self, op: UpdateOp) -> dict[str, Any]:
        """Apply a single UpdateOp and return the item as stored afterwards."""
        async with self._session_factory() as session:
            try:
                item = await self._apply_update(session, op)
                await session.commit()
            except ConditionalCheckFailedError:
                await session.rollback()
                raise
            except SQLAlchemyError as exc:
                await session.rollback()
                raise StoreError(f"update_item on {op.table} failed: {exc}") from exc
        return item

    async def transact_write(self, ops: list[WriteOp]) -> None:
        """All-or-nothing write of every op.

        Raises TransactionCanceledError when any precondition fails; its
        `reasons` list marks the offending part by index.
        """
        self._check_distinct_targets(ops)
        reasons: list[str | None] = [None] * len(ops)
        async with self._session_factory() as session:
            try:
                for index, op in enumerate(ops):
                    try:
                        if isinstance(op, UpdateOp):
                            await self._apply_update(session, op)
                        else:
                            await self._apply_put(session, op)
                    except ConditionalCheckFailedError as exc:
                        reasons[index] = "ConditionalCheckFailed"
                        await session.rollback()
                        raise TransactionCanceledError(reasons) from exc
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                raise StoreError(f"transact_write failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _table(self, table: str) -> tuple[Table, str]:
        tbl = Base.metadata.tables.get(table)
        if tbl is None:
            raise ValueError(f"Unknown table: {table}")
        pk_cols = [col.name for col in tbl.primary_key.columns]
        if len(pk_cols) != 1:
            raise ValueError(f"Table {table} must have a single-attribute key, has {pk_cols}")
        return tbl, pk_cols[0]

    def _resolve(self, table: str, key: dict[str, Any]) -> tuple[Table, str]:
        tbl, pk = self._table(table)
        if set(key) != {pk}:
            raise ValueError(f"Key for {table} must be exactly ['{pk}'], got {sorted(key)}")
        return tbl, pk

    def _check_distinct_targets(self, ops: list[WriteOp]) -> None:
        if not ops:
            raise ValueError("transact_write requires at least one operation")
        seen: set[tuple[str, Any]] = set()
        for op in ops:
            if isinstance(op, UpdateOp):
                _, pk = self._resolve(op.table, op.key)
                target = (op.table, op.key[pk])
            else:
                _, pk = self._table(op.table)
                target = (op.table, op.item.get(pk))
            if target in seen:
                raise ValueError(f"Multiple operations target the same item: {target}")
            seen.add(target)

    async def _exists(self, session: AsyncSession, tbl: Table, pk: str, value: Any) -> bool:
        result = await session.execute(select(tbl.c[pk]).where(tbl.c[pk] == value))
        return result.first() is not None

    async def _apply_update(self, session: AsyncSession, op: UpdateOp) -> dict[str, Any]:
        if op.precondition is Precondition.ITEM_NOT_EXISTS:
            raise ValueError("UpdateOp does not support ITEM_NOT_EXISTS; use PutOp")
        tbl, pk = self._resolve(op.table, op.key)

        values: dict[str, Any] = dict(op.set_fields)
        for attr, delta in op.increments.items():
            values[attr] = tbl.c[attr] + delta

        stmt = update(tbl).where(tbl.c[pk] == op.key[pk])
        for attr, expected in op.expected.items():
            stmt = stmt.where(tbl.c[attr] == expected)
        result = await session.execute(stmt.values(**values).returning(*tbl.c))
        row = result.mappings().first()
        if row is not None:
            return dict(row)

        if op.is_conditional:
            reason = (
                f"expected {op.expected}"
                if op.expected and await self._exists(session, tbl, pk, op.key[pk])
                else "item does not exist"
            )
            raise ConditionalCheckFailedError(op.table, op.key, reason)

        # Unconditional update of a missing item creates it
        item = {pk: op.key[pk], **op.set_fields, **op.increments}
        await session.execute(insert(tbl).values(**item))
        return item

    async def _apply_put(self, session: AsyncSession, op: PutOp) -> None:
        tbl, pk = self._table(op.table)
        if pk not in op.item:
            raise ValueError(f"Item for {op.table} is missing key attribute {pk!r}")
        key = {pk: op.item[pk]}
        exists = await self._exists(session, tbl, pk, op.item[pk])

        if op.precondition is Precondition.ITEM_NOT_EXISTS and exists:
            raise ConditionalCheckFailedError(op.table, key, "item already exists")
        if op.precondition is Precondition.ITEM_EXISTS and not exists:
            raise ConditionalCheckFailedError(op.table, key, "item does not exist")

        if exists:
            await session.execute(
                update(tbl).where(tbl.c[pk] == op.item[pk]).values(**op.item)
            )
            return
        try:
            await session.execute(insert(tbl).values(**op.item))
        except IntegrityError as exc:
            # A concurrent writer inserted the same key after our existence check
            if op.precondition is Precondition.ITEM_NOT_EXISTS:
                raise ConditionalCheckFailedError(op.table, key, "item already exists") from exc
            raise
