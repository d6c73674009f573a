"""Store Protocol — dependency inversion for testability.

Unit tests inject an AsyncMock conforming to this Protocol.
Infrastructure layer provides the real implementation (SqlLedgerStore).
"""

from typing import Any, Protocol

from src.lg_store.domain.models import UpdateOp, WriteOp


class LedgerStoreProtocol(Protocol):
    async def get_item(self, table: str, key: dict[str, Any]) -> dict[str, Any] | None: ...

    async def update_item(self, op: UpdateOp) -> dict[str, Any]: ...

    async def transact_write(self, ops: list[WriteOp]) -> None: ...
