"""Shared test fixtures.

Integration fixtures run the real SqlLedgerStore against a throwaway SQLite
file (aiosqlite), one database per test.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine

from src.lg_balance.domain.constants import USER_BALANCES_TABLE
from src.lg_balance.domain.policy import DegradedModePolicy
from src.lg_common.database import create_all_tables, create_engine, create_session_factory
from src.lg_store.domain.models import PutOp
from src.lg_store.infrastructure.persistence import SqlLedgerStore
from src.main import create_app, wire_components


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    eng = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await create_all_tables(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def store(engine: AsyncEngine) -> SqlLedgerStore:
    return SqlLedgerStore(create_session_factory(engine))


@pytest.fixture
def seed_balance(store: SqlLedgerStore) -> Callable[..., Awaitable[None]]:
    """Insert or overwrite a UserBalances row."""

    async def _seed(user_id: str, balance: int, version: int = 0) -> None:
        await store.transact_write(
            [
                PutOp(
                    table=USER_BALANCES_TABLE,
                    item={"user_id": user_id, "balance": balance, "version": version},
                )
            ]
        )

    return _seed


@pytest.fixture
async def client(store: SqlLedgerStore) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client; components are wired by hand since ASGITransport skips lifespan."""
    app = create_app()
    wire_components(app, store, DegradedModePolicy())
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
