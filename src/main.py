"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
      or: python -m src.main   (uvicorn on the uvloop event loop)

The lifespan builds the long-lived collaborators once and shares them:
engine -> SqlLedgerStore -> BalanceReader -> TransactionProcessor.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import Settings, settings
from src.lg_balance.api.router import router as balance_router
from src.lg_balance.application.service import BalanceReader
from src.lg_balance.domain.policy import DegradedModePolicy
from src.lg_common.database import create_engine, create_session_factory
from src.lg_common.errors import AppError
from src.lg_common.response import error_response
from src.lg_gateway.middleware.request_log import RequestLogMiddleware
from src.lg_store.domain.store import LedgerStoreProtocol
from src.lg_store.infrastructure.persistence import SqlLedgerStore
from src.lg_transaction.api.router import router as transaction_router
from src.lg_transaction.application.service import TransactionProcessor

APP_VERSION = "0.1.0"


def wire_components(
    app: FastAPI, store: LedgerStoreProtocol, policy: DegradedModePolicy
) -> None:
    """Attach reader/processor sharing one store client to app.state."""
    reader = BalanceReader(store, policy)
    app.state.store = store
    app.state.reader = reader
    app.state.processor = TransactionProcessor(store, reader, policy)


def create_app(app_settings: Settings = settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: verify DB, build components. Shutdown: dispose engine."""
        engine = create_engine(app_settings.DATABASE_URL, echo=app_settings.DEBUG)
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        wire_components(
            app,
            SqlLedgerStore(create_session_factory(engine)),
            DegradedModePolicy.from_settings(app_settings),
        )
        yield
        await engine.dispose()

    app = FastAPI(
        title=app_settings.APP_NAME,
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        resp = error_response(
            exc.code, exc.message, getattr(request.state, "request_id", None)
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=resp.model_dump(),
        )

    app.include_router(transaction_router, prefix="/api/v1")
    app.include_router(balance_router, prefix="/api/v1")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": APP_VERSION}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, loop="uvloop")
