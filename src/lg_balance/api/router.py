"""lg_balance REST API — current balance by user id."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.lg_balance.application.schemas import BalanceResponse
from src.lg_balance.application.service import BalanceReader
from src.lg_common.response import ApiResponse, success_response

router = APIRouter(prefix="/balances", tags=["balances"])


def get_reader(request: Request) -> BalanceReader:
    """FastAPI dependency: the reader built by the app lifespan."""
    return request.app.state.reader


@router.get("/{user_id}")
async def get_balance(
    user_id: str,
    reader: Annotated[BalanceReader, Depends(get_reader)],
    request: Request,
) -> ApiResponse:
    balance = await reader.get_balance(user_id)
    data = BalanceResponse(user_id=user_id, balance=balance)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
