"""lg_transaction REST API — submit a transaction, look one up by key."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.lg_common.errors import TransactionNotFoundError
from src.lg_common.response import ApiResponse, success_response
from src.lg_transaction.application.schemas import (
    TransactionRecordResponse,
    TransactRequest,
    TransactResponse,
)
from src.lg_transaction.application.service import TransactionProcessor

router = APIRouter(prefix="/transactions", tags=["transactions"])


def get_processor(request: Request) -> TransactionProcessor:
    """FastAPI dependency: the processor built by the app lifespan."""
    return request.app.state.processor


@router.post("")
async def transact(
    body: TransactRequest,
    processor: Annotated[TransactionProcessor, Depends(get_processor)],
    request: Request,
) -> ApiResponse:
    result = await processor.transact(
        idempotent_key=body.idempotent_key,
        user_id=body.user_id,
        amount=body.amount,
        tx_type=body.type,
    )
    data = TransactResponse.from_result(result)
    return success_response(data.model_dump(mode="json"), getattr(request.state, "request_id", None))


@router.get("/{idempotent_key}")
async def get_transaction(
    idempotent_key: str,
    processor: Annotated[TransactionProcessor, Depends(get_processor)],
    request: Request,
) -> ApiResponse:
    record = await processor.get_transaction(idempotent_key)
    if record is None:
        raise TransactionNotFoundError(idempotent_key)
    data = TransactionRecordResponse.from_record(record)
    return success_response(data.model_dump(), getattr(request.state, "request_id", None))
