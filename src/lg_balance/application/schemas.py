"""Pydantic schemas for lg_balance API."""

from pydantic import BaseModel


class BalanceResponse(BaseModel):
    user_id: str
    balance: int
