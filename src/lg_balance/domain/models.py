"""Domain models for lg_balance — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from typing import Any


@dataclass
class UserBalance:
    user_id: str
    balance: int
    version: int = 0

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> "UserBalance":
        return cls(
            user_id=str(item["user_id"]),
            balance=int(item["balance"]),
            version=int(item.get("version") or 0),
        )
