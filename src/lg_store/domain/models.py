"""Write operations understood by the ledger store — pure dataclasses.

Items are plain dicts keyed by attribute name. Tables are addressed by
name (see lg_balance.domain.constants), keys by a single primary attribute.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Precondition(str, Enum):
    ITEM_EXISTS = "ITEM_EXISTS"
    ITEM_NOT_EXISTS = "ITEM_NOT_EXISTS"


@dataclass(frozen=True)
class UpdateOp:
    """Set fields on one item.

    - set_fields: attribute -> new value
    - increments: attribute -> delta, applied server-side (attr = attr + delta)
    - precondition: existence check on the target item
    - expected: attribute -> value that must currently be stored (implies existence)

    With no precondition and no expected values, a missing item is created.
    """

    table: str
    key: dict[str, Any]
    set_fields: dict[str, Any]
    increments: dict[str, int] = field(default_factory=dict)
    precondition: Precondition | None = None
    expected: dict[str, Any] = field(default_factory=dict)

    @property
    def is_conditional(self) -> bool:
        return self.precondition is not None or bool(self.expected)


@dataclass(frozen=True)
class PutOp:
    """Write a whole item. ITEM_NOT_EXISTS turns it into insert-only."""

    table: str
    item: dict[str, Any]
    precondition: Precondition | None = None


WriteOp = UpdateOp | PutOp
