"""Transaction ID generation.

IDs are opaque strings; callers must not parse them. The processor takes any
zero-arg callable returning a fresh string so tests can pin the value.
"""

import uuid
from typing import Protocol


class IdGenerator(Protocol):
    def __call__(self) -> str: ...


def new_transaction_id() -> str:
    """Random UUID4 string, e.g. '9b2f6c1e-3d5a-4f0e-8a47-2c1d9e6b7f30'."""
    return str(uuid.uuid4())
