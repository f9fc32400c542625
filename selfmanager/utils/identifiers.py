"""Entity identifiers.

Every persisted entity carries a client-generated canonical UUID. Older data
may still hold legacy ids (timestamp strings and the like); ``IdRemapper``
maps each of them to one fresh UUID for the duration of a load pass.
"""

from __future__ import annotations

import re
import uuid
from typing import Callable

UUID_PATTERN = re.compile(
    r'^[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$',
    re.IGNORECASE,
)


def new_id() -> str:
    """Generate a canonical UUID4 string."""
    return str(uuid.uuid4())


def is_valid_uuid(value: str | None) -> bool:
    """Check whether a value is a canonical UUID (versions 1-5)."""
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.match(value) is not None


class IdRemapper:
    """Maps legacy ids to new UUIDs, consistently within one pass.

    Valid UUIDs map to themselves. The first lookup of a legacy id allocates
    a UUID; every later lookup of the same legacy id returns that same UUID,
    so foreign keys rewritten in the same pass stay consistent.
    """

    def __init__(self, id_factory: Callable[[], str] = new_id):
        self._id_factory = id_factory
        self._mapping: dict[str, str] = {}

    def remap(self, old_id: str) -> str:
        if is_valid_uuid(old_id):
            return old_id
        if old_id not in self._mapping:
            self._mapping[old_id] = self._id_factory()
        return self._mapping[old_id]

    @property
    def mapping(self) -> dict[str, str]:
        """Legacy id -> new UUID for every id remapped so far."""
        return dict(self._mapping)

    def __len__(self) -> int:
        return len(self._mapping)
