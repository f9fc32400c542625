"""Abstract base class for the remote table-per-entity data store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Row = dict[str, Any]


class TableBackend(ABC):
    """Table-per-entity CRUD against the backing data store.

    Rows use snake_case column names and always carry ``id`` (a
    client-generated UUID) and ``user_id``. Implementations raise
    ``NetworkError`` for transient failures, ``TableMissingError`` when a
    table does not exist and ``NotFoundError`` when deleting an absent row.
    """

    @abstractmethod
    async def list_rows(self, table: str, user_id: str) -> list[Row]:
        """List every row of ``table`` owned by ``user_id``."""

    @abstractmethod
    async def upsert_row(self, table: str, row: Row) -> Row:
        """Insert or replace a row keyed by its ``id``.

        Calling this twice with the same payload is safe.
        """

    @abstractmethod
    async def delete_row(self, table: str, row_id: str) -> None:
        """Delete a row by id."""

    async def close(self) -> None:
        """Release any connection held by the backend."""
