"""In-process implementation of TableBackend."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

from selfmanager.core.exceptions import NotFoundError
from selfmanager.storage.backend.table_backend import Row, TableBackend


@dataclass
class InMemoryTableBackend(TableBackend):
    """Keeps every table as a list of rows.

    Used for the offline ``memory`` data store and by the tests. Rows are
    kept in insertion order; ``seed`` appends rows as-is, so a table can be
    given the duplicate rows legacy data sometimes holds. A table can be made
    to fail every call with ``set_failure``. With ``record_calls`` set, every
    call is appended to ``calls``.
    """

    tables: dict[str, list[Row]] = field(default_factory=dict)
    record_calls: bool = False
    calls: list[tuple[str, str, str]] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)

    def seed(self, table: str, rows: list[Row]) -> None:
        self.tables.setdefault(table, []).extend(copy.deepcopy(r) for r in rows)

    def rows(self, table: str) -> list[Row]:
        return copy.deepcopy(self.tables.get(table, []))

    def set_failure(self, table: str, error: Exception) -> None:
        self.failures[table] = error

    def clear_failure(self, table: str) -> None:
        self.failures.pop(table, None)

    def calls_for(self, operation: str, table: str | None = None) -> list[tuple[str, str, str]]:
        return [
            c for c in self.calls
            if c[0] == operation and (table is None or c[1] == table)
        ]

    def _record(self, operation: str, table: str, key: str) -> None:
        if self.record_calls:
            self.calls.append((operation, table, key))
        error = self.failures.get(table)
        if error is not None:
            raise error

    async def list_rows(self, table: str, user_id: str) -> list[Row]:
        self._record('list', table, user_id)
        return [
            copy.deepcopy(r) for r in self.tables.get(table, [])
            if r.get('user_id') == user_id
        ]

    async def upsert_row(self, table: str, row: Row) -> Row:
        self._record('upsert', table, row['id'])
        rows = self.tables.setdefault(table, [])
        for i, existing in enumerate(rows):
            if existing.get('id') == row['id']:
                rows[i] = copy.deepcopy(row)
                break
        else:
            rows.append(copy.deepcopy(row))
        return copy.deepcopy(row)

    async def delete_row(self, table: str, row_id: str) -> None:
        self._record('delete', table, row_id)
        rows = self.tables.get(table, [])
        remaining = [r for r in rows if r.get('id') != row_id]
        if len(remaining) == len(rows):
            raise NotFoundError(f'Row {row_id} not found in {table}')
        self.tables[table] = remaining
