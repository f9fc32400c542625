"""Base class for the per-entity stores."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Generic, TypeVar

from selfmanager.core.exceptions import DataStoreError, NotFoundError, ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.backend.table_backend import Row, TableBackend
from selfmanager.utils.identifiers import is_valid_uuid

E = TypeVar('E')


class EntityStore(ABC, Generic[E]):
    """Typed CRUD for one entity kind of one user.

    The store keeps the user's collection in memory and mirrors every change
    to the remote table. Remote writes are fail-soft: when the backend fails,
    the local change stands, the failure is logged and the entity is flagged
    as pending sync until ``sync_pending`` manages to write it.

    Entities loaded under a legacy id and given a new UUID are written under
    the new id first; only once that write succeeds is the legacy row
    deleted, so a reload never sees both.

    Subclasses set ``table`` and implement the row converters. ``label_field``
    names the attribute that must be a non-empty string (None: no check).
    """

    table: ClassVar[str]
    entity_name: ClassVar[str] = 'entity'
    label_field: ClassVar[str | None] = 'title'

    def __init__(self, backend: TableBackend, user_id: str):
        self.backend = backend
        self.user_id = user_id
        self._items: dict[str, E] = {}
        self._pending_upserts: set[str] = set()
        self._pending_deletes: set[str] = set()
        # new UUID -> legacy id whose row still has to be removed
        self._legacy_ids: dict[str, str] = {}

    @abstractmethod
    def _to_row(self, entity: E) -> Row:
        """Convert an entity to a table row (without ``user_id``)."""

    @abstractmethod
    def _from_row(self, row: Row) -> E:
        """Convert a table row to an entity."""

    def _validate(self, entity: E) -> None:
        if self.label_field is None:
            return
        label = getattr(entity, self.label_field, None)
        if not isinstance(label, str) or not label.strip():
            raise ValidationError(f'{self.entity_name} {self.label_field} cannot be empty')

    def validate(self, entity: E) -> None:
        self._validate(entity)

    def to_row(self, entity: E) -> Row:
        row = self._to_row(entity)
        row['user_id'] = self.user_id
        return row

    def from_row(self, row: Row) -> E:
        return self._from_row(row)

    async def fetch(self) -> list[E]:
        """List the user's entities from the remote table.

        Backend errors propagate; malformed rows are skipped.
        """
        rows = await self.backend.list_rows(self.table, self.user_id)
        entities = []
        for row in rows:
            try:
                entities.append(self._from_row(row))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f'Skipping malformed {self.table} row {row.get("id")}: {e}')
        return entities

    def replace_all(self, entities: list[E]) -> None:
        """Install a freshly loaded collection, dropping any pending state."""
        self._items = {}
        for entity in entities:
            self._items.setdefault(entity.id, entity)
        self._pending_upserts.clear()
        self._pending_deletes.clear()
        self._legacy_ids.clear()

    def all(self) -> list[E]:
        return list(self._items.values())

    def get(self, entity_id: str) -> E | None:
        return self._items.get(entity_id)

    def require(self, entity_id: str) -> E:
        entity = self._items.get(entity_id)
        if entity is None:
            raise NotFoundError(f'{self.entity_name.capitalize()} {entity_id} not found')
        return entity

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    async def save(self, entity: E) -> E:
        """Validate, store locally, then upsert remotely (fail-soft)."""
        self._validate(entity)
        self._items[entity.id] = entity
        self._pending_deletes.discard(entity.id)
        await self._push(entity)
        return entity

    async def _push(self, entity: E) -> bool:
        try:
            await self.backend.upsert_row(self.table, self.to_row(entity))
        except DataStoreError as e:
            logger.warning(
                f'Error saving {self.entity_name} {entity.id}, keeping local copy pending sync: {e}'
            )
            self._pending_upserts.add(entity.id)
            return False
        self._pending_upserts.discard(entity.id)

        legacy_id = self._legacy_ids.pop(entity.id, None)
        if legacy_id is not None:
            await self._push_delete(legacy_id)
        return True

    def mark_pending(self, entity_id: str) -> None:
        """Flag a local entity as needing a remote write."""
        if entity_id in self._items:
            self._pending_upserts.add(entity_id)

    def mark_remapped(self, entity_id: str, legacy_id: str) -> None:
        """Flag an entity loaded under ``legacy_id`` for rewrite under its new id.

        The legacy row is deleted once the rewrite has succeeded.
        """
        if entity_id in self._items:
            self._legacy_ids[entity_id] = legacy_id
            self._pending_upserts.add(entity_id)

    async def delete(self, entity_id: str) -> bool:
        """Remove an entity locally and, when it has a UUID, remotely.

        Local state is updated unconditionally. Legacy non-UUID ids were
        never persisted remotely, so no remote call is made for them. An
        absent remote row counts as deleted. Returns whether the entity
        existed locally.
        """
        existed = self._items.pop(entity_id, None) is not None
        self._pending_upserts.discard(entity_id)

        legacy_id = self._legacy_ids.pop(entity_id, None)
        if legacy_id is not None:
            await self._push_delete(legacy_id)

        if not is_valid_uuid(entity_id):
            logger.info(f'Skipping remote delete for legacy {self.entity_name} id {entity_id}')
            return existed

        await self._push_delete(entity_id)
        return existed

    async def _push_delete(self, entity_id: str) -> bool:
        try:
            await self.backend.delete_row(self.table, entity_id)
        except NotFoundError:
            logger.debug(f'{self.entity_name} {entity_id} already absent from {self.table}')
        except DataStoreError as e:
            logger.warning(f'Error deleting {self.entity_name} {entity_id}, delete pending sync: {e}')
            self._pending_deletes.add(entity_id)
            return False
        self._pending_deletes.discard(entity_id)
        return True

    def is_pending(self, entity_id: str) -> bool:
        return entity_id in self._pending_upserts or entity_id in self._pending_deletes

    def pending_ids(self) -> list[str]:
        return sorted(self._pending_upserts | self._pending_deletes)

    async def sync_pending(self) -> int:
        """Retry every pending write. Returns how many succeeded."""
        synced = 0
        for entity_id in list(self._pending_upserts):
            entity = self._items.get(entity_id)
            if entity is None:
                self._pending_upserts.discard(entity_id)
                continue
            if await self._push(entity):
                synced += 1
        for entity_id in list(self._pending_deletes):
            if await self._push_delete(entity_id):
                synced += 1
        if synced:
            logger.info(f'Synced {synced} pending {self.table} change(s)')
        return synced

    async def push_all(self) -> int:
        """Upsert every local entity. Returns how many writes failed."""
        failed = 0
        for entity in self.all():
            if not await self._push(entity):
                failed += 1
        return failed
