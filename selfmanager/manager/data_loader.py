"""Loads a user's data from the backing store and reconciles it.

Loading never fails: each collection is fetched independently and a
collection that cannot be read, for whatever reason, loads empty. What does
load is deduplicated and every legacy (non-UUID) id is remapped to a fresh
UUID, with references to it (a pipeline's ``idea_id``, a comment's
``post_id``, a post's ``tag_ids`` and so on) rewritten in the same pass.
"""

from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import Callable

from selfmanager.core.exceptions import DataStoreError, NotFoundError, TableMissingError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.dedup import (
    dedupe,
    non_repeated_task_key,
    regular_task_key,
    repeated_task_key,
)
from selfmanager.storage.backend.table_backend import TableBackend
from selfmanager.storage.data_models.app_data import AppData
from selfmanager.storage.entity_store import EntityStore
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.identifiers import IdRemapper, new_id

# Collections deduplicated by content as well as by id
CONTENT_KEYS = {
    'repeated_tasks': repeated_task_key,
    'non_repeated_tasks': non_repeated_task_key,
}

# Fields holding the id (or list of ids) of another entity
REFERENCE_FIELDS = {
    'execution_pipelines': ('idea_id',),
    'newsfeed_posts': ('tag_ids',),
    'newsfeed_comments': ('post_id',),
    'people_connections': ('person_a_id', 'person_b_id'),
    'project_milestones': ('project_id',),
    'project_stages': ('project_id',),
    'project_bulk_tasks': ('project_id',),
}


def dedupe_app_data(data: AppData, dedup_regular_tasks: bool = False) -> AppData:
    """Apply the per-collection duplicate removal rules."""
    content_keys = dict(CONTENT_KEYS)
    if dedup_regular_tasks:
        content_keys['regular_tasks'] = regular_task_key
    collections = {
        name: dedupe(getattr(data, name), content_keys.get(name))
        for name in AppData.collection_names()
    }
    return AppData(**collections, last_updated=data.last_updated)


def _remap_reference(value, remapper: IdRemapper):
    if isinstance(value, list):
        return [remapper.remap(v) for v in value if v]
    return remapper.remap(value) if value else value


def normalize_ids(data: AppData, remapper: IdRemapper) -> AppData:
    """Rewrite legacy ids, and references to them, using one remapper."""
    collections = {}
    for name in AppData.collection_names():
        references = REFERENCE_FIELDS.get(name, ())
        collections[name] = [
            replace(
                entity,
                id=remapper.remap(entity.id),
                **{f: _remap_reference(getattr(entity, f), remapper) for f in references},
            )
            for entity in getattr(data, name)
        ]
    return AppData(**collections, last_updated=data.last_updated)


class DataLoader:
    """Fetches, deduplicates and normalizes everything a user owns.

    After each ``load`` call, ``remapped_ids`` holds the legacy id -> UUID
    mapping that pass produced.
    """

    def __init__(
        self,
        backend: TableBackend,
        dedup_regular_tasks: bool = False,
        id_factory: Callable[[], str] = new_id,
    ):
        self.backend = backend
        self.dedup_regular_tasks = dedup_regular_tasks
        self.id_factory = id_factory
        self.remapped_ids: dict[str, str] = {}

    async def _fetch(self, store: EntityStore) -> list:
        try:
            return await store.fetch()
        except (TableMissingError, NotFoundError):
            logger.info(f'Table {store.table} does not exist, treating it as empty')
            return []
        except DataStoreError as e:
            logger.warning(f'Error loading {store.table}, continuing without it: {e}')
            return []
        except Exception as e:
            logger.error(f'Unexpected error loading {store.table}, continuing without it: {e}')
            return []

    async def fetch_all(self, user_id: str) -> AppData:
        """Fetch every collection concurrently, as stored."""
        collections = StoreSet.for_user(self.backend, user_id).collections()
        results = await asyncio.gather(*(self._fetch(store) for _, store in collections))
        return AppData(**{name: items for (name, _), items in zip(collections, results)})

    def reconcile(self, data: AppData) -> AppData:
        """Deduplicate, then remap legacy ids in a single pass."""
        remapper = IdRemapper(self.id_factory)
        reconciled = normalize_ids(dedupe_app_data(data, self.dedup_regular_tasks), remapper)
        self.remapped_ids = remapper.mapping
        if self.remapped_ids:
            logger.info(f'Remapped {len(self.remapped_ids)} legacy id(s) to UUIDs')
        return reconciled

    async def load(self, user_id: str) -> AppData:
        self.remapped_ids = {}
        try:
            raw = await self.fetch_all(user_id)
            data = self.reconcile(raw)
        except Exception as e:
            logger.error(f'Error loading data for user {user_id}: {e}')
            return AppData.empty()

        logger.info(f'Loaded data for user {user_id}: {data.counts()}')
        return data
