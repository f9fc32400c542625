"""Per-user façade over the stores and the managers."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from selfmanager.core.config import SelfManagerConfig
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.book_log import BookLog
from selfmanager.manager.data_loader import DataLoader
from selfmanager.manager.data_transfer import export_app_data, parse_app_data
from selfmanager.manager.newsfeed import Newsfeed
from selfmanager.manager.people_directory import PeopleDirectory
from selfmanager.manager.pipeline_manager import PipelineManager
from selfmanager.manager.project_planner import ProjectPlanner
from selfmanager.manager.task_reconciler import TaskReconciler
from selfmanager.storage.backend import TableBackend, get_table_backend
from selfmanager.storage.data_models.app_data import AppData
from selfmanager.storage.store_set import StoreSet


@dataclass
class UserWorkspace:
    """Everything one user works with.

    The stores hold the user's entities; ``pipelines``, ``tasks``, ``books``,
    ``newsfeed``, ``people`` and ``projects`` are the operation surfaces
    built on them. Call ``load`` once before use.
    """

    backend: TableBackend
    user_id: str
    dedup_regular_tasks: bool = False
    stores: StoreSet = field(init=False)
    loader: DataLoader = field(init=False)
    pipelines: PipelineManager = field(init=False)
    tasks: TaskReconciler = field(init=False)
    books: BookLog = field(init=False)
    newsfeed: Newsfeed = field(init=False)
    people: PeopleDirectory = field(init=False)
    projects: ProjectPlanner = field(init=False)
    loaded: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        self.stores = StoreSet.for_user(self.backend, self.user_id)
        self.loader = DataLoader(self.backend, dedup_regular_tasks=self.dedup_regular_tasks)
        self.pipelines = PipelineManager(self.stores)
        self.tasks = TaskReconciler(self.stores)
        self.books = BookLog(self.stores)
        self.newsfeed = Newsfeed(self.stores)
        self.people = PeopleDirectory(self.stores)
        self.projects = ProjectPlanner(self.stores, self.tasks)

    async def load(self) -> AppData:
        """Load, reconcile and install the user's data.

        Entities whose legacy id was remapped are flagged pending sync so
        they get written under their new UUID; the legacy row is deleted
        once that write succeeds.
        """
        data = await self.loader.load(self.user_id)
        self.stores.install(data)
        for legacy_id, new_id in self.loader.remapped_ids.items():
            for store in self.stores.all_stores():
                store.mark_remapped(new_id, legacy_id)
        self.loaded = True
        return data

    def snapshot(self) -> AppData:
        return self.stores.snapshot()

    def export_data(self) -> dict[str, Any]:
        return export_app_data(self.snapshot())

    async def import_data(self, payload: dict[str, Any]) -> AppData:
        """Replace the user's data with an exported document.

        Legacy ids are remapped in one pass, everything is validated before
        any write, then every entity is upserted (fail-soft).
        """
        parsed = parse_app_data(payload, self.stores)
        data = self.loader.reconcile(parsed)
        for name, store in self.stores.collections():
            for entity in getattr(data, name):
                store.validate(entity)

        self.stores.install(data)
        failed = 0
        for store in self.stores.all_stores():
            failed += await store.push_all()
        if failed:
            logger.warning(f'Imported data for {self.user_id}; {failed} write(s) pending sync')
        else:
            logger.info(f'Imported data for {self.user_id}: {data.counts()}')
        return self.snapshot()

    async def sync_pending(self) -> int:
        synced = 0
        for store in self.stores.all_stores():
            synced += await store.sync_pending()
        return synced

    def pending_summary(self) -> dict[str, list[str]]:
        return {
            store.table: store.pending_ids()
            for store in self.stores.all_stores()
            if store.pending_ids()
        }


# Process-wide backend and one workspace per user id
_backend: TableBackend | None = None
_workspaces: dict[str, UserWorkspace] = {}
_lock = asyncio.Lock()


def get_backend(config: SelfManagerConfig) -> TableBackend:
    global _backend
    if _backend is None:
        _backend = get_table_backend(config)
    return _backend


async def get_workspace(config: SelfManagerConfig, user_id: str) -> UserWorkspace:
    """Return the loaded workspace of a user, creating it on first use."""
    async with _lock:
        workspace = _workspaces.get(user_id)
        if workspace is None:
            workspace = UserWorkspace(
                get_backend(config),
                user_id,
                dedup_regular_tasks=config.dedup_regular_tasks,
            )
            await workspace.load()
            _workspaces[user_id] = workspace
        return workspace


async def shutdown_workspaces() -> None:
    """Drop every cached workspace and close the backend."""
    global _backend
    _workspaces.clear()
    if _backend is not None:
        await _backend.close()
        _backend = None
