"""The per-entity stores of one user, grouped."""

from __future__ import annotations

from dataclasses import dataclass

from selfmanager.storage.backend.table_backend import TableBackend
from selfmanager.storage.books.books_store import BooksStore
from selfmanager.storage.data_models.app_data import AppData
from selfmanager.storage.entity_store import EntityStore
from selfmanager.storage.ideas.ideas_store import IdeasStore
from selfmanager.storage.newsfeed.newsfeed_store import (
    NewsfeedCommentsStore,
    NewsfeedPostsStore,
    NewsfeedTagsStore,
)
from selfmanager.storage.people.people_store import ConnectionsStore, PeopleStore
from selfmanager.storage.pipelines.pipelines_store import PipelinesStore
from selfmanager.storage.projects.projects_store import (
    BulkTasksStore,
    MilestonesStore,
    ProjectsStore,
    StagesStore,
)
from selfmanager.storage.tasks.tasks_store import (
    NonRepeatedTasksStore,
    RegularTasksStore,
    RepeatedTasksStore,
)


@dataclass
class StoreSet:
    ideas: IdeasStore
    pipelines: PipelinesStore
    repeated_tasks: RepeatedTasksStore
    non_repeated_tasks: NonRepeatedTasksStore
    regular_tasks: RegularTasksStore
    books: BooksStore
    newsfeed_posts: NewsfeedPostsStore
    newsfeed_comments: NewsfeedCommentsStore
    newsfeed_tags: NewsfeedTagsStore
    people: PeopleStore
    people_connections: ConnectionsStore
    projects: ProjectsStore
    project_milestones: MilestonesStore
    project_stages: StagesStore
    project_bulk_tasks: BulkTasksStore

    @classmethod
    def for_user(cls, backend: TableBackend, user_id: str) -> StoreSet:
        return cls(
            ideas=IdeasStore(backend, user_id),
            pipelines=PipelinesStore(backend, user_id),
            repeated_tasks=RepeatedTasksStore(backend, user_id),
            non_repeated_tasks=NonRepeatedTasksStore(backend, user_id),
            regular_tasks=RegularTasksStore(backend, user_id),
            books=BooksStore(backend, user_id),
            newsfeed_posts=NewsfeedPostsStore(backend, user_id),
            newsfeed_comments=NewsfeedCommentsStore(backend, user_id),
            newsfeed_tags=NewsfeedTagsStore(backend, user_id),
            people=PeopleStore(backend, user_id),
            people_connections=ConnectionsStore(backend, user_id),
            projects=ProjectsStore(backend, user_id),
            project_milestones=MilestonesStore(backend, user_id),
            project_stages=StagesStore(backend, user_id),
            project_bulk_tasks=BulkTasksStore(backend, user_id),
        )

    def collections(self) -> list[tuple[str, EntityStore]]:
        """(AppData attribute, store) pairs, in AppData field order."""
        return [
            (name, self.pipelines if name == 'execution_pipelines' else getattr(self, name))
            for name in AppData.collection_names()
        ]

    def all_stores(self) -> list[EntityStore]:
        return [store for _, store in self.collections()]

    def install(self, data: AppData) -> None:
        """Replace every local collection with the contents of ``data``."""
        for name, store in self.collections():
            store.replace_all(getattr(data, name))

    def snapshot(self) -> AppData:
        return AppData(**{name: store.all() for name, store in self.collections()})
