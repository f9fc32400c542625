"""Data model for everything one user owns."""

from dataclasses import dataclass, field, fields

from selfmanager.storage.data_models.book import Book
from selfmanager.storage.data_models.execution_pipeline import ExecutionPipeline
from selfmanager.storage.data_models.idea import Idea
from selfmanager.storage.data_models.newsfeed import NewsfeedComment, NewsfeedPost, NewsfeedTag
from selfmanager.storage.data_models.person import Person, PersonConnection
from selfmanager.storage.data_models.project import (
    Project,
    ProjectBulkTask,
    ProjectMilestone,
    ProjectStage,
)
from selfmanager.storage.data_models.tasks import NonRepeatedTask, RegularTask, RepeatedTask
from selfmanager.utils.dates import now_iso


@dataclass
class AppData:
    ideas: list[Idea] = field(default_factory=list)
    execution_pipelines: list[ExecutionPipeline] = field(default_factory=list)
    repeated_tasks: list[RepeatedTask] = field(default_factory=list)
    non_repeated_tasks: list[NonRepeatedTask] = field(default_factory=list)
    regular_tasks: list[RegularTask] = field(default_factory=list)
    books: list[Book] = field(default_factory=list)
    newsfeed_posts: list[NewsfeedPost] = field(default_factory=list)
    newsfeed_comments: list[NewsfeedComment] = field(default_factory=list)
    newsfeed_tags: list[NewsfeedTag] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    people_connections: list[PersonConnection] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    project_milestones: list[ProjectMilestone] = field(default_factory=list)
    project_stages: list[ProjectStage] = field(default_factory=list)
    project_bulk_tasks: list[ProjectBulkTask] = field(default_factory=list)
    last_updated: str = field(default_factory=now_iso)

    @classmethod
    def empty(cls) -> 'AppData':
        """The well-defined result of a failed load."""
        return cls()

    @classmethod
    def collection_names(cls) -> list[str]:
        return [f.name for f in fields(cls) if f.name != 'last_updated']

    def counts(self) -> dict[str, int]:
        return {name: len(getattr(self, name)) for name in self.collection_names()}
