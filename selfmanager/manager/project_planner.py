"""Projects with their milestones, stages and bulk task templates.

Bulk tasks are templates: ``generate_tasks`` turns the active ones of a
project into repeated tasks tagged with the project's name.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from selfmanager.core.exceptions import ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.task_reconciler import TaskReconciler
from selfmanager.storage.data_models.project import (
    DEFAULT_STAGE_COLOR,
    Project,
    ProjectBulkTask,
    ProjectMilestone,
    ProjectStage,
)
from selfmanager.storage.data_models.tasks import RepeatedTask
from selfmanager.storage.entity_store import EntityStore
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.dates import now_iso
from selfmanager.utils.identifiers import new_id

EDITABLE_PROJECT_FIELDS = frozenset(
    {'name', 'description', 'priority', 'status', 'start_date', 'end_date', 'tags'}
)
EDITABLE_MILESTONE_FIELDS = frozenset(
    {'name', 'description', 'target_date', 'status', 'order_index'}
)
EDITABLE_STAGE_FIELDS = frozenset({'name', 'description', 'color', 'order_index', 'is_completed'})
EDITABLE_BULK_TASK_FIELDS = frozenset(
    {'title', 'description', 'frequency', 'priority', 'is_active'}
)


def _check_fields(kind: str, changes: dict, allowed: frozenset) -> None:
    unknown = set(changes) - allowed
    if unknown:
        raise ValidationError(f'Cannot update {kind} field(s): {", ".join(sorted(unknown))}')


class ProjectPlanner:
    def __init__(self, stores: StoreSet, tasks: TaskReconciler):
        self.projects = stores.projects
        self.milestones = stores.project_milestones
        self.stages = stores.project_stages
        self.bulk_tasks = stores.project_bulk_tasks
        self.tasks = tasks

    def list_projects(self, status: str | None = None) -> list[Project]:
        projects = sorted(self.projects.all(), key=lambda p: p.created_at, reverse=True)
        if status is None:
            return projects
        return [p for p in projects if p.status == status]

    async def create_project(
        self,
        name: str,
        description: str = '',
        priority: str = 'medium',
        status: str = 'planning',
        start_date: str | None = None,
        end_date: str | None = None,
        tags: Iterable[str] | None = None,
    ) -> Project:
        project = Project(
            id=new_id(),
            name=(name or '').strip(),
            description=description or '',
            priority=priority,
            status=status,
            start_date=start_date,
            end_date=end_date,
            tags=[t for t in tags or [] if t],
        )
        await self.projects.save(project)
        logger.info(f'Created project {project.id}')
        return project

    async def update_project(self, project_id: str, **changes) -> Project:
        project = self.projects.require(project_id)
        _check_fields('project', changes, EDITABLE_PROJECT_FIELDS)
        return await self.projects.save(replace(project, updated_at=now_iso(), **changes))

    async def delete_project(self, project_id: str) -> bool:
        """Delete a project with its milestones, stages and bulk tasks.

        Tasks already generated from it are kept.
        """
        for store in (self.milestones, self.stages, self.bulk_tasks):
            for child in store.for_project(project_id):
                await store.delete(child.id)
        return await self.projects.delete(project_id)

    # Milestones

    def list_milestones(self, project_id: str) -> list[ProjectMilestone]:
        return self.milestones.for_project(project_id)

    async def add_milestone(
        self,
        project_id: str,
        name: str,
        description: str = '',
        target_date: str | None = None,
        status: str = 'pending',
    ) -> ProjectMilestone:
        self.projects.require(project_id)
        milestone = ProjectMilestone(
            id=new_id(),
            project_id=project_id,
            name=(name or '').strip(),
            description=description or '',
            target_date=target_date,
            status=status,
            order_index=len(self.milestones.for_project(project_id)),
        )
        return await self.milestones.save(milestone)

    async def update_milestone(self, milestone_id: str, **changes) -> ProjectMilestone:
        return await self._update(self.milestones, 'milestone', milestone_id, changes, EDITABLE_MILESTONE_FIELDS)

    async def delete_milestone(self, milestone_id: str) -> bool:
        return await self.milestones.delete(milestone_id)

    # Stages

    def list_stages(self, project_id: str) -> list[ProjectStage]:
        return self.stages.for_project(project_id)

    async def add_stage(
        self,
        project_id: str,
        name: str,
        description: str = '',
        color: str = DEFAULT_STAGE_COLOR,
    ) -> ProjectStage:
        self.projects.require(project_id)
        stage = ProjectStage(
            id=new_id(),
            project_id=project_id,
            name=(name or '').strip(),
            description=description or '',
            color=color or DEFAULT_STAGE_COLOR,
            order_index=len(self.stages.for_project(project_id)),
        )
        return await self.stages.save(stage)

    async def update_stage(self, stage_id: str, **changes) -> ProjectStage:
        return await self._update(self.stages, 'stage', stage_id, changes, EDITABLE_STAGE_FIELDS)

    async def toggle_stage(self, stage_id: str) -> ProjectStage:
        stage = self.stages.require(stage_id)
        return await self.stages.save(replace(stage, is_completed=not stage.is_completed))

    async def delete_stage(self, stage_id: str) -> bool:
        return await self.stages.delete(stage_id)

    # Bulk tasks

    def list_bulk_tasks(self, project_id: str) -> list[ProjectBulkTask]:
        return self.bulk_tasks.for_project(project_id)

    async def add_bulk_task(
        self,
        project_id: str,
        title: str,
        description: str = '',
        frequency: str = 'daily',
        priority: str = 'medium',
        is_active: bool = True,
    ) -> ProjectBulkTask:
        self.projects.require(project_id)
        bulk_task = ProjectBulkTask(
            id=new_id(),
            project_id=project_id,
            title=(title or '').strip(),
            description=description or '',
            frequency=frequency,
            priority=priority,
            is_active=is_active,
        )
        return await self.bulk_tasks.save(bulk_task)

    async def update_bulk_task(self, bulk_task_id: str, **changes) -> ProjectBulkTask:
        return await self._update(self.bulk_tasks, 'bulk task', bulk_task_id, changes, EDITABLE_BULK_TASK_FIELDS)

    async def delete_bulk_task(self, bulk_task_id: str) -> bool:
        return await self.bulk_tasks.delete(bulk_task_id)

    async def generate_tasks(self, project_id: str) -> list[RepeatedTask]:
        """Create a repeated task for each active bulk task of a project.

        A bulk task whose title already has a repeated task in this project
        is skipped, so generating twice creates nothing new.
        """
        project = self.projects.require(project_id)
        existing = {
            t.title for t in self.tasks.repeated_tasks.all()
            if t.project == project.name
        }
        created = []
        for bulk_task in self.bulk_tasks.for_project(project_id):
            if not bulk_task.is_active or bulk_task.title in existing:
                continue
            task = await self.tasks.create_repeated_task(
                bulk_task.title,
                description=bulk_task.description,
                frequency=bulk_task.frequency,
                priority=bulk_task.priority,
                project=project.name,
            )
            existing.add(task.title)
            created.append(task)
        logger.info(f'Generated {len(created)} task(s) for project {project_id}')
        return created

    async def _update(self, store: EntityStore, kind: str, entity_id: str, changes: dict, allowed: frozenset):
        entity = store.require(entity_id)
        _check_fields(kind, changes, allowed)
        return await store.save(replace(entity, **changes))
