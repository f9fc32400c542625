"""Stores for projects and their milestones, stages and bulk task templates."""

from __future__ import annotations

from typing import TypeVar

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.project import (
    DEFAULT_STAGE_COLOR,
    MILESTONE_STATUSES,
    PROJECT_PRIORITIES,
    PROJECT_STATUSES,
    Project,
    ProjectBulkTask,
    ProjectMilestone,
    ProjectStage,
)
from selfmanager.storage.data_models.tasks import FREQUENCIES, TASK_PRIORITIES
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso

C = TypeVar('C', ProjectMilestone, ProjectStage, ProjectBulkTask)


class ProjectsStore(EntityStore[Project]):
    table = 'projects'
    entity_name = 'project'
    label_field = 'name'

    def _validate(self, project: Project) -> None:
        super()._validate(project)
        if project.priority not in PROJECT_PRIORITIES:
            raise ValidationError(f'Invalid project priority: {project.priority}')
        if project.status not in PROJECT_STATUSES:
            raise ValidationError(f'Invalid project status: {project.status}')
        if project.start_date and project.end_date and project.end_date[:10] < project.start_date[:10]:
            raise ValidationError('Project end date is before its start date')

    def _to_row(self, project: Project) -> Row:
        return {
            'id': project.id,
            'name': project.name,
            'description': project.description,
            'priority': project.priority,
            'status': project.status,
            'start_date': project.start_date,
            'end_date': project.end_date,
            'tags': list(project.tags),
            'created_at': project.created_at,
            'updated_at': project.updated_at,
        }

    def _from_row(self, row: Row) -> Project:
        created_at = row.get('created_at') or now_iso()
        return Project(
            id=row['id'],
            name=row['name'],
            description=row.get('description') or '',
            priority=row.get('priority') or 'medium',
            status=row.get('status') or 'planning',
            start_date=row.get('start_date') or None,
            end_date=row.get('end_date') or None,
            tags=list(row.get('tags') or []),
            created_at=created_at,
            updated_at=row.get('updated_at') or created_at,
        )


class _ProjectChildStore(EntityStore[C]):
    """Entities that belong to one project."""

    def _validate(self, entity: C) -> None:
        super()._validate(entity)
        if not entity.project_id:
            raise ValidationError(f'{self.entity_name.capitalize()} must reference a project')

    def for_project(self, project_id: str) -> list[C]:
        return [e for e in self.all() if e.project_id == project_id]


class MilestonesStore(_ProjectChildStore[ProjectMilestone]):
    table = 'project_milestones'
    entity_name = 'milestone'
    label_field = 'name'

    def _validate(self, milestone: ProjectMilestone) -> None:
        super()._validate(milestone)
        if milestone.status not in MILESTONE_STATUSES:
            raise ValidationError(f'Invalid milestone status: {milestone.status}')

    def for_project(self, project_id: str) -> list[ProjectMilestone]:
        return sorted(super().for_project(project_id), key=lambda m: m.order_index)

    def _to_row(self, milestone: ProjectMilestone) -> Row:
        return {
            'id': milestone.id,
            'project_id': milestone.project_id,
            'name': milestone.name,
            'description': milestone.description,
            'target_date': milestone.target_date,
            'status': milestone.status,
            'order_index': milestone.order_index,
            'created_at': milestone.created_at,
        }

    def _from_row(self, row: Row) -> ProjectMilestone:
        return ProjectMilestone(
            id=row['id'],
            project_id=row['project_id'],
            name=row['name'],
            description=row.get('description') or '',
            target_date=row.get('target_date') or None,
            status=row.get('status') or 'pending',
            order_index=int(row.get('order_index') or 0),
            created_at=row.get('created_at') or now_iso(),
        )


class StagesStore(_ProjectChildStore[ProjectStage]):
    table = 'project_stages'
    entity_name = 'stage'
    label_field = 'name'

    def for_project(self, project_id: str) -> list[ProjectStage]:
        return sorted(super().for_project(project_id), key=lambda s: s.order_index)

    def _to_row(self, stage: ProjectStage) -> Row:
        return {
            'id': stage.id,
            'project_id': stage.project_id,
            'name': stage.name,
            'description': stage.description,
            'color': stage.color,
            'order_index': stage.order_index,
            'is_completed': stage.is_completed,
            'created_at': stage.created_at,
        }

    def _from_row(self, row: Row) -> ProjectStage:
        return ProjectStage(
            id=row['id'],
            project_id=row['project_id'],
            name=row['name'],
            description=row.get('description') or '',
            color=row.get('color') or DEFAULT_STAGE_COLOR,
            order_index=int(row.get('order_index') or 0),
            is_completed=bool(row.get('is_completed')),
            created_at=row.get('created_at') or now_iso(),
        )


class BulkTasksStore(_ProjectChildStore[ProjectBulkTask]):
    table = 'project_bulk_tasks'
    entity_name = 'bulk task'

    def _validate(self, bulk_task: ProjectBulkTask) -> None:
        super()._validate(bulk_task)
        if bulk_task.frequency not in FREQUENCIES:
            raise ValidationError(f'Invalid frequency: {bulk_task.frequency}')
        if bulk_task.priority not in TASK_PRIORITIES:
            raise ValidationError(f'Invalid task priority: {bulk_task.priority}')

    def for_project(self, project_id: str) -> list[ProjectBulkTask]:
        # Newest first
        return sorted(super().for_project(project_id), key=lambda t: t.created_at, reverse=True)

    def _to_row(self, bulk_task: ProjectBulkTask) -> Row:
        return {
            'id': bulk_task.id,
            'project_id': bulk_task.project_id,
            'title': bulk_task.title,
            'description': bulk_task.description,
            'frequency': bulk_task.frequency,
            'priority': bulk_task.priority,
            'is_active': bulk_task.is_active,
            'created_at': bulk_task.created_at,
        }

    def _from_row(self, row: Row) -> ProjectBulkTask:
        is_active = row.get('is_active')
        return ProjectBulkTask(
            id=row['id'],
            project_id=row['project_id'],
            title=row['title'],
            description=row.get('description') or '',
            frequency=row.get('frequency') or 'daily',
            priority=row.get('priority') or 'medium',
            is_active=True if is_active is None else bool(is_active),
            created_at=row.get('created_at') or now_iso(),
        )
