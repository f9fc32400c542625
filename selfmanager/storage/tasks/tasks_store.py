"""Stores for the three task kinds, one table each."""

from __future__ import annotations

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.tasks import (
    FREQUENCIES,
    TASK_PRIORITIES,
    TASK_STATUSES,
    TIME_SLOTS,
    NonRepeatedTask,
    RegularTask,
    RepeatedTask,
)
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso


def _validate_common(task) -> None:
    if task.priority not in TASK_PRIORITIES:
        raise ValidationError(f'Invalid task priority: {task.priority}')
    if task.time_slot is not None and task.time_slot not in TIME_SLOTS:
        raise ValidationError(f'Invalid time slot: {task.time_slot}')


def _time_slot(row: Row) -> str | None:
    # The UI stored "no-time-slot" for tasks without a slot
    value = row.get('time_slot')
    return value if value in TIME_SLOTS else None


class RepeatedTasksStore(EntityStore[RepeatedTask]):
    table = 'repeated_tasks'
    entity_name = 'repeated task'

    def _validate(self, task: RepeatedTask) -> None:
        super()._validate(task)
        _validate_common(task)
        if task.frequency not in FREQUENCIES:
            raise ValidationError(f'Invalid frequency: {task.frequency}')
        if task.streak < 0:
            raise ValidationError('Streak cannot be negative')

    def _to_row(self, task: RepeatedTask) -> Row:
        return {
            'id': task.id,
            'title': task.title,
            'description': task.description,
            'frequency': task.frequency,
            'is_active': task.is_active,
            'last_completed': task.last_completed,
            'streak': task.streak,
            'created_at': task.created_at,
            'priority': task.priority,
            'project': task.project,
            'time_slot': task.time_slot,
        }

    def _from_row(self, row: Row) -> RepeatedTask:
        is_active = row.get('is_active')
        return RepeatedTask(
            id=row['id'],
            title=row['title'],
            description=row.get('description') or '',
            frequency=row.get('frequency') or 'daily',
            is_active=True if is_active is None else bool(is_active),
            last_completed=row.get('last_completed'),
            streak=int(row.get('streak') or 0),
            created_at=row.get('created_at') or now_iso(),
            priority=row.get('priority') or 'medium',
            project=row.get('project'),
            time_slot=_time_slot(row),
        )


class NonRepeatedTasksStore(EntityStore[NonRepeatedTask]):
    table = 'non_repeated_tasks'
    entity_name = 'one-off task'

    def _validate(self, task: NonRepeatedTask) -> None:
        super()._validate(task)
        _validate_common(task)
        if not task.deadline:
            raise ValidationError('One-off tasks need a deadline')
        if task.status not in TASK_STATUSES:
            raise ValidationError(f'Invalid task status: {task.status}')

    def _to_row(self, task: NonRepeatedTask) -> Row:
        return {
            'id': task.id,
            'title': task.title,
            'description': task.description,
            'deadline': task.deadline,
            'priority': task.priority,
            'status': task.status,
            'created_at': task.created_at,
            'completed_at': task.completed_at,
            'project': task.project,
            'time_slot': task.time_slot,
        }

    def _from_row(self, row: Row) -> NonRepeatedTask:
        return NonRepeatedTask(
            id=row['id'],
            title=row['title'],
            deadline=row['deadline'],
            description=row.get('description') or '',
            priority=row.get('priority') or 'medium',
            status=row.get('status') or 'pending',
            created_at=row.get('created_at') or now_iso(),
            completed_at=row.get('completed_at'),
            project=row.get('project'),
            time_slot=_time_slot(row),
        )


class RegularTasksStore(EntityStore[RegularTask]):
    table = 'regular_tasks'
    entity_name = 'regular task'

    def _validate(self, task: RegularTask) -> None:
        super()._validate(task)
        _validate_common(task)
        if task.status not in TASK_STATUSES:
            raise ValidationError(f'Invalid task status: {task.status}')

    def _to_row(self, task: RegularTask) -> Row:
        return {
            'id': task.id,
            'title': task.title,
            'description': task.description,
            'priority': task.priority,
            'status': task.status,
            'created_at': task.created_at,
            'completed_at': task.completed_at,
            'project': task.project,
            'time_slot': task.time_slot,
        }

    def _from_row(self, row: Row) -> RegularTask:
        return RegularTask(
            id=row['id'],
            title=row['title'],
            description=row.get('description') or '',
            priority=row.get('priority') or 'medium',
            status=row.get('status') or 'pending',
            created_at=row.get('created_at') or now_iso(),
            completed_at=row.get('completed_at'),
            project=row.get('project'),
            time_slot=_time_slot(row),
        )
