"""Completion, streak and status rules for the three task kinds.

The module-level functions are pure: they take a task and return an updated
copy. ``TaskReconciler`` applies them through the task stores.

Recurring tasks only ever move forward within a day: the first completion of
a calendar day stamps ``last_completed`` and bumps the streak, later ones on
the same day change nothing. One-off and regular tasks flip between
'pending' and 'completed'. 'Overdue' is always derived, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import date, datetime

from selfmanager.core.exceptions import ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.data_models.tasks import (
    NON_REPEATED,
    REGULAR,
    REPEATED,
    TASK_KINDS,
    AnyTask,
    NonRepeatedTask,
    RegularTask,
    RepeatedTask,
)
from selfmanager.storage.entity_store import EntityStore
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.dates import day_of, now_iso, today_iso
from selfmanager.utils.identifiers import new_id

DayLike = str | date | datetime | None

# Fields a caller may not overwrite through update_task
READ_ONLY_FIELDS = frozenset({'id', 'created_at'})

DEFAULT_TIME_SLOT = 'day'


def _day(today: DayLike) -> str:
    return day_of(today) or today_iso()


def toggle_repeated_task_completion(task: RepeatedTask, today: DayLike = None) -> RepeatedTask:
    day = _day(today)
    if day_of(task.last_completed) == day:
        return replace(task, last_completed=day)
    return replace(task, last_completed=day, streak=task.streak + 1)


def toggle_task_completion(task: NonRepeatedTask | RegularTask, now: str | None = None):
    if task.status == 'completed':
        return replace(task, status='pending', completed_at=None)
    return replace(task, status='completed', completed_at=now or now_iso())


def is_completed_on(task: AnyTask, today: DayLike = None) -> bool:
    if isinstance(task, RepeatedTask):
        return day_of(task.last_completed) == _day(today)
    return task.status == 'completed'


def is_overdue(task: AnyTask, today: DayLike = None) -> bool:
    if not isinstance(task, NonRepeatedTask) or not task.deadline:
        return False
    return day_of(task.deadline) < _day(today) and task.status != 'completed'


def display_status(task: AnyTask, today: DayLike = None) -> str:
    """The status to show for a task, computed from stored fields only."""
    if isinstance(task, RepeatedTask):
        return 'completed' if is_completed_on(task, today) else 'pending'
    if is_overdue(task, today):
        return 'overdue'
    return task.status


def task_kind(task: AnyTask) -> str:
    if isinstance(task, RepeatedTask):
        return REPEATED
    if isinstance(task, NonRepeatedTask):
        return NON_REPEATED
    return REGULAR


@dataclass
class AgendaItem:
    """One line of the day view."""

    kind: str
    id: str
    title: str
    description: str
    priority: str
    status: str
    time_slot: str
    project: str | None = None
    deadline: str | None = None
    streak: int | None = None


class TaskReconciler:
    """Task operations over the three task stores of one user."""

    def __init__(self, stores: StoreSet):
        self.repeated_tasks = stores.repeated_tasks
        self.non_repeated_tasks = stores.non_repeated_tasks
        self.regular_tasks = stores.regular_tasks

    def store_for(self, kind: str) -> EntityStore:
        if kind == REPEATED:
            return self.repeated_tasks
        if kind == NON_REPEATED:
            return self.non_repeated_tasks
        if kind == REGULAR:
            return self.regular_tasks
        raise ValidationError(f'Unknown task kind: {kind} (expected one of {", ".join(TASK_KINDS)})')

    def list_tasks(self, kind: str) -> list[AnyTask]:
        return self.store_for(kind).all()

    async def create_repeated_task(
        self,
        title: str,
        description: str = '',
        frequency: str = 'daily',
        priority: str = 'medium',
        is_active: bool = True,
        project: str | None = None,
        time_slot: str | None = None,
    ) -> RepeatedTask:
        task = RepeatedTask(
            id=new_id(),
            title=(title or '').strip(),
            description=description,
            frequency=frequency,
            is_active=is_active,
            streak=0,
            priority=priority,
            project=project,
            time_slot=time_slot,
        )
        await self.repeated_tasks.save(task)
        logger.info(f'Created repeated task {task.id}')
        return task

    async def create_non_repeated_task(
        self,
        title: str,
        deadline: str,
        description: str = '',
        priority: str = 'medium',
        project: str | None = None,
        time_slot: str | None = None,
    ) -> NonRepeatedTask:
        task = NonRepeatedTask(
            id=new_id(),
            title=(title or '').strip(),
            deadline=deadline,
            description=description,
            priority=priority,
            status='pending',
            project=project,
            time_slot=time_slot,
        )
        await self.non_repeated_tasks.save(task)
        logger.info(f'Created one-off task {task.id}')
        return task

    async def create_regular_task(
        self,
        title: str,
        description: str = '',
        priority: str = 'medium',
        project: str | None = None,
        time_slot: str | None = None,
    ) -> RegularTask:
        task = RegularTask(
            id=new_id(),
            title=(title or '').strip(),
            description=description,
            priority=priority,
            status='pending',
            project=project,
            time_slot=time_slot,
        )
        await self.regular_tasks.save(task)
        logger.info(f'Created regular task {task.id}')
        return task

    async def update_task(self, kind: str, task_id: str, **changes) -> AnyTask:
        store = self.store_for(kind)
        task = store.require(task_id)
        allowed = {f.name for f in fields(task)} - READ_ONLY_FIELDS
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f'Cannot update field(s): {", ".join(sorted(unknown))}')
        updated = replace(task, **changes)
        return await store.save(updated)

    async def complete_repeated_task(self, task_id: str, today: DayLike = None) -> RepeatedTask:
        task = self.repeated_tasks.require(task_id)
        return await self.repeated_tasks.save(toggle_repeated_task_completion(task, today))

    async def toggle_task(
        self, kind: str, task_id: str, now: str | None = None, today: DayLike = None
    ) -> AnyTask:
        if kind == REPEATED:
            return await self.complete_repeated_task(task_id, today)
        store = self.store_for(kind)
        task = store.require(task_id)
        return await store.save(toggle_task_completion(task, now))

    async def delete_task(self, kind: str, task_id: str) -> bool:
        """Resilient delete: local state always loses the task."""
        deleted = await self.store_for(kind).delete(task_id)
        logger.info(f'Deleted {kind} task {task_id}')
        return deleted

    def tasks_for_day(
        self,
        today: DayLike = None,
        time_slot: str | None = None,
        project: str | None = None,
    ) -> list[AgendaItem]:
        """Everything due on a day: active habits, one-offs due that day
        and open regular tasks."""
        day = _day(today)
        items: list[AgendaItem] = []

        for task in self.repeated_tasks.all():
            if not task.is_active:
                continue
            items.append(self._agenda_item(task, day, streak=task.streak))

        for task in self.non_repeated_tasks.all():
            if day_of(task.deadline) == day:
                items.append(self._agenda_item(task, day, deadline=task.deadline))

        for task in self.regular_tasks.all():
            if task.status != 'completed':
                items.append(self._agenda_item(task, day))

        return [
            item for item in items
            if (time_slot is None or item.time_slot == time_slot)
            and (project is None or item.project == project)
        ]

    def _agenda_item(self, task: AnyTask, day: str, **extra) -> AgendaItem:
        return AgendaItem(
            kind=task_kind(task),
            id=task.id,
            title=task.title,
            description=task.description,
            priority=task.priority,
            status=display_status(task, day),
            time_slot=task.time_slot or DEFAULT_TIME_SLOT,
            project=task.project,
            **extra,
        )
