"""Data models for the three task kinds.

- RepeatedTask: a habit re-completed on a cadence, tracked with a streak.
  Whether it is done is derived from ``last_completed``, never stored.
- NonRepeatedTask: a one-off "office" task bound to a deadline.
- RegularTask: a plain prioritized to-do item without a deadline.
"""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso

FREQUENCIES = ('daily', 'weekly', 'monthly')
TASK_PRIORITIES = ('low', 'medium', 'high', 'urgent')
TASK_STATUSES = ('pending', 'in-progress', 'completed', 'overdue')
TIME_SLOTS = ('morning', 'day', 'night')

REPEATED = 'repeated'
NON_REPEATED = 'non-repeated'
REGULAR = 'regular'
TASK_KINDS = (REPEATED, NON_REPEATED, REGULAR)


@dataclass
class RepeatedTask:
    id: str  # UUID
    title: str
    description: str = ''
    frequency: str = 'daily'  # 'daily', 'weekly', 'monthly'
    is_active: bool = True
    last_completed: str | None = None  # YYYY-MM-DD of the last completion
    streak: int = 0
    created_at: str = field(default_factory=now_iso)
    priority: str = 'medium'
    project: str | None = None
    time_slot: str | None = None  # 'morning', 'day', 'night'


@dataclass
class NonRepeatedTask:
    id: str  # UUID
    title: str
    deadline: str  # ISO date
    description: str = ''
    priority: str = 'medium'
    # 'overdue' may appear in legacy rows but is never set by this package;
    # see task_reconciler.display_status for the derived value.
    status: str = 'pending'
    created_at: str = field(default_factory=now_iso)
    completed_at: str | None = None
    project: str | None = None
    time_slot: str | None = None


@dataclass
class RegularTask:
    id: str  # UUID
    title: str
    description: str = ''
    priority: str = 'medium'
    status: str = 'pending'
    created_at: str = field(default_factory=now_iso)
    completed_at: str | None = None
    project: str | None = None
    time_slot: str | None = None


AnyTask = RepeatedTask | NonRepeatedTask | RegularTask
