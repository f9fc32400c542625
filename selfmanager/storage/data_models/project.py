"""Data models for projects and the milestones, stages and task templates in them."""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso

PROJECT_PRIORITIES = ('low', 'medium', 'high', 'urgent')
PROJECT_STATUSES = ('planning', 'active', 'on-hold', 'completed', 'cancelled')
MILESTONE_STATUSES = ('pending', 'in-progress', 'completed', 'overdue')
DEFAULT_STAGE_COLOR = '#3B82F6'


@dataclass
class Project:
    id: str  # UUID
    name: str
    description: str = ''
    priority: str = 'medium'
    status: str = 'planning'  # 'planning', 'active', 'on-hold', 'completed', 'cancelled'
    start_date: str | None = None
    end_date: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)


@dataclass
class ProjectMilestone:
    id: str  # UUID
    project_id: str
    name: str
    description: str = ''
    target_date: str | None = None
    status: str = 'pending'
    order_index: int = 0
    created_at: str = field(default_factory=now_iso)


@dataclass
class ProjectStage:
    id: str  # UUID
    project_id: str
    name: str
    description: str = ''
    color: str = DEFAULT_STAGE_COLOR
    order_index: int = 0
    is_completed: bool = False
    created_at: str = field(default_factory=now_iso)


@dataclass
class ProjectBulkTask:
    """Template for a recurring task generated into the task list on demand."""

    id: str  # UUID
    project_id: str
    title: str
    description: str = ''
    frequency: str = 'daily'
    priority: str = 'medium'
    is_active: bool = True
    created_at: str = field(default_factory=now_iso)
