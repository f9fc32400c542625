"""Data model for ideas."""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso

IDEA_PRIORITIES = ('low', 'medium', 'high')
IDEA_STATUSES = ('parking', 'in-pipeline', 'completed', 'archived')


@dataclass
class Idea:
    """A prospective project captured before execution begins.

    Ideas start in the parking lot. Promoting one creates its execution
    pipeline and moves it to 'in-pipeline'; finishing the pipeline marks it
    'completed'. Only parked ideas can be archived.
    """

    id: str  # UUID
    title: str
    description: str = ''
    created_at: str = field(default_factory=now_iso)
    priority: str = 'medium'  # 'low', 'medium', 'high'
    tags: list[str] = field(default_factory=list)
    status: str = 'parking'  # 'parking', 'in-pipeline', 'completed', 'archived'
