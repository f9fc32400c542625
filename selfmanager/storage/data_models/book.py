"""Data model for the reading log."""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso

BOOK_STATUSES = ('want-to-read', 'reading', 'completed')


@dataclass
class Book:
    id: str  # UUID
    title: str
    author: str
    description: str = ''
    cover_image_url: str | None = None
    status: str = 'want-to-read'  # 'want-to-read', 'reading', 'completed'
    rating: int | None = None  # 1-5
    notes: str = ''
    added_at: str = field(default_factory=now_iso)
    started_at: str | None = None
    completed_at: str | None = None
    tags: list[str] = field(default_factory=list)
