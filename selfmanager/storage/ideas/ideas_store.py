"""Store for ideas, backed by the ``ideas`` table."""

from __future__ import annotations

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.idea import IDEA_PRIORITIES, IDEA_STATUSES, Idea
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso


class IdeasStore(EntityStore[Idea]):
    table = 'ideas'
    entity_name = 'idea'

    def _validate(self, idea: Idea) -> None:
        super()._validate(idea)
        if idea.priority not in IDEA_PRIORITIES:
            raise ValidationError(f'Invalid idea priority: {idea.priority}')
        if idea.status not in IDEA_STATUSES:
            raise ValidationError(f'Invalid idea status: {idea.status}')

    def _to_row(self, idea: Idea) -> Row:
        return {
            'id': idea.id,
            'title': idea.title,
            'description': idea.description,
            'created_at': idea.created_at,
            'priority': idea.priority,
            'tags': list(idea.tags),
            'status': idea.status,
        }

    def _from_row(self, row: Row) -> Idea:
        return Idea(
            id=row['id'],
            title=row['title'],
            description=row.get('description') or '',
            created_at=row.get('created_at') or now_iso(),
            priority=row.get('priority') or 'medium',
            tags=list(row.get('tags') or []),
            status=row.get('status') or 'parking',
        )
