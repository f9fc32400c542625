"""Store for the reading log, backed by the ``books`` table."""

from __future__ import annotations

from selfmanager.core.exceptions import ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.book import BOOK_STATUSES, Book
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso


class BooksStore(EntityStore[Book]):
    table = 'books'
    entity_name = 'book'

    def _validate(self, book: Book) -> None:
        super()._validate(book)
        if not book.author or not book.author.strip():
            raise ValidationError('Book author cannot be empty')
        if book.status not in BOOK_STATUSES:
            raise ValidationError(f'Invalid book status: {book.status}')
        if book.rating is not None and not 1 <= book.rating <= 5:
            raise ValidationError('Rating must be between 1 and 5')

    def _to_row(self, book: Book) -> Row:
        return {
            'id': book.id,
            'title': book.title,
            'author': book.author,
            'description': book.description,
            'cover_image_url': book.cover_image_url,
            'status': book.status,
            'rating': book.rating,
            'notes': book.notes,
            'added_at': book.added_at,
            'started_at': book.started_at,
            'completed_at': book.completed_at,
            'tags': list(book.tags),
        }

    def _from_row(self, row: Row) -> Book:
        rating = row.get('rating')
        return Book(
            id=row['id'],
            title=row['title'],
            author=row.get('author') or '',
            description=row.get('description') or '',
            cover_image_url=row.get('cover_image_url'),
            status=row.get('status') or 'want-to-read',
            rating=int(rating) if rating is not None else None,
            notes=row.get('notes') or '',
            added_at=row.get('added_at') or now_iso(),
            started_at=row.get('started_at'),
            completed_at=row.get('completed_at'),
            tags=list(row.get('tags') or []),
        )
