"""Reading log operations."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from selfmanager.core.exceptions import ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.data_models.book import BOOK_STATUSES, Book
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.dates import now_iso
from selfmanager.utils.identifiers import new_id

EDITABLE_BOOK_FIELDS = frozenset(
    {'title', 'author', 'description', 'cover_image_url', 'notes', 'tags'}
)


def _check_rating(rating) -> None:
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValidationError('Rating must be an integer between 1 and 5')


class BookLog:
    def __init__(self, stores: StoreSet):
        self.books = stores.books

    def list_books(self, status: str | None = None) -> list[Book]:
        # Newest first, like the reading list view
        books = sorted(self.books.all(), key=lambda b: b.added_at, reverse=True)
        if status is None:
            return books
        return [b for b in books if b.status == status]

    async def add_book(
        self,
        title: str,
        author: str,
        description: str = '',
        cover_image_url: str | None = None,
        notes: str = '',
        tags: Iterable[str] | None = None,
        status: str = 'want-to-read',
    ) -> Book:
        book = Book(
            id=new_id(),
            title=(title or '').strip(),
            author=(author or '').strip(),
            description=description,
            cover_image_url=cover_image_url,
            notes=notes,
            tags=[t for t in tags or [] if t],
        )
        book = self._with_status(book, status)
        await self.books.save(book)
        logger.info(f'Added book {book.id}')
        return book

    async def update_book(self, book_id: str, **changes) -> Book:
        """Apply field, status and rating changes in one save.

        Every change is checked before any is applied, so a bad rating
        leaves the book as it was.
        """
        book = self.books.require(book_id)
        status = changes.pop('status', None)
        rating = changes.pop('rating', None)
        unknown = set(changes) - EDITABLE_BOOK_FIELDS
        if unknown:
            raise ValidationError(f'Cannot update book field(s): {", ".join(sorted(unknown))}')
        if rating is not None:
            _check_rating(rating)
            changes['rating'] = rating
        if status is not None and status not in BOOK_STATUSES:
            raise ValidationError(f'Invalid book status: {status}')

        updated = replace(book, **changes)
        if status is not None:
            updated = self._with_status(updated, status)
        return await self.books.save(updated)

    def _with_status(self, book: Book, status: str) -> Book:
        if status not in BOOK_STATUSES:
            raise ValidationError(f'Invalid book status: {status}')
        changes: dict = {'status': status}
        if status == 'reading' and not book.started_at:
            changes['started_at'] = now_iso()
        elif status == 'completed':
            changes['completed_at'] = now_iso()
        return replace(book, **changes)

    async def set_status(self, book_id: str, status: str) -> Book:
        """Move a book between want-to-read, reading and completed.

        Starting a book stamps ``started_at`` once; finishing it stamps
        ``completed_at``.
        """
        book = self._with_status(self.books.require(book_id), status)
        await self.books.save(book)
        logger.info(f'Book {book_id} is now {status}')
        return book

    async def set_rating(self, book_id: str, rating: int) -> Book:
        return await self.update_book(book_id, rating=rating)

    async def delete_book(self, book_id: str) -> bool:
        return await self.books.delete(book_id)
