"""API routes for the reading log."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.storage.data_models.book import Book

app = APIRouter(prefix='/api')


class BookResponse(BaseModel):
    id: str
    title: str
    author: str
    description: str
    cover_image_url: str | None
    status: str
    rating: int | None
    notes: str
    added_at: str
    started_at: str | None
    completed_at: str | None
    tags: list[str]
    pending_sync: bool = False


class CreateBookRequest(BaseModel):
    title: str
    author: str
    description: str = ''
    cover_image_url: str | None = None
    notes: str = ''
    tags: list[str] = Field(default_factory=list)
    status: str = 'want-to-read'


class UpdateBookRequest(BaseModel):
    """Any subset of fields, applied together or not at all."""
    title: str | None = None
    author: str | None = None
    description: str | None = None
    cover_image_url: str | None = None
    notes: str | None = None
    tags: list[str] | None = None
    status: str | None = None
    rating: int | None = None


def book_to_response(book: Book, workspace: UserWorkspace) -> BookResponse:
    return BookResponse(
        **asdict(book),
        pending_sync=workspace.stores.books.is_pending(book.id),
    )


@app.get('/books', response_model=list[BookResponse])
async def list_books(
    status_filter: str | None = Query(None, alias='status'),
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[BookResponse]:
    return [book_to_response(b, workspace) for b in workspace.books.list_books(status_filter)]


@app.post(
    '/books',
    response_model=BookResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {'description': 'Invalid book'}},
)
async def add_book(
    request_body: CreateBookRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> BookResponse:
    book = await workspace.books.add_book(**request_body.model_dump())
    return book_to_response(book, workspace)


@app.patch(
    '/books/{book_id}',
    response_model=BookResponse,
    responses={
        400: {'description': 'Invalid change'},
        404: {'description': 'Book not found'},
    },
)
async def update_book(
    book_id: str,
    request_body: UpdateBookRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> BookResponse:
    changes = request_body.model_dump(exclude_none=True)
    book = await workspace.books.update_book(book_id, **changes)
    return book_to_response(book, workspace)


@app.delete('/books/{book_id}')
async def delete_book(
    book_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    existed = await workspace.books.delete_book(book_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Book {book_id} deleted', 'existed': existed},
    )
