from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from selfmanager import get_version
from selfmanager.core.exceptions import (
    DataStoreError,
    InvalidStateError,
    NotFoundError,
    OutOfRangeError,
    ValidationError,
)
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.workspace import shutdown_workspaces
from selfmanager.server.routes.books import app as books_api_router
from selfmanager.server.routes.data import app as data_api_router
from selfmanager.server.routes.health import add_health_endpoints
from selfmanager.server.routes.ideas import app as ideas_api_router
from selfmanager.server.routes.newsfeed import app as newsfeed_api_router
from selfmanager.server.routes.people import app as people_api_router
from selfmanager.server.routes.pipelines import app as pipelines_api_router
from selfmanager.server.routes.projects import app as projects_api_router
from selfmanager.server.routes.tasks import app as tasks_api_router


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    try:
        await shutdown_workspaces()
    except Exception as e:
        logger.warning(f'Error shutting down workspaces: {e}')


app = FastAPI(
    title='SelfManager',
    description=(
        'Ideas, execution pipelines, tasks, a reading log, a newsfeed, '
        'a people directory and projects'
    ),
    version=get_version(),
    lifespan=_lifespan,
)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'detail': str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return _error(status.HTTP_400_BAD_REQUEST, exc)


@app.exception_handler(NotFoundError)
async def not_found_error_handler(request: Request, exc: NotFoundError):
    return _error(status.HTTP_404_NOT_FOUND, exc)


@app.exception_handler(InvalidStateError)
async def invalid_state_error_handler(request: Request, exc: InvalidStateError):
    return _error(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(OutOfRangeError)
async def out_of_range_error_handler(request: Request, exc: OutOfRangeError):
    return _error(status.HTTP_409_CONFLICT, exc)


@app.exception_handler(DataStoreError)
async def data_store_error_handler(request: Request, exc: DataStoreError):
    logger.error(f'Unhandled data store error on {request.url.path}: {exc}')
    return _error(status.HTTP_502_BAD_GATEWAY, exc)


app.include_router(data_api_router)
app.include_router(ideas_api_router)
app.include_router(pipelines_api_router)
app.include_router(tasks_api_router)
app.include_router(books_api_router)
app.include_router(newsfeed_api_router)
app.include_router(people_api_router)
app.include_router(projects_api_router)
add_health_endpoints(app)
