"""API routes for the whole data set: snapshot, export/import, reload and sync."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import BaseModel

from selfmanager.core.exceptions import SelfManagerError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace

app = APIRouter(prefix='/api')


class DataSummaryResponse(BaseModel):
    user_id: str
    counts: dict[str, int]
    last_updated: str
    pending_sync: dict[str, list[str]]


class SyncResponse(BaseModel):
    synced: int
    pending_sync: dict[str, list[str]]


def summary_response(workspace: UserWorkspace) -> DataSummaryResponse:
    data = workspace.snapshot()
    return DataSummaryResponse(
        user_id=workspace.user_id,
        counts=data.counts(),
        last_updated=data.last_updated,
        pending_sync=workspace.pending_summary(),
    )


@app.get('/data', response_model=DataSummaryResponse)
async def get_data_summary(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> DataSummaryResponse:
    """How many entities of each kind the user has, and what is unsynced."""
    return summary_response(workspace)


@app.get('/data/export')
async def export_data(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> dict[str, Any]:
    """The user's whole data set in the camelCase backup format."""
    return workspace.export_data()


@app.post(
    '/data/import',
    response_model=DataSummaryResponse,
    responses={
        200: {'description': 'Data imported'},
        400: {'description': 'Malformed backup'},
        500: {'description': 'Error importing data'},
    },
)
async def import_data(
    payload: dict[str, Any] = Body(...),
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> DataSummaryResponse:
    """Replace the user's data with a backup."""
    try:
        await workspace.import_data(payload)
        return summary_response(workspace)
    except SelfManagerError:
        raise
    except Exception as e:
        logger.error(f'Error importing data: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error importing data',
        )


@app.post('/data/reload', response_model=DataSummaryResponse)
async def reload_data(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> DataSummaryResponse:
    """Discard local state and load the user's data again."""
    await workspace.load()
    return summary_response(workspace)


@app.get('/sync', response_model=SyncResponse)
async def get_sync_status(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> SyncResponse:
    return SyncResponse(synced=0, pending_sync=workspace.pending_summary())


@app.post('/sync', response_model=SyncResponse)
async def sync_pending(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> SyncResponse:
    """Retry every write that failed earlier."""
    synced = await workspace.sync_pending()
    return SyncResponse(synced=synced, pending_sync=workspace.pending_summary())
