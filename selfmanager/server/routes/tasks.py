"""API routes for repeated, one-off and regular tasks.

``{kind}`` is one of 'repeated', 'non-repeated' or 'regular'.
"""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from selfmanager.manager.task_reconciler import display_status, task_kind
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.storage.data_models.tasks import NON_REPEATED, REPEATED, AnyTask

app = APIRouter(prefix='/api')


class TaskResponse(BaseModel):
    """Response model for any task kind; fields a kind lacks are None."""
    kind: str
    id: str
    title: str
    description: str
    priority: str
    created_at: str
    display_status: str
    pending_sync: bool = False
    project: str | None = None
    time_slot: str | None = None
    # repeated tasks
    frequency: str | None = None
    is_active: bool | None = None
    last_completed: str | None = None
    streak: int | None = None
    # one-off and regular tasks
    status: str | None = None
    completed_at: str | None = None
    deadline: str | None = None


class AgendaItemResponse(BaseModel):
    kind: str
    id: str
    title: str
    description: str
    priority: str
    status: str
    time_slot: str
    project: str | None = None
    deadline: str | None = None
    streak: int | None = None


class CreateTaskRequest(BaseModel):
    title: str
    description: str = ''
    priority: str = 'medium'
    project: str | None = None
    time_slot: str | None = None
    frequency: str = 'daily'
    is_active: bool = True
    deadline: str | None = None


class UpdateTaskRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    project: str | None = None
    time_slot: str | None = None
    frequency: str | None = None
    is_active: bool | None = None
    deadline: str | None = None
    status: str | None = None


class ToggleTaskRequest(BaseModel):
    today: date | None = None


def task_to_response(task: AnyTask, workspace: UserWorkspace) -> TaskResponse:
    kind = task_kind(task)
    store = workspace.tasks.store_for(kind)
    return TaskResponse(
        kind=kind,
        display_status=display_status(task),
        pending_sync=store.is_pending(task.id),
        **asdict(task),
    )


@app.get('/tasks/today', response_model=list[AgendaItemResponse])
async def list_today(
    day: date | None = None,
    time_slot: str | None = None,
    project: str | None = None,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[AgendaItemResponse]:
    """Everything on the agenda for a day (default: today)."""
    items = workspace.tasks.tasks_for_day(day, time_slot=time_slot, project=project)
    return [AgendaItemResponse(**asdict(item)) for item in items]


@app.get('/tasks/{kind}', response_model=list[TaskResponse])
async def list_tasks(
    kind: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[TaskResponse]:
    return [task_to_response(t, workspace) for t in workspace.tasks.list_tasks(kind)]


@app.post(
    '/tasks/{kind}',
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {'description': 'Invalid task'}},
)
async def create_task(
    kind: str,
    request_body: CreateTaskRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> TaskResponse:
    tasks = workspace.tasks
    common = dict(
        description=request_body.description,
        priority=request_body.priority,
        project=request_body.project,
        time_slot=request_body.time_slot,
    )
    if kind == REPEATED:
        task = await tasks.create_repeated_task(
            request_body.title,
            frequency=request_body.frequency,
            is_active=request_body.is_active,
            **common,
        )
    elif kind == NON_REPEATED:
        task = await tasks.create_non_repeated_task(
            request_body.title, request_body.deadline or '', **common
        )
    else:
        tasks.store_for(kind)
        task = await tasks.create_regular_task(request_body.title, **common)
    return task_to_response(task, workspace)


@app.patch(
    '/tasks/{kind}/{task_id}',
    response_model=TaskResponse,
    responses={
        400: {'description': 'Invalid change'},
        404: {'description': 'Task not found'},
    },
)
async def update_task(
    kind: str,
    task_id: str,
    request_body: UpdateTaskRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> TaskResponse:
    changes = request_body.model_dump(exclude_none=True)
    task = await workspace.tasks.update_task(kind, task_id, **changes)
    return task_to_response(task, workspace)


@app.post(
    '/tasks/{kind}/{task_id}/toggle',
    response_model=TaskResponse,
    responses={404: {'description': 'Task not found'}},
)
async def toggle_task(
    kind: str,
    task_id: str,
    request_body: ToggleTaskRequest | None = None,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> TaskResponse:
    """Complete a repeated task for the day, or flip a one-off/regular task."""
    today = request_body.today if request_body else None
    task = await workspace.tasks.toggle_task(kind, task_id, today=today)
    return task_to_response(task, workspace)


@app.delete('/tasks/{kind}/{task_id}')
async def delete_task(
    kind: str,
    task_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    """Delete a task. Local state always drops it, even if the store is unreachable."""
    existed = await workspace.tasks.delete_task(kind, task_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Task {task_id} deleted', 'existed': existed},
    )
