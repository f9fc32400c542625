"""API routes for projects, their milestones, stages and bulk tasks."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from selfmanager.core.exceptions import SelfManagerError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.server.routes.tasks import TaskResponse, task_to_response
from selfmanager.storage.data_models.project import (
    DEFAULT_STAGE_COLOR,
    Project,
    ProjectBulkTask,
    ProjectMilestone,
    ProjectStage,
)

app = APIRouter(prefix='/api')


# Request/Response Models

class ProjectResponse(BaseModel):
    id: str
    name: str
    description: str
    priority: str
    status: str
    start_date: str | None
    end_date: str | None
    tags: list[str]
    created_at: str
    updated_at: str
    pending_sync: bool = False


class CreateProjectRequest(BaseModel):
    name: str
    description: str = ''
    priority: str = 'medium'
    status: str = 'planning'
    start_date: str | None = None
    end_date: str | None = None
    tags: list[str] = Field(default_factory=list)


class UpdateProjectRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    priority: str | None = None
    status: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    tags: list[str] | None = None


class MilestoneResponse(BaseModel):
    id: str
    project_id: str
    name: str
    description: str
    target_date: str | None
    status: str
    order_index: int
    created_at: str


class MilestoneRequest(BaseModel):
    name: str
    description: str = ''
    target_date: str | None = None
    status: str = 'pending'


class UpdateMilestoneRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    target_date: str | None = None
    status: str | None = None
    order_index: int | None = None


class StageResponse(BaseModel):
    id: str
    project_id: str
    name: str
    description: str
    color: str
    order_index: int
    is_completed: bool
    created_at: str


class StageRequest(BaseModel):
    name: str
    description: str = ''
    color: str = DEFAULT_STAGE_COLOR


class UpdateStageRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    color: str | None = None
    order_index: int | None = None
    is_completed: bool | None = None


class BulkTaskResponse(BaseModel):
    id: str
    project_id: str
    title: str
    description: str
    frequency: str
    priority: str
    is_active: bool
    created_at: str


class BulkTaskRequest(BaseModel):
    title: str
    description: str = ''
    frequency: str = 'daily'
    priority: str = 'medium'
    is_active: bool = True


class UpdateBulkTaskRequest(BaseModel):
    title: str | None = None
    description: str | None = None
    frequency: str | None = None
    priority: str | None = None
    is_active: bool | None = None


class ProjectDetailResponse(BaseModel):
    project: ProjectResponse
    milestones: list[MilestoneResponse]
    stages: list[StageResponse]
    bulk_tasks: list[BulkTaskResponse]


def project_to_response(project: Project, workspace: UserWorkspace) -> ProjectResponse:
    return ProjectResponse(
        **asdict(project),
        pending_sync=workspace.stores.projects.is_pending(project.id),
    )


def milestone_to_response(milestone: ProjectMilestone) -> MilestoneResponse:
    return MilestoneResponse(**asdict(milestone))


def stage_to_response(stage: ProjectStage) -> StageResponse:
    return StageResponse(**asdict(stage))


def bulk_task_to_response(bulk_task: ProjectBulkTask) -> BulkTaskResponse:
    return BulkTaskResponse(**asdict(bulk_task))


def _deleted(kind: str, entity_id: str, existed: bool) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'{kind} {entity_id} deleted', 'existed': existed},
    )


# Projects

@app.get('/projects', response_model=list[ProjectResponse])
async def list_projects(
    status_filter: str | None = Query(None, alias='status'),
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[ProjectResponse]:
    return [project_to_response(p, workspace) for p in workspace.projects.list_projects(status_filter)]


@app.post(
    '/projects',
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Project created'},
        400: {'description': 'Invalid project'},
        500: {'description': 'Error creating project'},
    },
)
async def create_project(
    request_body: CreateProjectRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> ProjectResponse:
    try:
        project = await workspace.projects.create_project(**request_body.model_dump())
        return project_to_response(project, workspace)
    except SelfManagerError:
        raise
    except Exception as e:
        logger.error(f'Error creating project: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error creating project',
        )


@app.get('/projects/{project_id}', response_model=ProjectDetailResponse)
async def get_project(
    project_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> ProjectDetailResponse:
    """A project with its milestones, stages and bulk tasks."""
    planner = workspace.projects
    project = workspace.stores.projects.require(project_id)
    return ProjectDetailResponse(
        project=project_to_response(project, workspace),
        milestones=[milestone_to_response(m) for m in planner.list_milestones(project_id)],
        stages=[stage_to_response(s) for s in planner.list_stages(project_id)],
        bulk_tasks=[bulk_task_to_response(t) for t in planner.list_bulk_tasks(project_id)],
    )


@app.patch('/projects/{project_id}', response_model=ProjectResponse)
async def update_project(
    project_id: str,
    request_body: UpdateProjectRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> ProjectResponse:
    changes = request_body.model_dump(exclude_none=True)
    project = await workspace.projects.update_project(project_id, **changes)
    return project_to_response(project, workspace)


@app.delete('/projects/{project_id}')
async def delete_project(
    project_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    """Delete a project with its milestones, stages and bulk tasks."""
    return _deleted('Project', project_id, await workspace.projects.delete_project(project_id))


@app.post(
    '/projects/{project_id}/generate-tasks',
    response_model=list[TaskResponse],
    responses={404: {'description': 'Project not found'}},
)
async def generate_tasks(
    project_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[TaskResponse]:
    """Turn the project's active bulk tasks into repeated tasks."""
    tasks = await workspace.projects.generate_tasks(project_id)
    return [task_to_response(t, workspace) for t in tasks]


# Milestones

@app.post(
    '/projects/{project_id}/milestones',
    response_model=MilestoneResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_milestone(
    project_id: str,
    request_body: MilestoneRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> MilestoneResponse:
    milestone = await workspace.projects.add_milestone(project_id, **request_body.model_dump())
    return milestone_to_response(milestone)


@app.patch('/milestones/{milestone_id}', response_model=MilestoneResponse)
async def update_milestone(
    milestone_id: str,
    request_body: UpdateMilestoneRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> MilestoneResponse:
    changes = request_body.model_dump(exclude_none=True)
    return milestone_to_response(await workspace.projects.update_milestone(milestone_id, **changes))


@app.delete('/milestones/{milestone_id}')
async def delete_milestone(
    milestone_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    return _deleted('Milestone', milestone_id, await workspace.projects.delete_milestone(milestone_id))


# Stages

@app.post(
    '/projects/{project_id}/stages',
    response_model=StageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_stage(
    project_id: str,
    request_body: StageRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> StageResponse:
    stage = await workspace.projects.add_stage(project_id, **request_body.model_dump())
    return stage_to_response(stage)


@app.patch('/stages/{stage_id}', response_model=StageResponse)
async def update_stage(
    stage_id: str,
    request_body: UpdateStageRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> StageResponse:
    changes = request_body.model_dump(exclude_none=True)
    return stage_to_response(await workspace.projects.update_stage(stage_id, **changes))


@app.post('/stages/{stage_id}/toggle', response_model=StageResponse)
async def toggle_stage(
    stage_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> StageResponse:
    return stage_to_response(await workspace.projects.toggle_stage(stage_id))


@app.delete('/stages/{stage_id}')
async def delete_stage(
    stage_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    return _deleted('Stage', stage_id, await workspace.projects.delete_stage(stage_id))


# Bulk tasks

@app.post(
    '/projects/{project_id}/bulk-tasks',
    response_model=BulkTaskResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_bulk_task(
    project_id: str,
    request_body: BulkTaskRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> BulkTaskResponse:
    bulk_task = await workspace.projects.add_bulk_task(project_id, **request_body.model_dump())
    return bulk_task_to_response(bulk_task)


@app.patch('/bulk-tasks/{bulk_task_id}', response_model=BulkTaskResponse)
async def update_bulk_task(
    bulk_task_id: str,
    request_body: UpdateBulkTaskRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> BulkTaskResponse:
    changes = request_body.model_dump(exclude_none=True)
    return bulk_task_to_response(await workspace.projects.update_bulk_task(bulk_task_id, **changes))


@app.delete('/bulk-tasks/{bulk_task_id}')
async def delete_bulk_task(
    bulk_task_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    return _deleted('Bulk task', bulk_task_id, await workspace.projects.delete_bulk_task(bulk_task_id))
