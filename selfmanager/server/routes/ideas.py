"""API routes for ideas and their promotion into pipelines."""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from selfmanager.core.exceptions import SelfManagerError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.server.routes.pipelines import PipelineResponse, pipeline_to_response
from selfmanager.storage.data_models.idea import Idea

app = APIRouter(prefix='/api')


# Request/Response Models

class IdeaResponse(BaseModel):
    """Response model for an idea."""
    id: str
    title: str
    description: str
    created_at: str
    priority: str
    tags: list[str]
    status: str
    pending_sync: bool = False


class CreateIdeaRequest(BaseModel):
    """Request model for creating an idea."""
    title: str
    description: str = ''
    priority: str = 'medium'
    tags: list[str] = Field(default_factory=list)


class UpdateIdeaRequest(BaseModel):
    """Request model for updating an idea."""
    title: str | None = None
    description: str | None = None
    priority: str | None = None
    tags: list[str] | None = None


class PromoteIdeaResponse(BaseModel):
    idea: IdeaResponse
    pipeline: PipelineResponse


def idea_to_response(idea: Idea, workspace: UserWorkspace) -> IdeaResponse:
    """Convert an Idea to an IdeaResponse."""
    return IdeaResponse(
        **asdict(idea),
        pending_sync=workspace.stores.ideas.is_pending(idea.id),
    )


# Routes

@app.get(
    '/ideas',
    response_model=list[IdeaResponse],
    responses={200: {'description': 'List of ideas'}},
)
async def list_ideas(
    status_filter: str | None = Query(None, alias='status'),
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[IdeaResponse]:
    """Get all ideas, optionally only those in one status."""
    ideas = workspace.pipelines.list_ideas(status_filter)
    return [idea_to_response(idea, workspace) for idea in ideas]


@app.post(
    '/ideas',
    response_model=IdeaResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Idea created successfully'},
        400: {'description': 'Invalid request'},
        500: {'description': 'Error creating idea'},
    },
)
async def create_idea(
    request_body: CreateIdeaRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> IdeaResponse:
    """Park a new idea."""
    try:
        idea = await workspace.pipelines.create_idea(
            request_body.title,
            description=request_body.description,
            priority=request_body.priority,
            tags=request_body.tags,
        )
        return idea_to_response(idea, workspace)
    except SelfManagerError:
        raise
    except Exception as e:
        logger.error(f'Error creating idea: {e}')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail='Error creating idea',
        )


@app.patch(
    '/ideas/{idea_id}',
    response_model=IdeaResponse,
    responses={
        200: {'description': 'Idea updated successfully'},
        404: {'description': 'Idea not found'},
    },
)
async def update_idea(
    idea_id: str,
    request_body: UpdateIdeaRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> IdeaResponse:
    """Update an existing idea."""
    changes = request_body.model_dump(exclude_none=True)
    idea = await workspace.pipelines.update_idea(idea_id, **changes)
    return idea_to_response(idea, workspace)


@app.delete(
    '/ideas/{idea_id}',
    responses={200: {'description': 'Idea and its pipeline deleted (or already absent)'}},
)
async def delete_idea(
    idea_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> JSONResponse:
    """Delete an idea together with its pipeline. Deleting twice is not an error."""
    existed = await workspace.pipelines.delete_idea(idea_id)
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={'message': f'Idea {idea_id} deleted', 'existed': existed},
    )


@app.post(
    '/ideas/{idea_id}/archive',
    response_model=IdeaResponse,
    responses={
        200: {'description': 'Idea archived'},
        404: {'description': 'Idea not found'},
        409: {'description': 'Idea is not parked'},
    },
)
async def archive_idea(
    idea_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> IdeaResponse:
    idea = await workspace.pipelines.archive_idea(idea_id)
    return idea_to_response(idea, workspace)


@app.post(
    '/ideas/{idea_id}/promote',
    response_model=PromoteIdeaResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {'description': 'Pipeline created'},
        404: {'description': 'Idea not found'},
        409: {'description': 'Idea is not parked or already has a pipeline'},
    },
)
async def promote_idea(
    idea_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PromoteIdeaResponse:
    """Move a parked idea into an execution pipeline at stage 1."""
    idea, pipeline = await workspace.pipelines.promote_to_pipeline(idea_id)
    return PromoteIdeaResponse(
        idea=idea_to_response(idea, workspace),
        pipeline=pipeline_to_response(pipeline, idea, workspace),
    )


@app.post(
    '/ideas/{idea_id}/complete',
    response_model=IdeaResponse,
    responses={
        200: {'description': 'Idea completed'},
        404: {'description': 'Idea not found'},
        409: {'description': 'Pipeline has not reached its last stage'},
    },
)
async def complete_idea(
    idea_id: str,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> IdeaResponse:
    idea = await workspace.pipelines.complete_pipeline(idea_id)
    return idea_to_response(idea, workspace)
