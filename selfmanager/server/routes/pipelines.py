"""API routes for execution pipelines."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from selfmanager.manager.pipeline_manager import progress, stage_for
from selfmanager.manager.workspace import UserWorkspace
from selfmanager.server.dependencies import get_user_workspace
from selfmanager.storage.data_models.execution_pipeline import ExecutionPipeline
from selfmanager.storage.data_models.idea import Idea

app = APIRouter(prefix='/api')


class StageResponse(BaseModel):
    id: str
    name: str
    order: int
    color: str


class PipelineResponse(BaseModel):
    """Response model for a pipeline, with its idea's title."""
    id: str
    idea_id: str
    idea_title: str | None
    current_stage: int
    current_stage_name: str
    progress: float
    stages: list[StageResponse]
    created_at: str
    updated_at: str
    notes: str
    pending_sync: bool = False


class UpdatePipelineRequest(BaseModel):
    notes: str


class AdvanceStageRequest(BaseModel):
    direction: int  # +1 or -1


def pipeline_to_response(
    pipeline: ExecutionPipeline, idea: Idea | None, workspace: UserWorkspace
) -> PipelineResponse:
    return PipelineResponse(
        id=pipeline.id,
        idea_id=pipeline.idea_id,
        idea_title=idea.title if idea else None,
        current_stage=pipeline.current_stage,
        current_stage_name=stage_for(pipeline).name,
        progress=progress(pipeline),
        stages=[
            StageResponse(id=s.id, name=s.name, order=s.order, color=s.color)
            for s in pipeline.stages
        ],
        created_at=pipeline.created_at,
        updated_at=pipeline.updated_at,
        notes=pipeline.notes,
        pending_sync=workspace.stores.pipelines.is_pending(pipeline.id),
    )


@app.get('/pipelines', response_model=list[PipelineResponse])
async def list_pipelines(
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> list[PipelineResponse]:
    """Get every pipeline whose idea still exists."""
    return [
        pipeline_to_response(pipeline, idea, workspace)
        for pipeline, idea in workspace.pipelines.pipeline_board()
    ]


@app.patch(
    '/pipelines/{pipeline_id}',
    response_model=PipelineResponse,
    responses={404: {'description': 'Pipeline not found'}},
)
async def update_pipeline(
    pipeline_id: str,
    request_body: UpdatePipelineRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PipelineResponse:
    """Update a pipeline's notes."""
    pipeline = await workspace.pipelines.update_notes(pipeline_id, request_body.notes)
    idea = workspace.stores.ideas.get(pipeline.idea_id)
    return pipeline_to_response(pipeline, idea, workspace)


@app.post(
    '/pipelines/{pipeline_id}/advance',
    response_model=PipelineResponse,
    responses={
        200: {'description': 'Stage changed'},
        400: {'description': 'Direction is not +1 or -1'},
        404: {'description': 'Pipeline not found'},
        409: {'description': 'Stage would leave the 1..6 range'},
    },
)
async def advance_pipeline(
    pipeline_id: str,
    request_body: AdvanceStageRequest,
    workspace: UserWorkspace = Depends(get_user_workspace),
) -> PipelineResponse:
    """Move a pipeline one stage forward or back."""
    pipeline = await workspace.pipelines.advance_stage(pipeline_id, request_body.direction)
    idea = workspace.stores.ideas.get(pipeline.idea_id)
    return pipeline_to_response(pipeline, idea, workspace)
