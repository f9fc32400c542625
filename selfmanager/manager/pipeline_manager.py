"""Ideas and their execution pipelines.

State machine of an idea::

    parking --promote--> in-pipeline --complete--> completed
       |
       +--archive--> archived

Promoting an idea creates its single pipeline at stage 1. The pipeline then
moves one stage at a time, up or down, within 1..6; completing is only
possible once it sits on the last stage. Preconditions are checked before
anything changes, and persistence is fail-soft like every other store write.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable

from selfmanager.core.exceptions import InvalidStateError, OutOfRangeError, ValidationError
from selfmanager.core.logger import selfmanager_logger as logger
from selfmanager.storage.data_models.execution_pipeline import (
    EXECUTION_STAGES,
    FIRST_STAGE,
    LAST_STAGE,
    ExecutionPipeline,
    ExecutionStage,
)
from selfmanager.storage.data_models.idea import IDEA_PRIORITIES, Idea
from selfmanager.storage.store_set import StoreSet
from selfmanager.utils.dates import now_iso
from selfmanager.utils.identifiers import new_id

EDITABLE_IDEA_FIELDS = frozenset({'title', 'description', 'priority', 'tags'})


def _clean_tags(tags: Iterable[str] | None) -> list[str]:
    return [t.strip() for t in tags or [] if t and t.strip()]


def stage_for(pipeline: ExecutionPipeline) -> ExecutionStage:
    """The catalog entry of the pipeline's current stage."""
    return EXECUTION_STAGES[pipeline.current_stage - 1]


def progress(pipeline: ExecutionPipeline) -> float:
    """Fraction of the stages reached, 1/6 on stage 1 up to 1.0 on the last."""
    return pipeline.current_stage / LAST_STAGE


class PipelineManager:
    """Idea lifecycle and pipeline stage transitions for one user."""

    def __init__(self, stores: StoreSet):
        self.ideas = stores.ideas
        self.pipelines = stores.pipelines

    async def create_idea(
        self,
        title: str,
        description: str = '',
        priority: str = 'medium',
        tags: Iterable[str] | None = None,
    ) -> Idea:
        """Create an idea in the parking lot."""
        if not title or not title.strip():
            raise ValidationError('Idea title cannot be empty')
        if priority not in IDEA_PRIORITIES:
            raise ValidationError(f'Invalid idea priority: {priority}')

        idea = Idea(
            id=new_id(),
            title=title.strip(),
            description=(description or '').strip(),
            priority=priority,
            tags=_clean_tags(tags),
            status='parking',
        )
        await self.ideas.save(idea)
        logger.info(f'Created idea {idea.id}')
        return idea

    async def update_idea(self, idea_id: str, **changes) -> Idea:
        """Edit the title, description, priority or tags of an idea."""
        idea = self.ideas.require(idea_id)
        unknown = set(changes) - EDITABLE_IDEA_FIELDS
        if unknown:
            raise ValidationError(f'Cannot update idea field(s): {", ".join(sorted(unknown))}')
        if 'tags' in changes:
            changes['tags'] = _clean_tags(changes['tags'])
        if isinstance(changes.get('title'), str):
            changes['title'] = changes['title'].strip()

        updated = replace(idea, **changes)
        await self.ideas.save(updated)
        logger.info(f'Updated idea {idea_id}')
        return updated

    async def archive_idea(self, idea_id: str) -> Idea:
        idea = self.ideas.require(idea_id)
        if idea.status != 'parking':
            raise InvalidStateError(f'Only parked ideas can be archived (idea {idea_id} is {idea.status})')
        archived = replace(idea, status='archived')
        await self.ideas.save(archived)
        logger.info(f'Archived idea {idea_id}')
        return archived

    async def promote_to_pipeline(self, idea_id: str) -> tuple[Idea, ExecutionPipeline]:
        """Start executing a parked idea.

        The pipeline is written before the idea. Both writes are fail-soft,
        so a failed remote write leaves a pending-sync flag on that entity
        while local state already holds both changes.
        """
        idea = self.ideas.require(idea_id)
        if idea.status != 'parking':
            raise InvalidStateError(f'Idea {idea_id} is {idea.status}, not parking')
        if self.pipelines.find_by_idea(idea_id) is not None:
            raise InvalidStateError(f'Idea {idea_id} already has a pipeline')

        timestamp = now_iso()
        pipeline = ExecutionPipeline(
            id=new_id(),
            idea_id=idea_id,
            current_stage=FIRST_STAGE,
            stages=list(EXECUTION_STAGES),
            created_at=timestamp,
            updated_at=timestamp,
            notes='',
        )
        await self.pipelines.save(pipeline)
        promoted = replace(idea, status='in-pipeline')
        await self.ideas.save(promoted)
        logger.info(f'Promoted idea {idea_id} to pipeline {pipeline.id}')
        return promoted, pipeline

    async def advance_stage(self, pipeline_id: str, direction: int) -> ExecutionPipeline:
        """Move a pipeline one stage forward (+1) or back (-1)."""
        if direction not in (1, -1):
            raise ValidationError(f'Stage direction must be +1 or -1, got {direction}')
        pipeline = self.pipelines.require(pipeline_id)
        target = pipeline.current_stage + direction
        if not FIRST_STAGE <= target <= LAST_STAGE:
            raise OutOfRangeError(
                f'Pipeline {pipeline_id} cannot move to stage {target} '
                f'(stages run {FIRST_STAGE}..{LAST_STAGE})'
            )

        moved = replace(pipeline, current_stage=target, updated_at=now_iso())
        await self.pipelines.save(moved)
        logger.info(f'Pipeline {pipeline_id} moved to stage {target} ({stage_for(moved).name})')
        return moved

    async def update_notes(self, pipeline_id: str, notes: str) -> ExecutionPipeline:
        pipeline = self.pipelines.require(pipeline_id)
        updated = replace(pipeline, notes=notes or '', updated_at=now_iso())
        await self.pipelines.save(updated)
        return updated

    async def complete_pipeline(self, idea_id: str) -> Idea:
        """Mark an idea completed once its pipeline reached the last stage.

        The pipeline itself is kept.
        """
        idea = self.ideas.require(idea_id)
        if idea.status != 'in-pipeline':
            raise InvalidStateError(f'Idea {idea_id} is {idea.status}, not in-pipeline')
        pipeline = self.pipelines.find_by_idea(idea_id)
        if pipeline is None:
            raise InvalidStateError(f'Idea {idea_id} has no pipeline')
        if not pipeline.is_at_final_stage:
            raise InvalidStateError(
                f'Pipeline {pipeline.id} is on stage {pipeline.current_stage}, not {LAST_STAGE}'
            )

        completed = replace(idea, status='completed')
        await self.ideas.save(completed)
        logger.info(f'Completed idea {idea_id}')
        return completed

    async def delete_idea(self, idea_id: str) -> bool:
        """Delete an idea and every pipeline referencing it.

        Idempotent; returns whether the idea existed.
        """
        for pipeline in [p for p in self.pipelines.all() if p.idea_id == idea_id]:
            await self.pipelines.delete(pipeline.id)
        existed = await self.ideas.delete(idea_id)
        logger.info(f'Deleted idea {idea_id}')
        return existed

    def list_ideas(self, status: str | None = None) -> list[Idea]:
        ideas = self.ideas.all()
        if status is None:
            return ideas
        return [i for i in ideas if i.status == status]

    def pipeline_board(self) -> list[tuple[ExecutionPipeline, Idea]]:
        """Pipelines paired with their ideas; pipelines of missing ideas are skipped."""
        board = []
        for pipeline in self.pipelines.all():
            idea = self.ideas.get(pipeline.idea_id)
            if idea is not None:
                board.append((pipeline, idea))
        return board
