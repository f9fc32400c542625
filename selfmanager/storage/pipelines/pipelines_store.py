"""Store for execution pipelines, backed by the ``execution_pipelines`` table."""

from __future__ import annotations

from dataclasses import asdict

from selfmanager.core.exceptions import OutOfRangeError, ValidationError
from selfmanager.storage.backend.table_backend import Row
from selfmanager.storage.data_models.execution_pipeline import (
    EXECUTION_STAGES,
    FIRST_STAGE,
    LAST_STAGE,
    ExecutionPipeline,
    ExecutionStage,
)
from selfmanager.storage.entity_store import EntityStore
from selfmanager.utils.dates import now_iso


def _dict_to_stage(data: dict) -> ExecutionStage:
    return ExecutionStage(
        id=str(data['id']),
        name=data['name'],
        order=int(data['order']),
        color=data.get('color', ''),
    )


def _clamp_stage(stage: int) -> int:
    return max(FIRST_STAGE, min(LAST_STAGE, stage))


class PipelinesStore(EntityStore[ExecutionPipeline]):
    table = 'execution_pipelines'
    entity_name = 'pipeline'

    def _validate(self, pipeline: ExecutionPipeline) -> None:
        if not pipeline.idea_id:
            raise ValidationError('Pipeline must reference an idea')
        if not FIRST_STAGE <= pipeline.current_stage <= LAST_STAGE:
            raise OutOfRangeError(
                f'Pipeline stage {pipeline.current_stage} outside {FIRST_STAGE}..{LAST_STAGE}'
            )

    def find_by_idea(self, idea_id: str) -> ExecutionPipeline | None:
        for pipeline in self.all():
            if pipeline.idea_id == idea_id:
                return pipeline
        return None

    def _to_row(self, pipeline: ExecutionPipeline) -> Row:
        return {
            'id': pipeline.id,
            'idea_id': pipeline.idea_id,
            'current_stage': pipeline.current_stage,
            'stages': [asdict(stage) for stage in pipeline.stages],
            'created_at': pipeline.created_at,
            'updated_at': pipeline.updated_at,
            'notes': pipeline.notes,
        }

    def _from_row(self, row: Row) -> ExecutionPipeline:
        # Older rows were written with an empty stage list
        stages = [_dict_to_stage(s) for s in row.get('stages') or []] or list(EXECUTION_STAGES)
        created_at = row.get('created_at') or now_iso()
        return ExecutionPipeline(
            id=row['id'],
            idea_id=row['idea_id'],
            current_stage=_clamp_stage(int(row.get('current_stage') or FIRST_STAGE)),
            stages=stages,
            created_at=created_at,
            updated_at=row.get('updated_at') or created_at,
            notes=row.get('notes') or '',
        )
