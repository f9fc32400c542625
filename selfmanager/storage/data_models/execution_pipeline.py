"""Data model for execution pipelines and the fixed stage catalog."""

from dataclasses import dataclass, field

from selfmanager.utils.dates import now_iso


@dataclass(frozen=True)
class ExecutionStage:
    id: str
    name: str
    order: int
    color: str


EXECUTION_STAGES: tuple[ExecutionStage, ...] = (
    ExecutionStage(id='1', name='Product', order=1, color='bg-green-500'),
    ExecutionStage(id='2', name='UI/UX', order=2, color='bg-green-600'),
    ExecutionStage(id='3', name='Code', order=3, color='bg-green-700'),
    ExecutionStage(id='4', name='Deploy', order=4, color='bg-emerald-500'),
    ExecutionStage(id='5', name='Market', order=5, color='bg-emerald-600'),
    ExecutionStage(id='6', name='Sale', order=6, color='bg-emerald-700'),
)

FIRST_STAGE = 1
LAST_STAGE = len(EXECUTION_STAGES)


@dataclass
class ExecutionPipeline:
    """The 6-stage progression of one idea, from Product to Sale.

    There is at most one pipeline per idea. ``current_stage`` is 1-based and
    always within ``FIRST_STAGE..LAST_STAGE``; ``stages`` is a snapshot of the
    static catalog, not per-pipeline state.
    """

    id: str  # UUID
    idea_id: str  # Idea this pipeline executes
    current_stage: int = FIRST_STAGE
    stages: list[ExecutionStage] = field(default_factory=lambda: list(EXECUTION_STAGES))
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)
    notes: str = ''

    @property
    def is_at_final_stage(self) -> bool:
        return self.current_stage == LAST_STAGE
