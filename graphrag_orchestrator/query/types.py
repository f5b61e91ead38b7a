"""
Query Pipeline Types

Pipeline State:
    - PipelineStage: Orchestrator states, in execution order
    - StageStatus: How a stage finished (ok, degraded, skipped)

Stage Results:
    - StageOutcome: Stage payload plus its status, so degrade paths are
      visible as data rather than only in logs

Pipeline Output:
    - PipelineResult: Response with per-stage outcomes and timing
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from graphrag_orchestrator.types.requests import AskResponse

T = TypeVar("T")


class PipelineStage(str, Enum):
    """Orchestrator states. Transitions run strictly in declaration order."""

    IDLE = "idle"
    LINKING = "linking"
    EXPANDING = "expanding"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    COMPLETED = "completed"


PIPELINE_ORDER: tuple[PipelineStage, ...] = tuple(PipelineStage)


class StageStatus(str, Enum):
    """Completion status of one stage."""

    OK = "ok"
    DEGRADED = "degraded"  # collaborator failed, safe default returned
    SKIPPED = "skipped"  # nothing to do (empty input, zero hops)


class StageOutcome(BaseModel, Generic[T]):
    """
    Result of one pipeline stage.

    ``value`` is always usable: on a soft failure it holds the stage's safe
    default and ``error`` records what went wrong.
    """

    stage: PipelineStage
    status: StageStatus = StageStatus.OK
    value: T
    error: str | None = None
    elapsed_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == StageStatus.OK

    @property
    def degraded(self) -> bool:
        return self.status == StageStatus.DEGRADED


class PipelineResult(BaseModel):
    """
    Full record of one pipeline run.

    ``response`` is what transport adapters return; the rest is diagnostics.
    """

    response: AskResponse
    stages: list[StageOutcome] = Field(
        default_factory=list, description="Outcome of each executed stage, in order"
    )
    states: list[PipelineStage] = Field(
        default_factory=list, description="States visited, Idle through Completed"
    )
    timing: dict[str, int] = Field(
        default_factory=dict, description="Stage timings in milliseconds"
    )

    @property
    def total_time_ms(self) -> int:
        """Total pipeline time in milliseconds."""
        return sum(self.timing.values())

    @property
    def degraded_stages(self) -> list[PipelineStage]:
        return [s.stage for s in self.stages if s.degraded]

    def outcome(self, stage: PipelineStage) -> StageOutcome | None:
        """Outcome recorded for ``stage``, if it ran."""
        for s in self.stages:
            if s.stage == stage:
                return s
        return None
