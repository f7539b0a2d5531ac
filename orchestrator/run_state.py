"""Run record for a single pipeline execution."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from contracts import Plan, PipelineState, ProjectConfiguration


LOG_PREFIX = "[Agent-Foundry]"


@dataclass
class PipelineRun:
    """Record of a pipeline execution."""
    run_id: str
    state: PipelineState = PipelineState.PLANNING
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    plan: Optional[Plan] = None
    config: Optional[ProjectConfiguration] = None
    placeholders: List[str] = field(default_factory=list)
    transitions: List[PipelineState] = field(default_factory=lambda: [PipelineState.PLANNING])
    logs: List[str] = field(default_factory=list)
    error: Optional[str] = None

    def log(self, message: str) -> None:
        """Print a progress line and keep it on the record."""
        print(f"{LOG_PREFIX} {message}")
        self.logs.append(message)

    def transition(self, state: PipelineState) -> None:
        """Move to the next state; terminal states stamp the completion time."""
        if self.state.is_terminal:
            raise RuntimeError(f"Run {self.run_id} already finished in state {self.state.value}")
        self.state = state
        self.transitions.append(state)
        if state.is_terminal:
            self.completed_at = datetime.now()

    @property
    def duration_seconds(self) -> float:
        end = self.completed_at or datetime.now()
        return round((end - self.started_at).total_seconds(), 2)
