"""Step budget for bounding the work of a pipeline run.

Every generator call and every stage call consumes one step.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Any

from config import settings
from contracts import StepBudgetExceeded


@dataclass
class StepRecord:
    """One consumed step."""
    index: int
    label: str
    timestamp: datetime = field(default_factory=datetime.now)


class StepBudget:
    """Bounded counter of generator and stage invocations for one run."""

    def __init__(self, max_steps: Optional[int] = None):
        """Initialize the budget.

        Args:
            max_steps: Maximum invocations for the run (default from settings)
        """
        self.max_steps = max_steps if max_steps is not None else settings.max_steps
        self.records: List[StepRecord] = []

    @property
    def used(self) -> int:
        return len(self.records)

    @property
    def remaining(self) -> int:
        return max(0, self.max_steps - self.used)

    @property
    def is_exhausted(self) -> bool:
        return self.used >= self.max_steps

    def consume(self, label: str) -> int:
        """Take one step.

        Returns:
            Number of steps used so far

        Raises:
            StepBudgetExceeded: If no steps remain
        """
        if self.is_exhausted:
            raise StepBudgetExceeded(self.max_steps)
        self.records.append(StepRecord(index=self.used + 1, label=label))
        return self.used

    def reserve(self, labels: List[str]) -> int:
        """Take one step per label, all or nothing.

        Used before parallel work is submitted so workers never touch the budget.

        Raises:
            StepBudgetExceeded: If fewer than len(labels) steps remain
        """
        if len(labels) > self.remaining:
            raise StepBudgetExceeded(self.max_steps)
        for label in labels:
            self.consume(label)
        return self.used

    def get_steps_by_label(self) -> Dict[str, int]:
        """Count of steps per label prefix (e.g. 'build-tool')."""
        counts: Dict[str, int] = {}
        for record in self.records:
            key = record.label.split(":", 1)[0]
            counts[key] = counts.get(key, 0) + 1
        return counts

    def generate_manifest(self, cost_usd: float = 0.0) -> Dict[str, Any]:
        """Summary of steps, plus the run's LLM cost as measured by the controller."""
        return {
            "summary": {
                "steps_used": self.used,
                "max_steps": self.max_steps,
                "budget_used_percent": round(
                    (self.used / self.max_steps * 100) if self.max_steps > 0 else 0, 1
                ),
                "total_cost_usd": round(cost_usd, 4),
            },
            "by_label": self.get_steps_by_label(),
            "steps": [
                {"index": r.index, "label": r.label, "timestamp": r.timestamp.isoformat()}
                for r in self.records
            ],
        }
