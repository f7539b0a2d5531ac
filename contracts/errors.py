"""Exceptions raised across the pipeline.

Validation problems in a configuration are not exceptions; they are
reported through ValidationResult.errors.
"""

from typing import Optional


class GenerationFailure(Exception):
    """A generator call errored, timed out, or returned schema-invalid content."""

    def __init__(self, role: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.role = role
        self.cause = cause
        detail = message or (f"{type(cause).__name__}: {cause}" if cause else "unknown error")
        super().__init__(f"{role} generation failed: {detail}")


class ConfigurationParseError(Exception):
    """Serialized configuration could not be parsed or failed schema validation."""

    def __init__(self, diagnostic: str):
        self.diagnostic = diagnostic
        super().__init__(f"Invalid configuration: {diagnostic}")


class StepBudgetExceeded(Exception):
    """The run used more generator/stage invocations than allowed."""

    def __init__(self, max_steps: int):
        self.max_steps = max_steps
        super().__init__(f"step budget exceeded ({max_steps} steps)")


class PipelineCancelled(Exception):
    """The caller cancelled the run."""


class CostBudgetExceeded(Exception):
    """The run spent more on LLM calls than allowed."""

    def __init__(self, max_cost_usd: float, spent_usd: float):
        self.max_cost_usd = max_cost_usd
        self.spent_usd = spent_usd
        super().__init__(f"cost budget exceeded (${spent_usd:.4f} of ${max_cost_usd:.2f})")
