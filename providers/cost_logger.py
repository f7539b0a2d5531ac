"""LiteLLM cost tracking callback for pipeline runs.

The logger's total covers every call made in the process. A run measures
its own spend as the difference from the total it saw when it started,
so nothing here is reset between runs.
"""

from typing import Optional

import litellm
from litellm.integrations.custom_logger import CustomLogger


class PipelineCostLogger(CustomLogger):
    """Prints the cost of each call and keeps a process-wide total."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.total_cost = 0.0

    def log_success_event(self, kwargs, response_obj, start_time, end_time):
        cost = 0.0
        if response_obj is not None:
            hidden = getattr(response_obj, "_hidden_params", None) or {}
            cost = float(hidden.get("response_cost", 0) or 0)
        self.total_cost += cost
        litellm_params = kwargs.get("litellm_params") or {}
        meta = litellm_params.get("metadata") or kwargs.get("metadata") or {}
        if not isinstance(meta, dict):
            meta = {}
        model = kwargs.get("model", "unknown")
        role = meta.get("role", "unknown")
        print(f"  [{role} {model}] → ${cost:.4f}")


# Singleton registered with litellm.callbacks on first use
_pipeline_cost_logger: Optional[PipelineCostLogger] = None


def get_pipeline_cost_logger() -> PipelineCostLogger:
    """Return the global PipelineCostLogger instance (create and register if needed)."""
    global _pipeline_cost_logger
    if _pipeline_cost_logger is None:
        _pipeline_cost_logger = PipelineCostLogger()
        if not litellm.callbacks:
            litellm.callbacks = []
        if _pipeline_cost_logger not in litellm.callbacks:
            litellm.callbacks.append(_pipeline_cost_logger)
    return _pipeline_cost_logger
