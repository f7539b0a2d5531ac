"""Orchestrator module for Agent Foundry execution control."""

from .step_budget import StepBudget, StepRecord
from .run_state import PipelineRun
from .pipeline import PipelineController, run_pipeline, slugify_project_name

__all__ = [
    "StepBudget",
    "StepRecord",
    "PipelineRun",
    "PipelineController",
    "run_pipeline",
    "slugify_project_name",
]
