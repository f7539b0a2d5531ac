"""Pydantic contracts for Agent Foundry.

All stage-to-stage handoffs are typed through these contracts.
"""

from .router_contracts import (
    RequestIntent,
    RequestClassification,
)

from .config_contracts import (
    CamelModel,
    EntryPointKind,
    EntryPoint,
    AgentSpec,
    ToolSpec,
    WorkflowStep,
    WorkflowSpec,
    ProjectConfiguration,
)

from .plan_contracts import (
    RequiredTool,
    RequiredAgent,
    Plan,
    PlanRequest,
)

from .builder_contracts import (
    ToolBuildRequest,
    BuiltTool,
    AgentBuildRequest,
    BuiltAgent,
)

from .result_contracts import (
    ValidationResult,
    MaterializationResult,
    ScaffoldStatus,
    ResponseType,
    ResultStatus,
    PipelineState,
    PipelineResult,
)

from .errors import (
    GenerationFailure,
    ConfigurationParseError,
    StepBudgetExceeded,
    CostBudgetExceeded,
    PipelineCancelled,
)

__all__ = [
    # Router
    "RequestIntent",
    "RequestClassification",
    # Configuration
    "CamelModel",
    "EntryPointKind",
    "EntryPoint",
    "AgentSpec",
    "ToolSpec",
    "WorkflowStep",
    "WorkflowSpec",
    "ProjectConfiguration",
    # Plan
    "RequiredTool",
    "RequiredAgent",
    "Plan",
    "PlanRequest",
    # Builders
    "ToolBuildRequest",
    "BuiltTool",
    "AgentBuildRequest",
    "BuiltAgent",
    # Results
    "ValidationResult",
    "MaterializationResult",
    "ScaffoldStatus",
    "ResponseType",
    "ResultStatus",
    "PipelineState",
    "PipelineResult",
    # Errors
    "GenerationFailure",
    "ConfigurationParseError",
    "StepBudgetExceeded",
    "CostBudgetExceeded",
    "PipelineCancelled",
]
