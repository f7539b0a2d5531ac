"""Result contracts: validation, materialization and the pipeline envelope."""

from enum import Enum
from typing import List, Optional

from pydantic import Field

from .config_contracts import CamelModel, ProjectConfiguration


class ValidationResult(CamelModel):
    """Outcome of the validate stage. A non-empty error list is not an exception."""
    is_valid: bool
    errors: List[str] = Field(default_factory=list)


class MaterializationResult(CamelModel):
    """Outcome of writing a project tree to disk."""
    success: bool
    project_path: str
    message: str
    logs: List[str] = Field(default_factory=list)


class ScaffoldStatus(CamelModel):
    """Whether a previous materialization left a well-formed project tree."""
    exists: bool
    is_valid: bool
    path: str
    files: List[str] = Field(default_factory=list)
    message: str


class ResponseType(str, Enum):
    """Kind of envelope returned to the caller."""
    FINAL_CONFIG = "FinalConfig"
    QUERY_RESPONSE = "QueryResponse"


class ResultStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class PipelineState(str, Enum):
    """States of the pipeline controller."""
    PLANNING = "planning"
    INITIALIZING = "initializing"
    BUILDING_TOOLS = "building_tools"
    BUILDING_AGENTS = "building_agents"
    FINALIZING = "finalizing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.SUCCEEDED, PipelineState.FAILED)


class PipelineResult(CamelModel):
    """Envelope handed to the caller of a pipeline run.

    `final_config` is set only for a successful FinalConfig response.
    """
    response_type: ResponseType = ResponseType.FINAL_CONFIG
    status: ResultStatus
    message: str
    final_config: Optional[ProjectConfiguration] = None
    project_path: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    state: Optional[PipelineState] = None
    steps_used: int = 0
    run_id: Optional[str] = None
    cost_usd: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.status == ResultStatus.SUCCESS

    def to_json_dict(self):
        """Wire form; finalConfig is always present, null on failure."""
        data = super().to_json_dict()
        data.setdefault("finalConfig", None)
        return data
