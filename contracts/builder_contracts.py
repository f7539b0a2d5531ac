"""Contracts for the tool-builder and agent-builder generators."""

from typing import List, Optional

from pydantic import Field

from .config_contracts import AgentSpec, CamelModel, ToolSpec
from .plan_contracts import RequiredAgent, RequiredTool


class ToolBuildRequest(CamelModel):
    """Input for the tool builder."""
    tool_spec: RequiredTool
    context: str = Field(..., description="Short description of the project being built")
    existing_tools: List[str] = Field(
        default_factory=list, description="Tool names already built, to avoid collisions"
    )


class BuiltTool(ToolSpec):
    """Tool builder output: a ToolSpec plus the packages its code needs."""
    dependencies: List[str] = Field(
        default_factory=list, description="npm packages the tool code imports"
    )

    def to_tool_spec(self) -> ToolSpec:
        """Drop the build-time dependency list."""
        return ToolSpec.model_validate(self.model_dump(exclude={"dependencies"}))


class AgentBuildRequest(CamelModel):
    """Input for the agent builder."""
    agent_spec: RequiredAgent
    available_tools: List[str] = Field(default_factory=list)
    context: str = Field(..., description="Short description of the project being built")


class BuiltAgent(AgentSpec):
    """Agent builder output."""
    reasoning: Optional[str] = Field(None, description="Explanation of design choices")

    def to_agent_spec(self) -> AgentSpec:
        """Drop the builder's reasoning."""
        return AgentSpec.model_validate(self.model_dump(exclude={"reasoning"}))
