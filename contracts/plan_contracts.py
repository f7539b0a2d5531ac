"""Plan contracts produced by the planning generator."""

from typing import List, Optional

from pydantic import AliasChoices, Field

from .config_contracts import CamelModel, EntryPointKind, ProjectConfiguration


class RequiredTool(CamelModel):
    """A tool the plan says the project needs."""
    name: str = Field(..., description="Tool name (camelCase identifier)")
    function: str = Field(
        ...,
        validation_alias=AliasChoices("function", "purpose"),
        description="What the tool must do",
    )
    reasoning: str = Field("", description="Why the project needs this tool")
    input_type: Optional[str] = Field(None, description="Informal description of the tool input")
    output_type: Optional[str] = Field(None, description="Informal description of the tool output")


class RequiredAgent(CamelModel):
    """An agent the plan says the project needs."""
    name: str = Field(..., description="Agent name (camelCase identifier)")
    role: str = Field(..., description="The agent's responsibility")
    reasoning: str = Field("", description="Why the project needs this agent")


class Plan(CamelModel):
    """Roadmap for generating a project, in build order."""
    project_name: Optional[str] = Field(
        None, description="kebab-case project name, e.g. weather-agent"
    )
    project_overview: str = Field(..., description="Brief summary of what is being built")
    required_tools: List[RequiredTool] = Field(default_factory=list)
    required_agents: List[RequiredAgent] = Field(default_factory=list)
    dependencies: List[str] = Field(
        default_factory=list, description="External services or APIs the project relies on"
    )
    implementation_steps: List[str] = Field(default_factory=list)
    entry_point: EntryPointKind = Field(..., description="agent or workflow")
    entry_point_name: Optional[str] = Field(
        None, description="Name of the main agent or workflow"
    )
    recommendations: str = Field("", description="Additional guidance")


class PlanRequest(CamelModel):
    """Input for the planning generator."""
    user_request: str = Field(..., description="The user's free-text request")
    existing_config: Optional[ProjectConfiguration] = Field(
        None, description="Configuration being extended in edit mode"
    )
