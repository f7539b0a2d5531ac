"""Project configuration contracts.

The ProjectConfiguration is threaded through every pipeline stage and is
the serialized form used for edit mode. Attributes are snake_case; the JSON
form uses camelCase names (projectName, entryPoint, inputSchema, ...).
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from config import DEFAULT_PROJECT_DEPENDENCIES


class CamelModel(BaseModel):
    """Base for contracts serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> Dict[str, Any]:
        """Dump using the camelCase wire names, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class EntryPointKind(str, Enum):
    """What kind of unit the generated project starts from."""
    AGENT = "agent"
    WORKFLOW = "workflow"


class EntryPoint(CamelModel):
    """The agent or workflow designated as the project's main unit."""
    kind: EntryPointKind = Field(
        ...,
        validation_alias=AliasChoices("kind", "type"),
        description="agent or workflow",
    )
    name: str = Field(..., description="Name of the agent or workflow")


class AgentSpec(CamelModel):
    """An agent definition in the generated project."""
    name: str = Field(..., description="Agent name, unique within the project")
    instructions: str = Field(..., description="Behavioral instructions for the agent")
    model: str = Field(..., description="Model selector, e.g. openai('gpt-4.1-nano')")
    tools: List[str] = Field(default_factory=list, description="Names of tools this agent may call")
    description: Optional[str] = Field(None, description="Short summary of the agent's purpose")


class ToolSpec(CamelModel):
    """A tool definition. Schemas and code are carried as opaque strings."""
    name: str = Field(..., description="Tool name, unique within the project")
    description: str = Field(..., description="What the tool does")
    input_schema: str = Field(..., description="Input schema source, e.g. z.object({...})")
    output_schema: Optional[str] = Field(None, description="Output schema source")
    code: str = Field(..., description="Body of the tool's execute function")


class WorkflowStep(CamelModel):
    """A single step in a workflow."""
    id: str
    type: str
    config: Optional[Dict[str, Any]] = None


class WorkflowSpec(CamelModel):
    """A workflow definition."""
    name: str
    description: str
    input_schema: str
    output_schema: str
    steps: List[WorkflowStep] = Field(default_factory=list)


class ProjectConfiguration(CamelModel):
    """Accumulating description of the project being generated.

    Stages never mutate an instance; each returns an updated copy.
    """
    project_name: str = Field(..., description="Project (package) name")
    description: str = Field(..., description="What the generated project does")
    dependencies: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PROJECT_DEPENDENCIES),
        description="Package name to version constraint",
    )
    entry_point: EntryPoint
    agents: List[AgentSpec] = Field(default_factory=list)
    tools: List[ToolSpec] = Field(default_factory=list)
    workflows: List[WorkflowSpec] = Field(default_factory=list)

    @field_validator("workflows", mode="before")
    @classmethod
    def _null_workflows_are_empty(cls, value: Any) -> Any:
        """Older configurations omit or null out the workflows list."""
        return [] if value is None else value

    def tool_names(self) -> List[str]:
        """Tool names in insertion order."""
        return [t.name for t in self.tools]

    def agent_names(self) -> List[str]:
        """Agent names in insertion order."""
        return [a.name for a in self.agents]

    def workflow_names(self) -> List[str]:
        return [w.name for w in self.workflows]
