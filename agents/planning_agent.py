"""Planning Agent - The Architect of the generated project.

Breaks a natural-language request into the tools and agents a Mastra
project needs, and picks the project's entry point.
"""

from typing import Optional

from pydantic import BaseModel

from agents.base_agent import StructuredGenerator
from config import settings
from contracts import Plan, PlanRequest, ProjectConfiguration


class PlanningAgent(StructuredGenerator):
    """Turns a user request into a Plan.

    The plan is the controller's roadmap: tools are built first, in the
    order listed, then agents, then the entry point is fixed.
    """

    SYSTEM_PROMPT = """You are the planning agent of a system that generates Mastra AI agent projects.

## Your Responsibilities

1. **Requirement Analysis**: Break the request into specific, buildable capabilities
2. **Architecture Planning**: Decide which tools and agents are needed
3. **Task Sequencing**: Order the work so tools exist before the agents that use them
4. **Entry Point**: Choose whether the project starts from an agent or a workflow

## Analysis Framework

For every request consider:
- **Purpose**: What is the main goal?
- **Capabilities**: Which concrete actions must be performed? Each becomes a tool.
- **Integrations**: Which external services or APIs are involved?
- **User Interaction**: How will users talk to the system? This shapes the agents.

## Rules

- Tool and agent names MUST be valid camelCase identifiers (e.g. "webSearch", "weatherAgent").
  Never use hyphens or spaces in names.
- projectName MUST be kebab-case (e.g. "weather-agent").
- Keep the plan minimal: only tools the agents actually need.
- entryPoint is "agent" unless the request explicitly describes a multi-step pipeline.
- Set entryPointName to the name of the main agent (or workflow).
- When an existing configuration is supplied, plan ONLY the additional tools and agents;
  do not repeat ones that already exist.
"""

    def __init__(
        self,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        **kwargs,
    ):
        """Initialize the Planning Agent."""
        super().__init__(
            role="planner",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=Plan,
            model=model or (None if provider else settings.planner_model),
            provider=provider,
            **kwargs,
        )

    def build_user_message(self, request: BaseModel) -> str:
        message = super().build_user_message(request)
        if isinstance(request, PlanRequest) and request.existing_config is None:
            message += "\n\nThis is a new project."
        return message + "\n\nRespond with ONLY the JSON plan. No markdown, no explanations."

    def plan(self, user_request: str, existing_config: Optional[ProjectConfiguration] = None) -> Plan:
        """Convenience method for producing a plan.

        Raises:
            GenerationFailure: If no valid plan could be produced
        """
        return self.generate(PlanRequest(user_request=user_request, existing_config=existing_config))
