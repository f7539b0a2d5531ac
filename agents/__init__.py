"""Generator implementations for Agent Foundry.

One structured-generator capability, configured as planner, tool builder
and agent builder.
"""

from .base_agent import Generator, StructuredGenerator, GenerationResult
from .planning_agent import PlanningAgent
from .tool_builder_agent import ToolBuilderAgent
from .agent_builder_agent import AgentBuilderAgent
from .fallbacks import placeholder_tool, placeholder_agent

__all__ = [
    # Base
    "Generator",
    "StructuredGenerator",
    "GenerationResult",
    # Configured generators
    "PlanningAgent",
    "ToolBuilderAgent",
    "AgentBuilderAgent",
    # Fallbacks
    "placeholder_tool",
    "placeholder_agent",
]
