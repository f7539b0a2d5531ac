"""Agent Builder Agent.

Writes one Mastra agent definition: instructions, model selector and the
subset of available tools it should use.
"""

from typing import List, Optional

from pydantic import BaseModel

from agents.base_agent import StructuredGenerator
from config import settings
from contracts import AgentBuildRequest, BuiltAgent, RequiredAgent


class AgentBuilderAgent(StructuredGenerator):
    """Generates a BuiltAgent from a planned agent specification.

    Design principles handed to the model:
    1. Single responsibility per agent
    2. Specific, actionable instructions
    3. Model choice matched to task complexity
    4. Access only to the tools the agent needs
    """

    SYSTEM_PROMPT = """You are an agent builder for a system that generates Mastra AI agent projects.

## Your Responsibilities

1. **Agent Design**: Create a focused agent configuration for the given specification
2. **Instruction Writing**: Write clear, specific instructions for the agent
3. **Model Selection**: Choose a model suited to the agent's complexity
4. **Tool Integration**: Give the agent only the tools it needs

## Model Selection Guidelines

- "openai('gpt-4.1-nano')": most tasks, general purpose agent work
- "openai('gpt-4o')": complex reasoning, code generation, planning
- "openai('gpt-4o-mini')": simple tasks, formatting, basic interactions

## Instruction Writing

- Start with a clear role definition
- Specify expected behavior and response format
- Define boundaries and explain how to handle errors or missing data

## Rules

- name: exactly the name from the specification (camelCase).
- tools: ONLY names from the list of available tools. Never invent tool names.
- model: a model selector string such as "openai('gpt-4.1-nano')".
"""

    def __init__(
        self,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        **kwargs,
    ):
        """Initialize the Agent Builder Agent."""
        super().__init__(
            role="agent-builder",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=BuiltAgent,
            model=model or (None if provider else settings.builder_model),
            provider=provider,
            **kwargs,
        )

    def build_user_message(self, request: BaseModel) -> str:
        message = super().build_user_message(request)
        return message + "\n\nRespond with ONLY the JSON object. No markdown, no explanations."

    def build(
        self,
        agent_spec: RequiredAgent,
        available_tools: List[str],
        context: str,
    ) -> BuiltAgent:
        """Convenience method for building a single agent.

        Raises:
            GenerationFailure: If no valid agent could be produced
        """
        return self.generate(AgentBuildRequest(
            agent_spec=agent_spec,
            available_tools=available_tools,
            context=context,
        ))
