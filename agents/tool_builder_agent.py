"""Tool Builder Agent.

Writes the configuration of one Mastra tool: description, input/output
Zod schemas, a mock execute body and the npm packages it needs.
"""

from typing import List, Optional

from pydantic import BaseModel

from agents.base_agent import StructuredGenerator
from config import settings
from contracts import BuiltTool, RequiredTool, ToolBuildRequest


class ToolBuilderAgent(StructuredGenerator):
    """Generates a BuiltTool from a planned tool specification."""

    SYSTEM_PROMPT = """You are a Mastra tool configuration generator.
Your task is to write the configuration for a single tool from a given specification.

You will be given:
- The tool's name, function and reasoning, sometimes with its input and output types.
- The overall context of the system being built.
- The names of tools that already exist.

You must generate:
- name: exactly the name from the specification.
- description: a clear, one-sentence description of what the tool does.
- inputSchema: a valid Zod schema as a string, e.g. "z.object({ city: z.string().describe('City name') })".
- outputSchema: a valid Zod schema as a string for the result.
- code: the TypeScript body of the tool's execute function. The input is available as `context`.
  Write a mock implementation that logs its input and returns a realistic example value.
- dependencies: npm packages the code imports. Use an empty list unless a package is truly required.

Never reuse the name of an existing tool.
"""

    def __init__(
        self,
        model: Optional[str] = None,
        provider: Optional[str] = None,
        **kwargs,
    ):
        """Initialize the Tool Builder Agent."""
        super().__init__(
            role="tool-builder",
            system_prompt=self.SYSTEM_PROMPT,
            output_schema=BuiltTool,
            model=model or (None if provider else settings.builder_model),
            provider=provider,
            **kwargs,
        )

    def build_user_message(self, request: BaseModel) -> str:
        message = super().build_user_message(request)
        return message + "\n\nOnly return the JSON object, no other text."

    def build(
        self,
        tool_spec: RequiredTool,
        context: str,
        existing_tools: Optional[List[str]] = None,
    ) -> BuiltTool:
        """Convenience method for building a single tool.

        Raises:
            GenerationFailure: If no valid tool could be produced
        """
        return self.generate(ToolBuildRequest(
            tool_spec=tool_spec,
            context=context,
            existing_tools=existing_tools or [],
        ))
