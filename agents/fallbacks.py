"""Deterministic placeholders used when a builder call fails.

A failed tool or agent build must not stall the pipeline, so the
controller substitutes these records and keeps going.
"""

from typing import List, Optional

from config import settings
from contracts import BuiltAgent, BuiltTool, RequiredAgent, RequiredTool


def _quote(text: str) -> str:
    """Escape text for a single-quoted TypeScript string literal."""
    return text.replace("\\", "\\\\").replace("'", "\\'").replace("\n", " ")


def placeholder_tool(spec: RequiredTool) -> BuiltTool:
    """Stub tool that logs its input and returns a generic object."""
    input_hint = _quote(spec.input_type or "Input for the tool")
    output_hint = _quote(spec.output_type or spec.function)
    name = _quote(spec.name)
    return BuiltTool(
        name=spec.name,
        description=spec.function,
        input_schema=f"z.object({{ input: z.string().describe('{input_hint}') }})",
        output_schema=f"z.object({{ output: z.string().describe('{output_hint}') }})",
        code=(
            f"console.log('Executing {name}:', context);\n"
            f"return {{ output: 'example result from {name}' }};"
        ),
        dependencies=[],
    )


def placeholder_agent(
    spec: RequiredAgent,
    available_tools: List[str],
    model: Optional[str] = None,
) -> BuiltAgent:
    """Stub agent whose instructions restate its role; it may use every built tool."""
    return BuiltAgent(
        name=spec.name,
        instructions=(
            f"You are {spec.name}. Your role: {spec.role}. "
            f"Use the available tools when they help you complete the user's request, "
            f"and say clearly when you cannot."
        ),
        model=model or settings.generated_agent_model,
        tools=list(available_tools),
        description=spec.role,
        reasoning="Placeholder generated after the agent builder failed",
    )
