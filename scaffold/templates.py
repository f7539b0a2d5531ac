"""Source templates for a generated Mastra project.

Schemas, tool bodies and model selectors are opaque strings in the
configuration and are written into the TypeScript verbatim. Names and
descriptions are emitted as string literals.
"""

import json
from typing import Any, Dict, List

from contracts import AgentSpec, ProjectConfiguration, ToolSpec, WorkflowSpec


# Always present in a generated package.json on top of the configured dependencies
RUNTIME_DEPENDENCIES: Dict[str, str] = {
    "tsx": "latest",
    "zod": "latest",
    "@mastra/core": "latest",
}

DEV_DEPENDENCIES: Dict[str, str] = {
    "typescript": "^5.0.0",
    "@types/node": "latest",
    "dotenv": "latest",
}

ENV_FILE = "OPENAI_API_KEY=your_api_key_here\n"

EMPTY_WORKFLOWS = "// No workflows defined.\n"


def _literal(text: str) -> str:
    """Double-quoted TypeScript string literal."""
    return json.dumps(text or "")


def _template_literal(text: str) -> str:
    """Backtick template literal with interpolation disabled."""
    escaped = (text or "").replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
    return f"`{escaped}`"


def _indent(code: str, prefix: str) -> str:
    return "\n".join(f"{prefix}{line}" if line.strip() else line for line in code.strip().splitlines())


def package_json(config: ProjectConfiguration) -> Dict[str, Any]:
    """package.json contents; configured dependencies first, runtime ones win on conflict."""
    return {
        "name": config.project_name,
        "version": "0.1.0",
        "description": config.description,
        "main": "src/mastra/index.ts",
        "type": "module",
        "scripts": {
            "dev": "mastra dev",
            "build": "mastra build",
            "test": "tsx src/test.ts",
        },
        "dependencies": {**config.dependencies, **RUNTIME_DEPENDENCIES},
        "devDependencies": dict(DEV_DEPENDENCIES),
    }


def tsconfig_json() -> Dict[str, Any]:
    return {
        "compilerOptions": {
            "target": "ES2022",
            "module": "ES2022",
            "moduleResolution": "bundler",
            "esModuleInterop": True,
            "strict": True,
            "skipLibCheck": True,
            "noEmit": True,
        },
        "include": ["src/**/*"],
    }


def generate_tool_code(tool: ToolSpec) -> str:
    """One createTool export."""
    lines = [
        f"export const {tool.name} = createTool({{",
        f"    id: {_literal(tool.name)},",
        f"    description: {_literal(tool.description)},",
        f"    inputSchema: {tool.input_schema},",
    ]
    if tool.output_schema:
        lines.append(f"    outputSchema: {tool.output_schema},")
    lines += [
        "    execute: async ({ context }) => {",
        "        // Mock implementation. Replace with your actual logic.",
        _indent(tool.code, "        "),
        "    },",
        "});",
    ]
    return "\n".join(lines) + "\n"


def tools_index(tools: List[ToolSpec]) -> str:
    header = 'import { createTool } from "@mastra/core/tools";\nimport { z } from "zod";\n'
    return header + "".join(f"\n{generate_tool_code(t)}" for t in tools)


def generate_agent_code(agent: AgentSpec) -> str:
    """One Agent export; tools are referenced by their exported names."""
    tools_object = f"{{ {', '.join(agent.tools)} }}" if agent.tools else "{}"
    return "\n".join([
        f"export const {agent.name} = new Agent({{",
        f"    name: {_literal(agent.name)},",
        f"    description: {_literal(agent.description or '')},",
        f"    instructions: {_template_literal(agent.instructions)},",
        f"    model: {agent.model},",
        f"    tools: {tools_object},",
        "});",
    ]) + "\n"


def agents_index(agents: List[AgentSpec]) -> str:
    used_tools: List[str] = []
    for agent in agents:
        for name in agent.tools:
            if name not in used_tools:
                used_tools.append(name)

    header = 'import { Agent } from "@mastra/core/agent";\nimport { openai } from "@ai-sdk/openai";\n'
    if used_tools:
        header += f"import {{ {', '.join(used_tools)} }} from \"../tools\";\n"
    return header + "".join(f"\n{generate_agent_code(a)}" for a in agents)


def generate_workflow_code(workflow: WorkflowSpec) -> str:
    """Workflow scaffold; step bodies are left for the developer to fill in."""
    lines = [
        f"export const {workflow.name} = createWorkflow({{",
        f"    id: {_literal(workflow.name)},",
        f"    description: {_literal(workflow.description)},",
        f"    inputSchema: {workflow.input_schema},",
        f"    outputSchema: {workflow.output_schema},",
        "})",
    ]
    for step in workflow.steps:
        step_config = json.dumps(step.config or {})
        lines.append(
            f"    .addStep({{ id: {_literal(step.id)}, type: {_literal(step.type)}, config: {step_config} }})"
        )
    lines.append("    .commit();")
    return "\n".join(lines) + "\n"


def workflows_index(workflows: List[WorkflowSpec]) -> str:
    if not workflows:
        return EMPTY_WORKFLOWS
    header = (
        'import { createWorkflow } from "@mastra/core/workflows";\n'
        'import { z } from "zod";\n\n'
        "// NOTE: This is a basic scaffold. Implement each step's logic.\n"
    )
    return header + "".join(f"\n{generate_workflow_code(w)}" for w in workflows)


def mastra_index(config: ProjectConfiguration) -> str:
    """src/mastra/index.ts registering every agent, tool and workflow."""
    imports = ['import { Mastra } from "@mastra/core";']
    registrations = []
    for key, module, names in (
        ("agents", "./agents", config.agent_names()),
        ("tools", "./tools", config.tool_names()),
        ("workflows", "./workflows", config.workflow_names()),
    ):
        if names:
            joined = ", ".join(names)
            imports.append(f"import {{ {joined} }} from \"{module}\";")
            registrations.append(f"    {key}: {{ {joined} }},")

    return "\n".join([
        *imports,
        "",
        "export const mastra = new Mastra({",
        *registrations,
        "});",
        "",
        f"console.log({_literal('Mastra instance created for project: ' + config.project_name)});",
    ]) + "\n"
