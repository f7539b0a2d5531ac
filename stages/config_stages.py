"""Pure configuration stages.

Each stage takes a ProjectConfiguration and returns a new one; the input is
never mutated. Structural checks (name collisions, dangling references,
entry point existence) are deferred to validate_config so a configuration
can be assembled first and checked once.
"""

import json
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import TypeAdapter, ValidationError

from config import PLACEHOLDER_VERSION, settings
from contracts import (
    AgentSpec,
    ConfigurationParseError,
    EntryPoint,
    EntryPointKind,
    ProjectConfiguration,
    ToolSpec,
    ValidationResult,
    WorkflowSpec,
)


PROVISIONAL_ENTRY_NAMES = {
    EntryPointKind.AGENT: "mainAgent",
    EntryPointKind.WORKFLOW: "mainWorkflow",
}

_ENTRY_KIND = TypeAdapter(EntryPointKind)


def init_config(
    project_name: str,
    description: str,
    entry_point_kind: Union[EntryPointKind, str],
    dependencies: Optional[Dict[str, str]] = None,
) -> ProjectConfiguration:
    """Create an empty configuration.

    The entry point gets a provisional name that set_entry_point overwrites
    once the real agents or workflows exist.

    Raises:
        ValidationError: If entry_point_kind is not 'agent' or 'workflow'
    """
    kind = _ENTRY_KIND.validate_python(entry_point_kind)
    return ProjectConfiguration(
        project_name=project_name,
        description=description,
        dependencies=dict(dependencies) if dependencies is not None else dict(settings.default_dependencies),
        entry_point=EntryPoint(kind=kind, name=PROVISIONAL_ENTRY_NAMES[kind]),
        agents=[],
        tools=[],
        workflows=[],
    )


def merge_dependencies(
    current: Dict[str, str],
    names: Optional[Iterable[str]],
) -> Dict[str, str]:
    """Add each new package name at the placeholder version; existing keys win."""
    merged = dict(current)
    for name in names or []:
        if name not in merged:
            merged[name] = PLACEHOLDER_VERSION
    return merged


def add_tool(
    config: ProjectConfiguration,
    tool: ToolSpec,
    dependencies: Optional[List[str]] = None,
) -> ProjectConfiguration:
    """Append a tool and merge the packages its code needs."""
    return config.model_copy(update={
        "tools": [*config.tools, tool],
        "dependencies": merge_dependencies(config.dependencies, dependencies),
    })


def add_agent(config: ProjectConfiguration, agent: AgentSpec) -> ProjectConfiguration:
    """Append an agent. Its tool references are checked by validate_config."""
    return config.model_copy(update={"agents": [*config.agents, agent]})


def add_workflow(config: ProjectConfiguration, workflow: WorkflowSpec) -> ProjectConfiguration:
    """Append a workflow."""
    return config.model_copy(update={"workflows": [*config.workflows, workflow]})


def set_entry_point(config: ProjectConfiguration, entry_point: EntryPoint) -> ProjectConfiguration:
    """Replace the entry point wholesale."""
    return config.model_copy(update={"entry_point": entry_point.model_copy()})


def _duplicates(names: Iterable[str]) -> List[str]:
    """Names occurring more than once, in order of first appearance."""
    names = list(names)
    counts = Counter(names)
    seen = []
    for name in names:
        if counts[name] > 1 and name not in seen:
            seen.append(name)
    return seen


def validate_config(config: ProjectConfiguration) -> ValidationResult:
    """Collect every structural defect in one pass.

    Checks, in order: entry point exists, agent tool references resolve,
    names are unique per list, and step ids are unique per workflow.
    """
    errors: List[str] = []
    entry = config.entry_point

    if entry.kind == EntryPointKind.AGENT:
        if entry.name not in config.agent_names():
            errors.append(f"entry point agent '{entry.name}' not found in agents list")
    elif entry.kind == EntryPointKind.WORKFLOW:
        if entry.name not in config.workflow_names():
            errors.append(f"entry point workflow '{entry.name}' not found in workflows list")

    tool_names = set(config.tool_names())
    for agent in config.agents:
        for tool_name in agent.tools:
            if tool_name not in tool_names:
                errors.append(f"tool '{tool_name}' used by agent '{agent.name}' not found in tools list")

    for name in _duplicates(config.tool_names()):
        errors.append(f"duplicate tool name '{name}'")
    for name in _duplicates(config.agent_names()):
        errors.append(f"duplicate agent name '{name}'")
    for name in _duplicates(config.workflow_names()):
        errors.append(f"duplicate workflow name '{name}'")

    for workflow in config.workflows:
        for step_id in _duplicates([s.id for s in workflow.steps]):
            errors.append(f"duplicate step id '{step_id}' in workflow '{workflow.name}'")

    return ValidationResult(is_valid=not errors, errors=errors)


def load_config(config_json: str) -> ProjectConfiguration:
    """Parse and schema-validate a serialized configuration.

    Raises:
        ConfigurationParseError: If the text is not JSON or does not match the schema
    """
    try:
        data = json.loads(config_json)
    except json.JSONDecodeError as e:
        raise ConfigurationParseError(f"not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationParseError(f"expected a JSON object, got {type(data).__name__}")

    try:
        return ProjectConfiguration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationParseError(str(e)) from e


def load_config_file(path: Union[str, Path]) -> ProjectConfiguration:
    """Read and parse a configuration file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationParseError(f"cannot read {path}: {e}") from e
    return load_config(text)


def dump_config(config: ProjectConfiguration, indent: int = 2) -> str:
    """Serialize a configuration with its camelCase wire names."""
    return json.dumps(config.to_json_dict(), indent=indent)
