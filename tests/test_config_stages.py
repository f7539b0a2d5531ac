"""Tests for the configuration stages: init, add, entry point, validate, load/dump."""

import json

import pytest
from pydantic import ValidationError

from contracts import (
    AgentSpec,
    ConfigurationParseError,
    EntryPoint,
    EntryPointKind,
    ToolSpec,
    WorkflowSpec,
    WorkflowStep,
)
from stages import (
    add_agent,
    add_tool,
    add_workflow,
    dump_config,
    init_config,
    load_config,
    load_config_file,
    merge_dependencies,
    set_entry_point,
    validate_config,
)


def make_tool(name: str) -> ToolSpec:
    return ToolSpec(
        name=name,
        description=f"{name} tool",
        input_schema="z.object({ query: z.string() })",
        output_schema="z.object({ result: z.string() })",
        code="return { result: 'ok' };",
    )


def make_agent(name: str, tools=None) -> AgentSpec:
    return AgentSpec(
        name=name,
        instructions=f"You are {name}.",
        model="openai('gpt-4.1-nano')",
        tools=tools or [],
    )


@pytest.fixture
def base_config():
    return init_config("weather-agent", "desc", EntryPointKind.AGENT)


@pytest.fixture
def researcher_config(base_config):
    config = add_tool(base_config, make_tool("webSearch"))
    config = add_agent(config, make_agent("researcher", ["webSearch"]))
    return set_entry_point(config, EntryPoint(kind=EntryPointKind.AGENT, name="researcher"))


class TestInit:
    """Test init_config."""

    def test_agent_entry_point(self, base_config):
        assert base_config.project_name == "weather-agent"
        assert base_config.description == "desc"
        assert base_config.agents == []
        assert base_config.tools == []
        assert base_config.workflows == []
        assert base_config.entry_point.kind == EntryPointKind.AGENT
        assert base_config.entry_point.name == "mainAgent"

    def test_workflow_entry_point_from_string(self):
        config = init_config("flow", "desc", "workflow")
        assert config.entry_point.kind == EntryPointKind.WORKFLOW
        assert config.entry_point.name == "mainWorkflow"

    def test_default_dependencies(self, base_config):
        assert base_config.dependencies == {
            "@mastra/core": "latest",
            "@ai-sdk/openai": "latest",
            "zod": "latest",
        }

    def test_explicit_dependencies(self):
        config = init_config("p", "d", EntryPointKind.AGENT, dependencies={"zod": "^3.22.0"})
        assert config.dependencies == {"zod": "^3.22.0"}

    def test_invalid_kind_rejected(self):
        with pytest.raises(ValidationError):
            init_config("p", "d", "pipeline")


class TestAddTool:
    """Test add_tool and dependency merging."""

    def test_append_only(self, base_config):
        first = add_tool(base_config, make_tool("a"))
        second = add_tool(first, make_tool("b"))
        assert second.tool_names() == ["a", "b"]
        assert second.tools[0] == first.tools[0]
        assert len(second.tools) == len(first.tools) + 1

    def test_input_not_mutated(self, base_config):
        add_tool(base_config, make_tool("a"), ["axios"])
        assert base_config.tools == []
        assert "axios" not in base_config.dependencies

    def test_new_dependency_gets_placeholder_version(self, base_config):
        config = add_tool(base_config, make_tool("a"), ["axios"])
        assert config.dependencies["axios"] == "latest"

    def test_existing_dependency_version_kept(self):
        config = init_config("p", "d", EntryPointKind.AGENT, dependencies={"zod": "^3.22.0"})
        config = add_tool(config, make_tool("a"), ["zod", "axios"])
        config = add_tool(config, make_tool("b"), ["axios"])
        assert config.dependencies == {"zod": "^3.22.0", "axios": "latest"}

    def test_no_collision_check(self, base_config):
        config = add_tool(add_tool(base_config, make_tool("a")), make_tool("a"))
        assert config.tool_names() == ["a", "a"]

    def test_merge_dependencies_none(self):
        assert merge_dependencies({"zod": "1"}, None) == {"zod": "1"}


class TestAddAgentAndWorkflow:
    """Test add_agent, add_workflow and set_entry_point."""

    def test_add_agent_without_reference_check(self, base_config):
        config = add_agent(base_config, make_agent("a", ["missing"]))
        assert config.agent_names() == ["a"]

    def test_add_workflow(self, base_config):
        workflow = WorkflowSpec(
            name="flow",
            description="d",
            input_schema="z.object({})",
            output_schema="z.object({})",
            steps=[WorkflowStep(id="s1", type="agent")],
        )
        config = add_workflow(base_config, workflow)
        assert config.workflow_names() == ["flow"]
        assert base_config.workflows == []

    def test_set_entry_point_replaces_wholesale(self, base_config):
        config = set_entry_point(base_config, EntryPoint(kind=EntryPointKind.WORKFLOW, name="flow"))
        assert config.entry_point.kind == EntryPointKind.WORKFLOW
        assert config.entry_point.name == "flow"
        assert base_config.entry_point.name == "mainAgent"


class TestValidate:
    """Test validate_config."""

    def test_valid_researcher(self, researcher_config):
        result = validate_config(researcher_config)
        assert result.is_valid
        assert result.errors == []

    def test_dangling_tool_reference(self, base_config):
        config = add_tool(base_config, make_tool("webSearch"))
        config = add_agent(config, make_agent("researcher", ["webSearch", "readURL"]))
        config = set_entry_point(config, EntryPoint(kind=EntryPointKind.AGENT, name="researcher"))
        result = validate_config(config)
        assert not result.is_valid
        assert result.errors == ["tool 'readURL' used by agent 'researcher' not found in tools list"]

    def test_every_dangling_reference_reported(self, base_config):
        config = add_agent(base_config, make_agent("a", ["x", "y"]))
        config = add_agent(config, make_agent("b", ["x"]))
        config = set_entry_point(config, EntryPoint(kind=EntryPointKind.AGENT, name="a"))
        errors = validate_config(config).errors
        assert errors == [
            "tool 'x' used by agent 'a' not found in tools list",
            "tool 'y' used by agent 'a' not found in tools list",
            "tool 'x' used by agent 'b' not found in tools list",
        ]

    def test_missing_entry_agent(self, base_config):
        errors = validate_config(base_config).errors
        assert errors == ["entry point agent 'mainAgent' not found in agents list"]

    def test_missing_entry_workflow(self):
        config = init_config("p", "d", EntryPointKind.WORKFLOW)
        errors = validate_config(config).errors
        assert errors == ["entry point workflow 'mainWorkflow' not found in workflows list"]

    def test_entry_point_error_reported_once(self, researcher_config):
        config = set_entry_point(researcher_config, EntryPoint(kind=EntryPointKind.AGENT, name="ghost"))
        entry_errors = [e for e in validate_config(config).errors if e.startswith("entry point")]
        assert len(entry_errors) == 1

    def test_entry_point_and_reference_errors_together(self, base_config):
        config = add_agent(base_config, make_agent("a", ["x"]))
        errors = validate_config(config).errors
        assert errors[0].startswith("entry point agent 'mainAgent'")
        assert errors[1] == "tool 'x' used by agent 'a' not found in tools list"

    def test_duplicate_names(self, researcher_config):
        config = add_tool(researcher_config, make_tool("webSearch"))
        config = add_agent(config, make_agent("researcher"))
        errors = validate_config(config).errors
        assert "duplicate tool name 'webSearch'" in errors
        assert "duplicate agent name 'researcher'" in errors

    def test_duplicate_step_ids(self, base_config):
        workflow = WorkflowSpec(
            name="flow",
            description="d",
            input_schema="z.object({})",
            output_schema="z.object({})",
            steps=[WorkflowStep(id="s1", type="agent"), WorkflowStep(id="s1", type="tool")],
        )
        config = add_workflow(base_config, workflow)
        config = set_entry_point(config, EntryPoint(kind=EntryPointKind.WORKFLOW, name="flow"))
        assert validate_config(config).errors == ["duplicate step id 's1' in workflow 'flow'"]

    def test_pure_and_idempotent(self, base_config):
        config = add_agent(base_config, make_agent("a", ["x"]))
        before = config.model_dump()
        first = validate_config(config)
        second = validate_config(config)
        assert first == second
        assert config.model_dump() == before


class TestLoadDump:
    """Test load_config, load_config_file and dump_config."""

    def test_dump_uses_wire_names(self, researcher_config):
        data = json.loads(dump_config(researcher_config))
        assert data["projectName"] == "weather-agent"
        assert data["entryPoint"] == {"kind": "agent", "name": "researcher"}
        assert data["tools"][0]["inputSchema"].startswith("z.object")

    def test_load_dump_round_trip(self, researcher_config):
        assert load_config(dump_config(researcher_config)) == researcher_config

    def test_load_legacy_type_key(self):
        text = json.dumps({
            "projectName": "p",
            "description": "d",
            "dependencies": {"zod": "latest"},
            "entryPoint": {"type": "agent", "name": "a"},
            "agents": [{"name": "a", "instructions": "i", "model": "m", "tools": []}],
            "tools": [],
        })
        config = load_config(text)
        assert config.entry_point.kind == EntryPointKind.AGENT
        assert config.workflows == []

    def test_load_invalid_json(self):
        with pytest.raises(ConfigurationParseError, match="not valid JSON"):
            load_config("{not json")

    def test_load_non_object(self):
        with pytest.raises(ConfigurationParseError):
            load_config("[1, 2]")

    def test_load_schema_mismatch(self):
        with pytest.raises(ConfigurationParseError) as exc_info:
            load_config(json.dumps({"projectName": "p"}))
        assert "entryPoint" in exc_info.value.diagnostic or "entry_point" in exc_info.value.diagnostic

    def test_load_file(self, tmp_path, researcher_config):
        path = tmp_path / "config.json"
        path.write_text(dump_config(researcher_config))
        assert load_config_file(path) == researcher_config

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationParseError, match="cannot read"):
            load_config_file(tmp_path / "missing.json")
