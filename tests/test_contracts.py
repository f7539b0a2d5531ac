"""Tests for the Pydantic contracts.

Verifies that contracts accept both attribute and wire (camelCase) names
and serialize with the wire names.
"""

import pytest
from pydantic import ValidationError

from contracts import (
    AgentSpec,
    BuiltAgent,
    BuiltTool,
    EntryPoint,
    EntryPointKind,
    PipelineResult,
    PipelineState,
    Plan,
    ProjectConfiguration,
    RequestClassification,
    RequestIntent,
    RequiredTool,
    ResponseType,
    ResultStatus,
    ToolSpec,
    GenerationFailure,
    StepBudgetExceeded,
    ConfigurationParseError,
)


class TestConfigurationContracts:
    """Test the configuration model."""

    def test_entry_point_accepts_legacy_type_key(self):
        entry = EntryPoint.model_validate({"type": "workflow", "name": "mainWorkflow"})
        assert entry.kind == EntryPointKind.WORKFLOW
        assert entry.to_json_dict() == {"kind": "workflow", "name": "mainWorkflow"}

    def test_entry_point_rejects_unknown_kind(self):
        with pytest.raises(ValidationError):
            EntryPoint(kind="pipeline", name="x")

    def test_tool_spec_wire_names(self):
        tool = ToolSpec.model_validate({
            "name": "webSearch",
            "description": "Search the web",
            "inputSchema": "z.object({ query: z.string() })",
            "code": "return { results: [] };",
        })
        assert tool.input_schema == "z.object({ query: z.string() })"
        data = tool.to_json_dict()
        assert "inputSchema" in data
        assert "outputSchema" not in data

    def test_configuration_defaults(self):
        config = ProjectConfiguration(
            project_name="demo",
            description="Demo",
            entry_point=EntryPoint(kind=EntryPointKind.AGENT, name="mainAgent"),
        )
        assert config.agents == []
        assert config.tools == []
        assert config.workflows == []
        assert config.dependencies["@mastra/core"] == "latest"
        assert set(config.dependencies) == {"@mastra/core", "@ai-sdk/openai", "zod"}

    def test_null_workflows_load_as_empty(self):
        config = ProjectConfiguration.model_validate({
            "projectName": "demo",
            "description": "Demo",
            "dependencies": {},
            "entryPoint": {"kind": "agent", "name": "a"},
            "agents": [],
            "tools": [],
            "workflows": None,
        })
        assert config.workflows == []


class TestPlanContracts:
    """Test the plan produced by the planner."""

    def test_purpose_is_alias_of_function(self):
        tool = RequiredTool.model_validate({"name": "getWeather", "purpose": "Fetch weather"})
        assert tool.function == "Fetch weather"
        assert tool.reasoning == ""

    def test_plan_from_wire_form(self):
        plan = Plan.model_validate({
            "projectOverview": "Weather assistant",
            "requiredTools": [{"name": "getWeather", "function": "Fetch weather", "reasoning": "core"}],
            "requiredAgents": [{"name": "weatherAgent", "role": "Answer weather questions", "reasoning": "core"}],
            "dependencies": ["Open-Meteo API"],
            "entryPoint": "agent",
            "recommendations": "Cache results",
        })
        assert plan.entry_point == EntryPointKind.AGENT
        assert plan.project_name is None
        assert plan.required_agents[0].name == "weatherAgent"

    def test_plan_requires_entry_point(self):
        with pytest.raises(ValidationError):
            Plan.model_validate({"projectOverview": "x"})


class TestBuilderContracts:
    """Test builder outputs."""

    def test_built_tool_drops_dependencies(self):
        built = BuiltTool(
            name="fetchPage",
            description="Fetch a page",
            input_schema="z.object({ url: z.string() })",
            code="return { html: '' };",
            dependencies=["node-fetch"],
        )
        spec = built.to_tool_spec()
        assert type(spec) is ToolSpec
        assert "dependencies" not in spec.to_json_dict()

    def test_built_agent_drops_reasoning(self):
        built = BuiltAgent(
            name="helper",
            instructions="Help",
            model="openai('gpt-4o-mini')",
            tools=[],
            reasoning="Simple task",
        )
        spec = built.to_agent_spec()
        assert type(spec) is AgentSpec
        assert spec.name == "helper"


class TestResultContracts:
    """Test envelopes and routing results."""

    def test_failure_envelope_has_null_final_config(self):
        result = PipelineResult(
            status=ResultStatus.FAILURE,
            message="planning failed: boom",
            state=PipelineState.FAILED,
        )
        data = result.to_json_dict()
        assert data["responseType"] == "FinalConfig"
        assert data["finalConfig"] is None
        assert data["status"] == "failure"
        assert not result.succeeded

    def test_query_response_type(self):
        result = PipelineResult(
            response_type=ResponseType.QUERY_RESPONSE,
            status=ResultStatus.SUCCESS,
            message="I generate agents",
        )
        assert result.to_json_dict()["responseType"] == "QueryResponse"

    def test_terminal_states(self):
        assert PipelineState.SUCCEEDED.is_terminal
        assert PipelineState.FAILED.is_terminal
        assert not PipelineState.BUILDING_TOOLS.is_terminal

    def test_classification_confidence_bounds(self):
        with pytest.raises(ValidationError):
            RequestClassification(intent=RequestIntent.BUILD, confidence=1.5, evidence="x")


class TestErrors:
    """Test exception messages."""

    def test_generation_failure_message(self):
        err = GenerationFailure("tool-builder", cause=ValueError("bad json"))
        assert err.role == "tool-builder"
        assert str(err) == "tool-builder generation failed: ValueError: bad json"

    def test_step_budget_message(self):
        assert str(StepBudgetExceeded(25)).startswith("step budget exceeded")

    def test_parse_error_keeps_diagnostic(self):
        err = ConfigurationParseError("missing projectName")
        assert err.diagnostic == "missing projectName"
        assert "missing projectName" in str(err)
