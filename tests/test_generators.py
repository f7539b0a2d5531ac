"""Tests for the structured generators and placeholder synthesis."""

import json

import pytest
from unittest.mock import MagicMock

from agents import (
    AgentBuilderAgent,
    PlanningAgent,
    ToolBuilderAgent,
    placeholder_agent,
    placeholder_tool,
)
from contracts import (
    BuiltTool,
    GenerationFailure,
    Plan,
    PlanRequest,
    RequiredAgent,
    RequiredTool,
    EntryPointKind,
)
from providers.base import LLMResponse
from providers.litellm_provider import _to_litellm_model
from config import settings


def fake_response(content: str) -> LLMResponse:
    return LLMResponse(
        content=content,
        input_tokens=100,
        output_tokens=50,
        model="gpt-4o-mini",
        provider="litellm",
        cost=0.002,
    )


def mock_llm(*contents: str) -> MagicMock:
    llm = MagicMock()
    llm.default_model = "gpt-4o-mini"
    llm.complete.side_effect = [fake_response(c) for c in contents]
    return llm


PLAN_JSON = json.dumps({
    "projectName": "weather-agent",
    "projectOverview": "Answers weather questions",
    "requiredTools": [{"name": "getWeather", "function": "Fetch current weather", "reasoning": "core"}],
    "requiredAgents": [{"name": "weatherAgent", "role": "Answer questions", "reasoning": "core"}],
    "dependencies": ["Open-Meteo"],
    "entryPoint": "agent",
    "recommendations": "",
})

TOOL_JSON = json.dumps({
    "name": "getWeather",
    "description": "Fetch current weather",
    "inputSchema": "z.object({ city: z.string() })",
    "outputSchema": "z.object({ temperature: z.number() })",
    "code": "return { temperature: 21 };",
    "dependencies": [],
})


class TestStructuredGenerator:
    """Test the parse/validate/retry cycle through the planner."""

    def test_valid_response(self):
        llm = mock_llm(PLAN_JSON)
        planner = PlanningAgent(llm_provider=llm)
        plan = planner.plan("Build me a weather agent")
        assert isinstance(plan, Plan)
        assert plan.entry_point == EntryPointKind.AGENT

    def test_markdown_fenced_response(self):
        llm = mock_llm(f"Here you go:\n```json\n{PLAN_JSON}\n```")
        plan = PlanningAgent(llm_provider=llm).plan("weather")
        assert plan.project_name == "weather-agent"

    def test_retry_after_invalid_output(self):
        llm = mock_llm("not json at all", PLAN_JSON)
        planner = PlanningAgent(llm_provider=llm, max_retries=1)
        result = planner.run(PlanRequest(user_request="weather"))
        assert result.retries == 1
        second_message = llm.complete.call_args_list[1][1]["user_message"]
        assert "# PREVIOUS ERROR" in second_message

    def test_generation_failure_after_retries(self):
        llm = mock_llm("{}", "{}")
        planner = PlanningAgent(llm_provider=llm, max_retries=1)
        with pytest.raises(GenerationFailure) as exc_info:
            planner.plan("weather")
        assert exc_info.value.role == "planner"
        assert llm.complete.call_count == 2

    def test_provider_error_becomes_generation_failure(self):
        llm = MagicMock()
        llm.default_model = "gpt-4o-mini"
        llm.complete.side_effect = TimeoutError("timed out")
        builder = ToolBuilderAgent(llm_provider=llm)
        with pytest.raises(GenerationFailure) as exc_info:
            builder.build(RequiredTool(name="t", function="f"), "ctx")
        assert isinstance(exc_info.value.cause, TimeoutError)
        assert exc_info.value.role == "tool-builder"

    def test_system_prompt_includes_schema(self):
        llm = mock_llm(TOOL_JSON)
        ToolBuilderAgent(llm_provider=llm).build(RequiredTool(name="getWeather", function="f"), "ctx")
        system_prompt = llm.complete.call_args[1]["system_prompt"]
        assert "# OUTPUT FORMAT" in system_prompt
        assert "inputSchema" in system_prompt

    def test_timeout_passed_to_provider(self):
        llm = mock_llm(TOOL_JSON)
        ToolBuilderAgent(llm_provider=llm).build(RequiredTool(name="getWeather", function="f"), "ctx")
        assert llm.complete.call_args[1]["timeout"] is not None


class TestProviderSelection:
    """Test which model each generator resolves to."""

    def test_provider_default_model_is_used(self):
        assert PlanningAgent(provider="anthropic").model == "anthropic/claude-sonnet-4-20250514"
        assert ToolBuilderAgent(provider="gemini").model == "gemini/gemini-2.0-flash"
        assert AgentBuilderAgent(provider="deepseek").model == "deepseek/deepseek-chat"

    def test_settings_models_without_provider(self):
        assert PlanningAgent().model == _to_litellm_model(None, settings.planner_model)
        assert ToolBuilderAgent().model == _to_litellm_model(None, settings.builder_model)

    def test_explicit_model_with_provider(self):
        assert PlanningAgent(model="claude-haiku", provider="anthropic").model == (
            "anthropic/claude-3-5-haiku-20241022"
        )


class TestBuilders:
    """Test the tool and agent builders' request rendering."""

    def test_tool_builder_returns_built_tool(self):
        llm = mock_llm(TOOL_JSON)
        tool = ToolBuilderAgent(llm_provider=llm).build(
            RequiredTool(name="getWeather", function="Fetch weather"), "Weather app", ["other"]
        )
        assert isinstance(tool, BuiltTool)
        message = llm.complete.call_args[1]["user_message"]
        assert '"existingTools"' in message
        assert '"other"' in message

    def test_agent_builder_lists_available_tools(self):
        agent_json = json.dumps({
            "name": "weatherAgent",
            "instructions": "Answer weather questions",
            "model": "openai('gpt-4.1-nano')",
            "tools": ["getWeather"],
        })
        llm = mock_llm(agent_json)
        agent = AgentBuilderAgent(llm_provider=llm).build(
            RequiredAgent(name="weatherAgent", role="Answer questions"), ["getWeather"], "Weather app"
        )
        assert agent.tools == ["getWeather"]
        assert '"availableTools"' in llm.complete.call_args[1]["user_message"]

    def test_planner_marks_new_project(self):
        llm = mock_llm(PLAN_JSON)
        PlanningAgent(llm_provider=llm).plan("weather")
        assert "new project" in llm.complete.call_args[1]["user_message"]


class TestPlaceholders:
    """Test placeholder synthesis for failed builds."""

    def test_placeholder_tool(self):
        tool = placeholder_tool(RequiredTool(name="getWeather", function="Fetch weather"))
        assert tool.name == "getWeather"
        assert tool.description == "Fetch weather"
        assert tool.input_schema.startswith("z.object(")
        assert "console.log" in tool.code
        assert tool.dependencies == []

    def test_placeholder_tool_escapes_quotes(self):
        tool = placeholder_tool(RequiredTool(name="t", function="Get the user's data"))
        assert "user\\'s" in tool.output_schema

    def test_placeholder_tool_escapes_name(self):
        tool = placeholder_tool(RequiredTool(name="it's", function="f"))
        assert "Executing it\\'s:" in tool.code
        assert "from it\\'s'" in tool.code

    def test_placeholder_agent_uses_all_tools(self):
        agent = placeholder_agent(RequiredAgent(name="helper", role="Help users"), ["a", "b"])
        assert agent.tools == ["a", "b"]
        assert "Help users" in agent.instructions
        assert agent.model == "openai('gpt-4.1-nano')"
