"""Tests for the request classifier."""

import json

import pytest
from unittest.mock import patch, MagicMock

from router import RequestClassifier
from contracts import RequestIntent
from providers.base import LLMResponse


@pytest.fixture
def classifier():
    with patch("litellm.validate_environment", return_value={"keys_in_environment": False}):
        return RequestClassifier()


class TestHeuristics:
    """Test keyword classification."""

    def test_build_request(self, classifier):
        intent, confidence, evidence = classifier._heuristic_classify(
            "Create an agent that fetches the weather and build a tool that converts units"
        )
        assert intent == RequestIntent.BUILD
        assert confidence >= 0.6
        assert "Contains" in evidence

    def test_question(self, classifier):
        intent, _, _ = classifier._heuristic_classify("What can you do?")
        assert intent == RequestIntent.QUERY

    def test_question_that_asks_for_a_build(self, classifier):
        intent, _, _ = classifier._heuristic_classify("Can you build me an agent that reads RSS feeds?")
        assert intent == RequestIntent.BUILD

    def test_existing_config_turns_build_into_edit(self, classifier):
        intent, _, evidence = classifier._heuristic_classify("Add a tool that converts units", True)
        assert intent == RequestIntent.EDIT
        assert "Existing configuration supplied" in evidence

    def test_no_indicators_defaults(self, classifier):
        assert classifier._heuristic_classify("weather")[0] == RequestIntent.BUILD
        assert classifier._heuristic_classify("weather", True)[0] == RequestIntent.EDIT


class TestClassify:
    """Test the two-stage classify flow."""

    def test_low_confidence_without_llm_is_heuristic_only(self, classifier):
        result = classifier.classify("weather")
        assert result.intent == RequestIntent.BUILD
        assert "(heuristic only)" in result.evidence

    def test_llm_used_when_uncertain(self, classifier):
        classifier.llm_available = True
        classifier.llm_provider = MagicMock()
        classifier.llm_provider.complete.return_value = LLMResponse(
            content=json.dumps({"intent": "query", "confidence": 0.8, "evidence": "asks about pricing"}),
            input_tokens=10,
            output_tokens=10,
            model="gpt-4.1-nano",
            provider="litellm",
        )
        result = classifier.classify("weather")
        assert result.intent == RequestIntent.QUERY
        assert result.confidence == 0.8

    def test_llm_error_falls_back_to_heuristics(self, classifier):
        classifier.llm_available = True
        classifier.llm_provider = MagicMock()
        classifier.llm_provider.complete.side_effect = RuntimeError("no key")
        result = classifier.classify("weather")
        assert result.intent == RequestIntent.BUILD
        assert "LLM classification failed" in result.evidence

    def test_confident_heuristic_skips_llm(self, classifier):
        classifier.llm_available = True
        classifier.llm_provider = MagicMock()
        classifier.classify("Create an agent that builds reports and generate a tool that emails them")
        classifier.llm_provider.complete.assert_not_called()

    def test_provider_default_model_is_used(self):
        with patch("litellm.validate_environment", return_value={"keys_in_environment": False}):
            classifier = RequestClassifier(provider="anthropic")
        assert classifier.model == "anthropic/claude-sonnet-4-20250514"
