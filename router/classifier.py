"""Request classifier for deciding what a user request asks for.

Uses heuristic pre-filtering combined with LLM confidence scoring
to tell build requests, edit requests and plain questions apart.
"""

import json
from typing import Optional, Tuple

from contracts import RequestIntent, RequestClassification
from providers import get_provider
from config import settings


class RequestClassifier:
    """Classifies a request as build, edit or query.

    Uses a two-stage approach:
    1. Heuristic pre-filter for obvious cases
    2. LLM confidence scoring for ambiguous cases
    """

    BUILD_INDICATORS = [
        "create", "build", "make", "generate", "scaffold", "i need an agent",
        "i want an agent", "agent that", "agent which", "agent to", "bot that",
        "assistant that", "tool that",
    ]

    EDIT_INDICATORS = [
        "add a tool", "add an agent", "add another", "extend", "modify",
        "update the", "change the", "remove the", "rename", "existing project",
        "existing agent", "to my agent", "to the agent",
    ]

    QUERY_INDICATORS = [
        "what can you", "what do you", "who are you", "how do you", "how does",
        "can you explain", "help", "what is", "which models", "?",
    ]

    def __init__(self, model: Optional[str] = None, provider: Optional[str] = None):
        """Initialize the classifier.

        Args:
            model: Override the default model for classification
            provider: Explicit provider name
        """
        self.llm_provider = get_provider(
            provider_name=provider,
            model=model or (None if provider else settings.planner_model),
            metadata={"role": "classifier"},
        )
        self.model = self.llm_provider.default_model
        self.llm_available = self.llm_provider.is_available()

    def classify(self, request: str, has_existing_config: bool = False) -> RequestClassification:
        """Classify the request.

        Args:
            request: The user's free-text request
            has_existing_config: True when a configuration was loaded for editing

        Returns:
            RequestClassification with intent, confidence and evidence
        """
        intent, confidence, evidence = self._heuristic_classify(request, has_existing_config)

        if confidence >= settings.router_confidence_threshold:
            return RequestClassification(intent=intent, confidence=confidence, evidence=evidence)

        if self.llm_available:
            try:
                return self._llm_classify(request, has_existing_config)
            except (json.JSONDecodeError, KeyError, ValueError) as e:
                evidence = f"{evidence} (LLM classification unusable: {e})"
            except Exception as e:
                evidence = f"{evidence} (LLM classification failed: {type(e).__name__})"

        return RequestClassification(
            intent=intent,
            confidence=confidence,
            evidence=f"{evidence} (heuristic only)",
        )

    def _heuristic_classify(
        self,
        request: str,
        has_existing_config: bool = False,
    ) -> Tuple[RequestIntent, float, str]:
        """Apply keyword rules for quick classification.

        Returns:
            Tuple of (RequestIntent, confidence, evidence)
        """
        text = request.lower().strip()
        evidence_parts = []

        scores = {RequestIntent.BUILD: 0, RequestIntent.EDIT: 0, RequestIntent.QUERY: 0}
        for intent, indicators in (
            (RequestIntent.BUILD, self.BUILD_INDICATORS),
            (RequestIntent.EDIT, self.EDIT_INDICATORS),
            (RequestIntent.QUERY, self.QUERY_INDICATORS),
        ):
            for indicator in indicators:
                if indicator in text:
                    scores[intent] += 1
                    if len(evidence_parts) < 3:
                        evidence_parts.append(f"Contains '{indicator}'")

        # A loaded configuration turns most build-like requests into edits
        if has_existing_config and scores[RequestIntent.BUILD] > 0:
            scores[RequestIntent.EDIT] += scores[RequestIntent.BUILD]
            evidence_parts.append("Existing configuration supplied")

        max_intent = max(scores, key=scores.get)
        max_score = scores[max_intent]
        total_score = sum(scores.values())

        if max_score == 0:
            default = RequestIntent.EDIT if has_existing_config else RequestIntent.BUILD
            return default, 0.3, "No strong indicators found"

        # Questions that also ask for something to be built are build requests
        if max_intent == RequestIntent.QUERY and (scores[RequestIntent.BUILD] or scores[RequestIntent.EDIT]):
            max_intent = RequestIntent.EDIT if has_existing_config else RequestIntent.BUILD
            max_score = scores[max_intent]

        confidence = min(0.9, 0.4 + 0.5 * max_score / (total_score + 1))
        return max_intent, round(confidence, 2), "; ".join(evidence_parts) or "Heuristic analysis"

    def _llm_classify(self, request: str, has_existing_config: bool = False) -> RequestClassification:
        """Use the LLM when heuristics are uncertain."""
        system_prompt = """You classify requests sent to a system that generates Mastra AI agent projects.

Classify the request into one of these intents:
- build: the user wants a new agent project generated
- edit: the user wants an existing project extended or changed
- query: the user is asking a question and nothing should be generated

Respond with JSON matching this schema:
{
    "intent": "build" | "edit" | "query",
    "confidence": 0.0-1.0,
    "evidence": "Brief explanation of classification"
}"""

        user_message = f"Classify this request:\n\n{request[:4000]}"
        if has_existing_config:
            user_message = f"An existing project configuration was supplied.\n\n{user_message}"

        response = self.llm_provider.complete(
            system_prompt=system_prompt,
            user_message=user_message,
            model=self.model,
            max_tokens=300,
            timeout=settings.api_timeout_seconds,
        )

        text = response.content.strip()
        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            text = text[start:end].strip()
        elif "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            text = text[start:end].strip()

        data = json.loads(text)

        return RequestClassification(
            intent=RequestIntent(data["intent"].lower()),
            confidence=data["confidence"],
            evidence=data["evidence"],
        )


def classify_request(
    request: str,
    has_existing_config: bool = False,
    provider: Optional[str] = None,
    model: Optional[str] = None,
) -> RequestClassification:
    """Convenience function for classifying a request."""
    classifier = RequestClassifier(provider=provider, model=model)
    return classifier.classify(request, has_existing_config)
