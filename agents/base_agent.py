"""Structured generator base that every builder agent inherits from.

Every generator:
- Calls the LLM with a system prompt + the JSON schema of its output contract
- Parses the reply and validates it against that Pydantic contract
- Retries with the validation error when the reply does not match
- Raises GenerationFailure when the call errors or never produces valid output
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Type, TypeVar, Optional
from pydantic import BaseModel, ValidationError

from providers import get_provider, LLMProvider
from contracts import GenerationFailure
from config import settings

T = TypeVar("T", bound=BaseModel)


class GenerationResult(BaseModel):
    """Validated output plus call metadata."""
    output: Any
    model: str
    provider: str = "litellm"
    raw_response: Optional[str] = None
    retries: int = 0


class Generator(ABC):
    """Capability the pipeline controller depends on.

    Implementations return a validated contract instance or raise
    GenerationFailure; they never return partial or unvalidated data.
    """

    role: str = "generator"

    @abstractmethod
    def generate(self, request: BaseModel) -> BaseModel:
        """Produce a structured record for the request."""
        pass


class StructuredGenerator(Generator):
    """LLM-backed generator bound to one output contract.

    Subclasses supply the role, system prompt and output schema; the
    request/parse/validate/retry cycle is shared.
    """

    def __init__(
        self,
        role: str,
        system_prompt: str,
        output_schema: Type[T],
        model: Optional[str] = None,
        provider: Optional[str] = None,
        max_retries: Optional[int] = None,
        llm_provider: Optional[LLMProvider] = None,
    ):
        """Initialize the generator.

        Args:
            role: Generator role, used in errors and cost logs (e.g. 'planner')
            system_prompt: The system prompt defining the generator's behavior
            output_schema: Pydantic model class the reply must validate against
            model: Model name (e.g. 'gpt-4o-mini', 'claude-sonnet', 'gemini-2.5-flash')
            provider: Explicit provider name (anthropic, openai, gemini, deepseek)
            max_retries: Corrective retries on invalid output (default from settings)
            llm_provider: Pre-built provider, mainly for tests
        """
        self.role = role
        self.system_prompt = system_prompt
        self.output_schema = output_schema
        self.max_retries = settings.max_generation_retries if max_retries is None else max_retries

        self.llm_provider: LLMProvider = llm_provider or get_provider(
            provider_name=provider, model=model, metadata={"role": role}
        )
        self.model = self.llm_provider.default_model

    def _build_full_system_prompt(self) -> str:
        """System prompt followed by the output contract."""
        schema = json.dumps(self.output_schema.model_json_schema(by_alias=True), indent=2)
        return (
            f"{self.system_prompt}\n\n# OUTPUT FORMAT\n"
            f"You MUST respond with valid JSON matching this schema:\n\n"
            f"```json\n{schema}\n```"
        )

    def build_user_message(self, request: BaseModel) -> str:
        """Render the request for the model. Subclasses add task-specific guidance."""
        return f"# INPUT\n\n{request.model_dump_json(by_alias=True, exclude_none=True, indent=2)}"

    def _parse_and_validate(self, response_text: str) -> BaseModel:
        """Parse LLM response and validate against schema.

        Raises:
            ValidationError: If response doesn't match schema
            json.JSONDecodeError: If response isn't valid JSON
        """
        text = response_text.strip()

        # Handle markdown code blocks
        if "```json" in text:
            start = text.find("```json") + 7
            end = text.find("```", start)
            text = text[start:end].strip()
        elif "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            text = text[start:end].strip()

        data = json.loads(text)
        return self.output_schema.model_validate(data)

    def run(self, request: BaseModel) -> GenerationResult:
        """Call the model until it returns a valid record or retries run out.

        Raises:
            ValidationError / json.JSONDecodeError: If output is invalid after retries
            Exception: If the provider call fails
        """
        base_message = self.build_user_message(request)
        user_message = base_message
        full_system_prompt = self._build_full_system_prompt()
        last_error: Optional[str] = None

        for attempt in range(self.max_retries + 1):
            if attempt > 0:
                user_message = (
                    f"{base_message}\n\n# PREVIOUS ERROR\n\n"
                    f"Your previous response did not match the required schema. "
                    f"Error: {last_error}\n\n"
                    f"Please fix the issues and provide a valid JSON response."
                )

            response = self.llm_provider.complete(
                system_prompt=full_system_prompt,
                user_message=user_message,
                model=self.model,
                max_tokens=settings.max_tokens_per_call,
                timeout=settings.api_timeout_seconds,
            )

            try:
                output = self._parse_and_validate(response.content)
            except (json.JSONDecodeError, ValidationError) as e:
                last_error = str(e)
                if attempt == self.max_retries:
                    raise
                continue

            return GenerationResult(
                output=output,
                model=response.model,
                provider=response.provider,
                raw_response=response.content,
                retries=attempt,
            )

        # Should not reach here
        raise RuntimeError("Unexpected error in generator run loop")

    def generate(self, request: BaseModel) -> BaseModel:
        """Run and return only the validated output.

        Raises:
            GenerationFailure: On provider error, timeout, or invalid output
        """
        try:
            return self.run(request).output
        except GenerationFailure:
            raise
        except Exception as e:
            raise GenerationFailure(self.role, cause=e) from e
