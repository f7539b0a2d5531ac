"""Provider interface the structured generators call through.

Generators only need one thing from a provider: turn a system prompt and
a rendered request into text, reporting tokens and cost. Tests replace
the provider with a mock that returns canned LLMResponse objects.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class LLMResponse:
    """Raw reply to one generator call, before JSON parsing."""
    content: str
    input_tokens: int
    output_tokens: int
    model: str
    provider: str
    cost: float = 0.0


class LLMProvider(ABC):
    """A source of completions for planner and builder calls."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def default_model(self) -> str:
        """Model string used when a call does not name one."""
        pass

    @abstractmethod
    def complete(
        self,
        system_prompt: str,
        user_message: str,
        model: Optional[str] = None,
        max_tokens: int = 4096,
        timeout: Optional[float] = None,
    ) -> LLMResponse:
        """Send one system + user exchange and return the reply.

        Args:
            system_prompt: Generator instructions followed by the output schema
            user_message: The rendered request, plus any correction note on retry
            model: Overrides default_model for this call
            max_tokens: Reply length limit
            timeout: Seconds before the call is abandoned; the generator
                reports a timeout as a GenerationFailure

        Returns:
            LLMResponse with the reply text, token counts and cost
        """
        pass

    def is_available(self) -> bool:
        """Whether credentials for default_model are present."""
        return True
