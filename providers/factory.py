"""Factory for creating LLM providers."""

import os
from typing import Dict, Optional

from .base import LLMProvider
from .litellm_provider import LiteLLMProvider, _to_litellm_model


# Provider name -> env var LiteLLM reads the key from
PROVIDER_KEYS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GOOGLE_API_KEY",
    "deepseek": "DEEPSEEK_API_KEY",
}

KNOWN_PROVIDERS = set(PROVIDER_KEYS) | {"claude", "gpt", "google"}


def get_provider(
    provider_name: Optional[str] = None,
    model: Optional[str] = None,
    metadata: Optional[dict] = None,
) -> LLMProvider:
    """Get an LLM provider instance.

    Args:
        provider_name: Explicit provider name (anthropic, openai, gemini, deepseek)
        model: Model name - resolved to a LiteLLM model string
        metadata: Metadata attached to every call (e.g. {"role": "planner"})

    Returns:
        LLMProvider instance

    Examples:
        get_provider("anthropic")            # anthropic/claude-sonnet-4-...
        get_provider(model="gpt-4.1-nano")   # gpt-4.1-nano
        get_provider()                       # gpt-4o-mini
    """
    if provider_name and provider_name.lower() not in KNOWN_PROVIDERS:
        raise ValueError(
            f"Unknown provider: {provider_name}. "
            f"Available: {sorted(PROVIDER_KEYS)}"
        )
    return LiteLLMProvider(
        default_model=_to_litellm_model(provider_name, model),
        metadata=metadata,
    )


def list_providers() -> Dict[str, bool]:
    """List all providers and whether their API key is set.

    Returns:
        Dict mapping provider name to availability status
    """
    return {
        name: bool(os.environ.get(env_var, "").strip())
        for name, env_var in PROVIDER_KEYS.items()
    }
