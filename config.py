"""Configuration settings for Agent Foundry."""

from dotenv import load_dotenv

# Load .env into os.environ so LiteLLM picks up provider keys (OPENAI_API_KEY, ...)
load_dotenv()

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import Dict
from pathlib import Path


# Base dependency set for a generated project: core framework, model SDK, schema lib
DEFAULT_PROJECT_DEPENDENCIES: Dict[str, str] = {
    "@mastra/core": "latest",
    "@ai-sdk/openai": "latest",
    "zod": "latest",
}

# Version written for every dependency a tool declares (unpinned)
PLACEHOLDER_VERSION = "latest"


class Settings(BaseSettings):
    """Global settings for Agent Foundry.

    Settings can be overridden via environment variables with AGENT_FOUNDRY_ prefix.
    Example: AGENT_FOUNDRY_MAX_STEPS=40
    """

    # Model config
    planner_model: str = Field(
        default="gpt-4.1-nano",
        description="Model used by the planning generator"
    )
    builder_model: str = Field(
        default="gpt-4o-mini",
        description="Model used by the tool and agent builders"
    )
    generated_agent_model: str = Field(
        default="openai('gpt-4.1-nano')",
        description="Model selector written into placeholder agents"
    )

    # Limits
    max_tokens_per_call: int = Field(
        default=4096,
        description="Maximum tokens per individual generator call"
    )
    max_steps: int = Field(
        default=25,
        ge=1,
        description="Maximum generator + stage invocations per pipeline run"
    )
    max_generation_retries: int = Field(
        default=1,
        ge=0,
        description="Corrective retries when a generator returns schema-invalid output"
    )
    max_cost_per_run_usd: float = Field(
        default=2.00,
        description="LiteLLM budget per run in USD"
    )
    build_concurrency: int = Field(
        default=1,
        ge=1,
        description="Parallel tool/agent builds per loop; 1 builds sequentially"
    )

    # API settings (LiteLLM reads provider keys from the standard env vars)
    api_timeout_seconds: int = Field(
        default=120,
        description="Timeout for a single generator call in seconds"
    )

    # Generated project
    default_dependencies: Dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_PROJECT_DEPENDENCIES),
        description="Dependencies a new project starts with when none are given"
    )

    # Paths
    output_dir: str = Field(
        default="./generated-agents",
        description="Directory generated projects are written into"
    )

    # Router
    router_confidence_threshold: float = Field(
        default=0.6,
        ge=0.0,
        le=1.0,
        description="Heuristic confidence below which the LLM classifier is consulted"
    )

    model_config = {
        "env_prefix": "AGENT_FOUNDRY_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    def get_output_path(self) -> Path:
        """Get output path as Path object."""
        return Path(self.output_dir)


# Create singleton instance
settings = Settings()
