"""Configuration models (Pydantic classes)."""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, model_validator

from infrastructure.constants import (
    DEFAULT_HISTORY_FILE,
    DEFAULT_MAX_CONTENT_CHARS,
    DEFAULT_USER_AGENT,
    PROMPTS_DIR,
    PROVIDERS_DIR,
)


class Provider(str, Enum):
    """Supported LLM providers."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"
    OLLAMA = "ollama"


class OpenAIConfig(BaseModel):
    """OpenAI-specific configuration."""

    service_tier: str | None = None
    temperature: int | float | None = None
    max_output_tokens: int | None = None


class AnthropicConfig(BaseModel):
    """Anthropic-specific configuration."""

    service_tier: str | None = None
    temperature: int | float | None = None
    max_tokens: int = 1024


class GeminiConfig(BaseModel):
    """Gemini (generativelanguage REST API) configuration."""

    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    api_key_env: str = "GEMINI_API_KEY"
    timeout_s: float = 60.0
    temperature: int | float | None = None
    max_output_tokens: int | None = None


class OllamaConfig(BaseModel):
    """Ollama (local) configuration."""

    base_url: str = "http://localhost:11434"
    timeout_s: float = 120.0
    keep_alive: str | None = None
    think: bool | None = None

    # Passed through as Ollama "options" when set
    temperature: float | None = None
    seed: int | None = None
    num_ctx: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    num_predict: int | None = None


class FetchConfig(BaseModel):
    """Origin fetch settings."""

    timeout_s: float = Field(default=10.0, gt=0, description="Fixed deadline for fetching the origin resource.")
    user_agent: str = DEFAULT_USER_AGENT
    max_redirects: int = Field(default=10, ge=0)


class ProviderModelConfig(BaseModel):
    """Per-model configuration and pricing."""

    params: dict[str, Any] = Field(default_factory=dict)
    pricing: dict[str, Any] = Field(default_factory=dict)


class ProviderConfig(BaseModel):
    """Provider-level configuration."""

    provider: Provider
    models: dict[str, ProviderModelConfig]


class ModelPricing(BaseModel):
    """Per-token pricing (USD per 1M tokens)."""

    input_per_1m: float
    output_per_1m: float

    @property
    def input_cost_per_token(self) -> float:
        return self.input_per_1m / 1_000_000

    @property
    def output_cost_per_token(self) -> float:
        return self.output_per_1m / 1_000_000


class ModelPricingOpenAI(ModelPricing):
    """OpenAI pricing structure (automatic prompt caching discount)."""

    cached_input_per_1m: float

    @property
    def cached_input_cost_per_token(self) -> float:
        return self.cached_input_per_1m / 1_000_000


class RunConfig(BaseModel):
    """
    Runtime configuration.
    - Loaded from configs/classifier.yaml
    - Validated and enriched by configuration loader
    - Consumed by provider adapters, the fetcher and the classification orchestrator
    """

    provider: Provider = Field(default=Provider.GEMINI, description="LLM provider backend to use.")
    model: str = Field(..., description="Model identifier for the selected provider.")

    max_content_chars: int = Field(
        default=DEFAULT_MAX_CONTENT_CHARS,
        gt=0,
        description="Extracted page text is cut to this many characters before prompting.",
    )
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    # Prompt handling
    prompts_root: Path = Field(
        default_factory=lambda: PROMPTS_DIR,
        description="Root directory containing prompt templates (optionally per provider).",
    )
    prompt_path: Path | None = Field(default=None, description="Explicit prompt template override.")
    prompts_register_in_opik: bool = Field(
        default=True,
        description="Register prompts in Opik library. If False, load from disk only.",
    )

    # History / batch
    history_file: Path = Field(default_factory=lambda: DEFAULT_HISTORY_FILE)
    url_col: str = Field(default="url", description="Column holding URLs in batch input tables.")
    id_col: str | None = Field(default=None, description="Optional column holding stable resource ids.")

    # Provider config (resolved by loader)
    openai: OpenAIConfig | None = None
    anthropic: AnthropicConfig | None = None
    gemini: GeminiConfig | None = None
    ollama: OllamaConfig | None = None

    # Provider models directory + selected model block (resolved by loader)
    providers_dir: Path = Field(default_factory=lambda: PROVIDERS_DIR)
    provider_model: ProviderModelConfig = Field(default_factory=ProviderModelConfig)

    @model_validator(mode="after")
    def _validate(self) -> "RunConfig":
        if not self.model.strip():
            raise ValueError("model must be a non-empty string")

        if not self.url_col.strip():
            raise ValueError("url_col must be a non-empty string")

        if self.id_col is not None and not str(self.id_col).strip():
            self.id_col = None

        return self
