"""
Configuration management: models, loading, and validation.

Handles:
- RunConfig: Main classifier configuration
- Provider configs: OpenAI, Anthropic, Gemini, Ollama settings
- Fetch settings for the origin resource

The loader module performs file I/O; models are pure Pydantic classes.
"""

from infrastructure.config.loader import (
    build_run_config,
    load_provider_config,
    load_run_config,
)
from infrastructure.config.models import (
    AnthropicConfig,
    # Fetch settings
    FetchConfig,
    GeminiConfig,
    # Pricing models
    ModelPricing,
    ModelPricingOpenAI,
    OllamaConfig,
    # Provider configs
    OpenAIConfig,
    # Enums
    Provider,
    ProviderConfig,
    ProviderModelConfig,
    # Main config
    RunConfig,
)

__all__ = [
    # Main config (most commonly used)
    "RunConfig",
    "load_run_config",
    "build_run_config",
    # Enums
    "Provider",
    # Fetch
    "FetchConfig",
    # Provider configs
    "OpenAIConfig",
    "AnthropicConfig",
    "GeminiConfig",
    "OllamaConfig",
    "ProviderModelConfig",
    "ProviderConfig",
    # Pricing
    "ModelPricing",
    "ModelPricingOpenAI",
    # Loaders
    "load_provider_config",
]
