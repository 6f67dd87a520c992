"""
Infrastructure layer: External dependencies and I/O boundaries.

Contains adapters for:
- Oracle providers (OpenAI, Anthropic, Gemini, Ollama, Mock)
- Configuration loading (YAML, environment)
- Prompt management (disk, Opik)
- Web fetch and text extraction
- History and URL-table I/O
- Observability (logging, tracing)

This is the only layer that performs I/O operations.
"""

# Most commonly used - exposed at top level for convenience
from infrastructure.config import (
    FetchConfig,
    Provider,
    RunConfig,
    load_run_config,
)
from infrastructure.providers import OracleReply, ProviderAdapter, make_adapter

__all__ = [
    # Provider adapters (most commonly used)
    "make_adapter",
    "ProviderAdapter",
    "OracleReply",
    # Configuration (most commonly used)
    "load_run_config",
    "RunConfig",
    "FetchConfig",
    "Provider",
]
