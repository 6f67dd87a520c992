"""
Oracle (LLM) provider adapters.

Implements the adapter pattern for different LLM backends:
- OpenAI (Responses API)
- Anthropic (Messages API)
- Gemini (generateContent REST API)
- Ollama (local /api/chat)
- Mock (for testing)

All adapters implement the ProviderAdapter interface. Concrete provider modules
are imported lazily by the factory so their SDKs are only needed when selected.
"""

from infrastructure.providers.base import OracleReply, ProviderAdapter
from infrastructure.providers.factory import make_adapter
from infrastructure.providers.mock import MockAdapter

__all__ = [
    # Abstract base + reply contract
    "ProviderAdapter",
    "OracleReply",
    # Concrete implementations
    "MockAdapter",
    # Factory (most commonly used)
    "make_adapter",
]
