"""Mock provider adapter for testing."""

import json
import logging
from collections import deque
from collections.abc import Iterable
from typing import Any

from infrastructure.config.models import RunConfig
from infrastructure.observability.tracing import opik_usage, update_current_span
from infrastructure.providers.base import OracleReply, ProviderAdapter

logger = logging.getLogger(__name__)

DEFAULT_MOCK_PAYLOAD: dict[str, Any] = {
    "classification": {
        "url_type": "Website",
        "content_format": "HTML",
        "content_type_hierarchy": ["Text", "Article"],
        "primary_language": "English",
    },
    "confidence": "Medium",
    "keywords": ["mock", "example", "classification"],
}


class MockAdapter(ProviderAdapter):
    """Mock adapter for testing without real API calls.

    Queued replies are returned in order; once exhausted, every call returns the
    default payload wrapped in a ```json fence (the shape real models tend to send).
    """

    def __init__(
        self,
        *,
        cfg: RunConfig,
        replies: Iterable[str | OracleReply] | None = None,
        default_payload: dict[str, Any] | None = None,
    ) -> None:
        """Initialize mock adapter."""
        super().__init__(cfg=cfg, client=None, pricing=None)
        self.replies: deque[str | OracleReply] = deque(replies or [])
        self.default_payload = default_payload or DEFAULT_MOCK_PAYLOAD
        self.prompts: list[str] = []
        logger.info("Initialized Mock adapter (no real API calls will be made)")

    @property
    def display_name(self) -> str:
        return "Mock"

    def call_oracle(
        self,
        *,
        prompt_text: str,
        request_id: str,
        extra_trace_meta: dict[str, Any] | None = None,
    ) -> tuple[OracleReply, dict[str, Any]]:
        """Return the next queued reply, or the default payload."""
        self.prompts.append(prompt_text)

        if self.replies:
            queued = self.replies.popleft()
            reply = queued if isinstance(queued, OracleReply) else OracleReply(text=queued)
        else:
            reply = OracleReply(text=f"```json\n{json.dumps(self.default_payload, indent=2)}\n```")

        # Rough approximation
        input_tokens = len(prompt_text) // 4
        output_tokens = len(reply.text or "") // 4
        result = self._usage_result(input_tokens=input_tokens, output_tokens=output_tokens)

        meta = {"request_id": request_id, "mock": True, "blocked": reply.blocked}
        if extra_trace_meta:
            meta.update(extra_trace_meta)

        update_current_span(
            provider="mock",
            model=self.model,
            usage=opik_usage(input_tokens=0, output_tokens=0, total_tokens=0),
            total_cost=0.0,
            metadata=meta,
        )
        logger.debug("Mock adapter replied for request %s (blocked=%s)", request_id, reply.blocked)
        return reply, result
