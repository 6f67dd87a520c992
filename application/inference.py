"""Oracle invocation for a single classification request."""

import logging
from typing import Any

from opik import track

from infrastructure.observability.logging import get_log_context
from infrastructure.observability.tracing import update_current_span
from infrastructure.providers.base import OracleReply, ProviderAdapter

logger = logging.getLogger(__name__)


@track(
    type="llm",
    metadata={"task": "url_classification_oracle"},
    capture_input=False,
)
def call_oracle(
    adapter: ProviderAdapter,
    prompt_text: str,
    request_id: str,
) -> tuple[OracleReply, dict[str, Any]]:
    """
    Call the configured provider adapter once for a request.

    Returns:
        - OracleReply (candidate text or block reason)
        - Dict with token counts and costs

    Raises:
        OracleTransportError: propagated from the adapter
    """
    # Name the span (provider-specific usage/cost metadata is attached inside the adapter)
    update_current_span(name=f"classification.oracle-{request_id[:8]}")

    logger.info("Calling %s (%s) for JSON classification...", adapter.display_name, adapter.model)
    reply, usage = adapter.call_oracle(
        prompt_text=prompt_text,
        request_id=request_id,
        extra_trace_meta=get_log_context(),
    )

    if reply.text is not None:
        logger.debug("Raw oracle response text:\n%s", reply.text)
    return reply, usage
