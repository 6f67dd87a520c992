"""Opik span helpers."""

from typing import Any

from opik import opik_context


def update_current_span(**kwargs: Any) -> None:
    """
    Attach data to the active Opik span.

    No-op when there is no active span (tracking disabled, or called outside a
    tracked function) so adapters stay usable from plain code and tests.
    """
    if opik_context.get_current_span_data() is None:
        return
    opik_context.update_current_span(**kwargs)


def opik_usage(*, input_tokens: int, output_tokens: int, total_tokens: int) -> dict[str, int]:
    # Opik dashboard expects OpenAI-style keys
    return {
        "prompt_tokens": int(input_tokens),
        "completion_tokens": int(output_tokens),
        "total_tokens": int(total_tokens),
    }
