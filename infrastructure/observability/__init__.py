"""
Observability: structured logging, context management and tracing.

Provides:
- Contextual logging with run/request IDs
- Log rotation and file management
- Third-party library log level control
- Opik span helpers
"""

from infrastructure.observability.logging import (
    request_log_context,
    configure_logging,
    get_log_context,
    make_run_tag,
    set_log_context,
)
from infrastructure.observability.tracing import opik_usage, update_current_span

__all__ = [
    "configure_logging",
    "set_log_context",
    "get_log_context",
    "request_log_context",
    "make_run_tag",
    "update_current_span",
    "opik_usage",
]
