"""
Application layer: Use cases and workflow orchestration.

This layer coordinates between domain logic and infrastructure,
implementing the classification and aggregation workflows.
"""

from application.aggregation import aggregate_history, outcomes_to_history, save_tree, summarize_tree
from application.batching import run_batch
from application.classify import (
    ClassificationOutcome,
    OutcomeStatus,
    classify_url,
    handle_classify_request,
    parse_classify_request,
    validate_url,
)
from application.inference import call_oracle
from application.prompting import build_classification_prompt, truncate_content

__all__ = [
    # Main workflows
    "classify_url",
    "handle_classify_request",
    "run_batch",
    "call_oracle",
    "aggregate_history",
    # Outcomes
    "ClassificationOutcome",
    "OutcomeStatus",
    # Request utilities
    "parse_classify_request",
    "validate_url",
    # History/tree utilities
    "outcomes_to_history",
    "summarize_tree",
    "save_tree",
    # Prompting utilities
    "build_classification_prompt",
    "truncate_content",
]
