"""
Domain layer: Business logic with minimal external dependencies.

Contains:
- schemas: Pydantic models for observations, classifications and history
- errors: Request-level error taxonomy
- sanitizer: Untrusted oracle text -> JSON payload
- taxonomy: Label normalization and the hierarchical index (tree aggregator)
"""

from domain.errors import (
    ClassifierError,
    ContentUnavailableError,
    FetchError,
    OracleBlockedError,
    OracleTransportError,
    SanitizeError,
    TreeConflictError,
    ValidationError,
)
from domain.sanitizer import sanitize_observation, sanitize_oracle_text
from domain.schemas import Classification, HistoryEntry, RawObservation, ResourceRef
from domain.taxonomy.tree import HierarchicalIndex, InternalNode, LeafNode, build_url_tree

__all__ = [
    # Schemas
    "Classification",
    "HistoryEntry",
    "RawObservation",
    "ResourceRef",
    # Sanitizer
    "sanitize_oracle_text",
    "sanitize_observation",
    # Tree aggregator
    "build_url_tree",
    "HierarchicalIndex",
    "InternalNode",
    "LeafNode",
    # Errors
    "ClassifierError",
    "ValidationError",
    "FetchError",
    "ContentUnavailableError",
    "OracleTransportError",
    "OracleBlockedError",
    "SanitizeError",
    "TreeConflictError",
]
