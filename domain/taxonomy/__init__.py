"""
Taxonomy handling: label normalization and the hierarchical index.

All functions in this package are pure (no file I/O).
"""

from domain.taxonomy.normalizer import (
    UNKNOWN_CATEGORY,
    UNKNOWN_FORMAT,
    UNKNOWN_LANGUAGE,
    UNKNOWN_TYPE,
    branch_key,
    clean_label,
    is_flattened_format,
)

__all__ = [
    # Sentinels
    "UNKNOWN_TYPE",
    "UNKNOWN_FORMAT",
    "UNKNOWN_CATEGORY",
    "UNKNOWN_LANGUAGE",
    # Normalization
    "branch_key",
    "clean_label",
    "is_flattened_format",
]
