"""Label normalization utilities for classification fields and tree branches."""

from typing import Any

# Sentinel labels substituted for missing/blank classification fields
UNKNOWN_TYPE = "Unknown Type"
UNKNOWN_FORMAT = "Unknown Format"
UNKNOWN_CATEGORY = "Unknown Category"
UNKNOWN_LANGUAGE = "Undetermined"

# content_format value that never gets its own tree level
FLATTENED_FORMAT = "html"


def branch_key(label: str) -> str:
    """
    Normalized comparison key for a branch label.

    Examples:
        >>> branch_key("  Blog ")
        'blog'
        >>> branch_key("NEWS Site")
        'news site'
    """
    return label.strip().lower()


def clean_label(raw: Any, sentinel: str) -> str:
    """
    Return the trimmed label, or the sentinel when it is missing or blank.

    Non-string values (numbers, booleans) are stringified; containers are not labels
    and degrade to the sentinel.

    Args:
        raw: Raw field value from an untrusted payload
        sentinel: Placeholder label used when the value is unusable

    Returns:
        A non-empty label
    """
    if raw is None or isinstance(raw, dict | list | tuple | set):
        return sentinel
    s = str(raw).strip()
    return s or sentinel


def is_flattened_format(content_format: str) -> bool:
    """True when the content format should not create a tree level."""
    return branch_key(content_format) == FLATTENED_FORMAT
