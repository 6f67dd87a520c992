"""Prompt construction utilities (pure functions)."""

import logging
from typing import Any

from infrastructure.prompting.manager import PromptObj

logger = logging.getLogger(__name__)


def truncate_content(text: str, max_chars: int) -> str:
    """
    Cut extracted page text to the oracle input budget.

    Examples:
        >>> truncate_content("abcdef", 4)
        'abcd'
        >>> truncate_content("abc", 4)
        'abc'
    """
    if max_chars <= 0:
        raise ValueError("max_chars must be a positive integer")
    if len(text) > max_chars:
        logger.info("Content truncated to %d characters (from %d).", max_chars, len(text))
        return text[:max_chars]
    return text


def build_classification_prompt(prompt: PromptObj, *, url: str, page_text: str) -> str:
    """
    Render the classification prompt with the target URL and (truncated) page text.

    Rendering is deterministic: the same template, URL and text always give the same string.

    Raises:
        ValueError: If prompt template missing required placeholders
        TypeError: If the prompt renders to an unsupported type
    """
    try:
        rendered = prompt.format(target_url=url, page_text=page_text)
    except KeyError as e:
        raise ValueError(
            f"Prompt template missing required placeholder: {e}. "
            "Template must contain {{target_url}} and {{page_text}}"
        ) from e

    if isinstance(rendered, str):
        return rendered

    # Handle common structured formats (e.g., OpenAI Chat messages)
    if isinstance(rendered, list):
        parts: list[str] = []
        for msg in rendered:
            if not isinstance(msg, dict):
                continue
            content: Any = msg.get("content")

            if isinstance(content, str):
                parts.append(content)
            elif isinstance(content, list):
                for block in content:
                    if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str):
                        parts.append(block["text"])

        return "\n".join(p for p in parts if p).strip()

    raise TypeError(f"Prompt.format() returned unsupported type: {type(rendered)}")
