"""
Prompt management: loading from disk and Opik integration.

Handles:
- Loading the URL classification prompt template from the filesystem
- Optional registration in Opik prompt library
- Mustache-style template rendering

The PromptManager handles both local (disk-only) and Opik-integrated prompts.
"""

from infrastructure.prompting.manager import (
    LocalPrompt,
    PromptManager,
    PromptObj,
)

__all__ = [
    "PromptManager",
    "LocalPrompt",
    "PromptObj",
]
