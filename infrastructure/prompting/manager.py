"""
Prompt loading and management.
Handles loading the classification prompt from disk and optionally registering it in the Opik prompt library.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias

from opik import Prompt, PromptType

from infrastructure.config.models import Provider, RunConfig
from infrastructure.constants import PROMPT_FILENAME
from infrastructure.io import ensure_exists, read_text

logger = logging.getLogger(__name__)

PROMPT_PLACEHOLDERS = ("target_url", "page_text")


@dataclass(frozen=True)
class LocalPrompt:
    """Lightweight prompt wrapper for disk-only prompting (no Opik prompt library writes)."""

    name: str
    prompt: str
    metadata: dict[str, Any]

    def format(self, **kwargs: Any) -> str:
        """Format the prompt template with variables using Mustache syntax."""
        # Single pass so substituted values (page text) are never re-scanned for placeholders
        pattern = re.compile(r"\{\{\s*([A-Za-z0-9_]+)\s*\}\}")

        def _sub(m: re.Match[str]) -> str:
            key = m.group(1)
            return str(kwargs[key]) if key in kwargs else m.group(0)

        return pattern.sub(_sub, self.prompt)


PromptObj: TypeAlias = Prompt | LocalPrompt


class PromptManager:
    """
    Manages prompt loading from disk and (optionally) registers prompts in the Opik prompt library

    Prompts are organized as:
        prompts/
        ├─ classify-url.txt             (shared default)
        └─ <provider>/classify-url.txt  (optional provider-specific variant)
    """

    def __init__(self, prompts_root: Path):
        self.prompts_root = prompts_root
        self._cache: dict[tuple[str, str, int, bool], PromptObj] = {}

    def _get_prompt_path(self, provider: Provider, override_path: Path | None = None) -> Path:
        if override_path is not None:
            return override_path
        provider_path = self.prompts_root / provider.value / PROMPT_FILENAME
        if provider_path.exists():
            return provider_path
        return self.prompts_root / PROMPT_FILENAME

    def _make_opik_prompt_name(self, provider: Provider, path: Path) -> str:
        """
        Build a stable Opik prompt name derived from provider and relative path.

        Format:
          {provider}.{relative_path_with_dots}
        """
        root = self.prompts_root.resolve()
        p = path.resolve()

        try:
            rel_str = p.relative_to(root).as_posix()
        except ValueError:
            # Path is outside prompts_root (e.g., override_path elsewhere). Use a normalized path string.
            rel_str = p.as_posix().strip("/")

        rel_str = rel_str.removesuffix(".txt")
        prefix = f"{provider.value}/"
        if rel_str.startswith(prefix):
            rel_str = rel_str[len(prefix) :]

        return f"{provider.value}.{rel_str.replace('/', '.')}"

    def get_prompt(self, provider: Provider, cfg: RunConfig) -> PromptObj:
        """
        Load the classification prompt from disk and (optionally) register it in the Opik prompt library.

        :param provider: Provider used to pick a provider-specific template when one exists
        :param cfg: (RunConfig): Runtime configuration (prompt override, Opik registration flag)

        :return:
        PromptObj: object implementing the minimal prompt interface (`name`, `prompt`, `metadata`, `format`)

        Raises:
        FileNotFoundError: if the resolved prompt file does not exist.
        ValueError: for templates missing placeholders or failures during optional Opik registration
        """
        prompt_path = self._get_prompt_path(provider, cfg.prompt_path)
        ensure_exists(prompt_path, f"{provider.value}:classification-prompt")
        mtime_ns = prompt_path.stat().st_mtime_ns

        cache_key = (provider.value, str(prompt_path), mtime_ns, cfg.prompts_register_in_opik)
        if cache_key in self._cache:
            return self._cache[cache_key]

        prompt_text = read_text(prompt_path)
        missing = [k for k in PROMPT_PLACEHOLDERS if not re.search(r"\{\{\s*" + k + r"\s*\}\}", prompt_text)]
        if missing:
            raise ValueError(f"Prompt template {prompt_path} is missing placeholders: {missing}")

        prompt_name = self._make_opik_prompt_name(provider, prompt_path)
        metadata = {
            "provider": provider.value,
            "source_path": str(prompt_path),
            "max_content_chars": cfg.max_content_chars,
        }

        if cfg.prompts_register_in_opik:
            # Creates/versions the prompt in the Opik prompt library.
            try:
                prompt_obj: PromptObj = Prompt(
                    name=prompt_name,
                    prompt=prompt_text,
                    type=PromptType.MUSTACHE,
                    metadata=metadata,
                )
            except Exception as e:
                raise ValueError(f"Failed to create/register prompt '{prompt_name}' in Opik prompt library.") from e
        else:
            prompt_obj = LocalPrompt(name=prompt_name, prompt=prompt_text, metadata=metadata)

        self._cache[cache_key] = prompt_obj
        logger.info("Loaded classification prompt from %s as %s", prompt_path, prompt_name)
        return prompt_obj

