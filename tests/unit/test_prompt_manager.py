from pathlib import Path

import pytest

from application.prompting import build_classification_prompt, truncate_content
from infrastructure.config.models import Provider, RunConfig
from infrastructure.prompting.manager import LocalPrompt, PromptManager


def _cfg(root: Path, **kwargs) -> RunConfig:
    return RunConfig(model="dummy-model", prompts_root=root, prompts_register_in_opik=False, **kwargs)


def test_shared_prompt_is_loaded(tmp_path: Path) -> None:
    (tmp_path / "classify-url.txt").write_text("Classify {{target_url}}:\n{{page_text}}\n", encoding="utf-8")
    prompt = PromptManager(tmp_path).get_prompt(Provider.GEMINI, _cfg(tmp_path))

    assert isinstance(prompt, LocalPrompt)
    assert prompt.name == "gemini.classify-url"
    assert prompt.prompt == "Classify {{target_url}}:\n{{page_text}}"


def test_provider_specific_prompt_wins(tmp_path: Path) -> None:
    (tmp_path / "classify-url.txt").write_text("shared {{target_url}} {{page_text}}", encoding="utf-8")
    (tmp_path / "openai").mkdir()
    (tmp_path / "openai" / "classify-url.txt").write_text("openai {{target_url}} {{page_text}}", encoding="utf-8")

    manager = PromptManager(tmp_path)
    assert manager.get_prompt(Provider.OPENAI, _cfg(tmp_path)).prompt.startswith("openai")
    assert manager.get_prompt(Provider.GEMINI, _cfg(tmp_path)).prompt.startswith("shared")


def test_missing_placeholder_is_rejected(tmp_path: Path) -> None:
    (tmp_path / "classify-url.txt").write_text("Classify {{target_url}}", encoding="utf-8")
    with pytest.raises(ValueError, match="page_text"):
        PromptManager(tmp_path).get_prompt(Provider.GEMINI, _cfg(tmp_path))


def test_shipped_prompt_has_placeholders() -> None:
    root = Path(__file__).resolve().parents[2] / "prompts"
    prompt = PromptManager(root).get_prompt(Provider.GEMINI, _cfg(root))
    rendered = build_classification_prompt(prompt, url="https://example.com", page_text="hello")
    assert "https://example.com" in rendered
    assert "{{" not in rendered


def test_page_text_is_not_rescanned_for_placeholders(prompt) -> None:
    rendered = build_classification_prompt(prompt, url="https://x.example", page_text="{{target_url}}")
    assert rendered == "URL: https://x.example\n---\n{{target_url}}\n---"


def test_truncate_content() -> None:
    assert truncate_content("abcdef", 4) == "abcd"
    assert truncate_content("abc", 4) == "abc"
    with pytest.raises(ValueError):
        truncate_content("abc", 0)
