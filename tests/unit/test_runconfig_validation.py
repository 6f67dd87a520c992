from pathlib import Path

import pydantic
import pytest

from infrastructure.config.loader import build_run_config, load_provider_config
from infrastructure.config.models import GeminiConfig, Provider, RunConfig

GEMINI_YAML = """
provider: gemini
models:
  gemini-test:
    params:
      temperature: 0
      timeout_s: 30
    pricing:
      input_per_1m: 0.1
      output_per_1m: 0.4
"""


@pytest.fixture
def providers_dir(tmp_path: Path) -> Path:
    d = tmp_path / "providers"
    d.mkdir()
    (d / "gemini.yaml").write_text(GEMINI_YAML, encoding="utf-8")
    return d


def test_defaults() -> None:
    cfg = RunConfig(model="dummy-model")
    assert cfg.provider is Provider.GEMINI
    assert cfg.max_content_chars == 15_000
    assert cfg.fetch.timeout_s == 10
    assert cfg.url_col == "url"


def test_blank_model_is_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        RunConfig(model="   ")


def test_non_positive_content_budget_is_rejected() -> None:
    with pytest.raises(pydantic.ValidationError):
        RunConfig(model="dummy-model", max_content_chars=0)


def test_blank_id_col_is_treated_as_unset() -> None:
    assert RunConfig(model="dummy-model", id_col="  ").id_col is None


def test_build_run_config_binds_provider_params(tmp_path: Path, providers_dir: Path) -> None:
    cfg = build_run_config(
        {
            "provider": "Gemini",
            "model": "gemini-test",
            "providers_dir": "providers",
            "max_content_chars": 500,
            "fetch": {"timeout_s": 5},
            "id_col": "id",
        },
        base_dir=tmp_path,
    )
    assert cfg.provider is Provider.GEMINI
    assert isinstance(cfg.gemini, GeminiConfig)
    assert cfg.gemini.temperature == 0
    assert cfg.gemini.timeout_s == 30
    assert cfg.provider_model.pricing == {"input_per_1m": 0.1, "output_per_1m": 0.4}
    assert cfg.max_content_chars == 500
    assert cfg.fetch.timeout_s == 5
    assert cfg.id_col == "id"
    assert cfg.providers_dir == providers_dir
    assert cfg.history_file == tmp_path / "outputs" / "history.json"


def test_build_run_config_unknown_model(tmp_path: Path, providers_dir: Path) -> None:
    with pytest.raises(KeyError, match="gemini-nope"):
        build_run_config({"provider": "gemini", "model": "gemini-nope", "providers_dir": "providers"}, base_dir=tmp_path)


def test_build_run_config_unknown_provider() -> None:
    with pytest.raises(ValueError, match="Unsupported provider"):
        build_run_config({"provider": "palm", "model": "x"})


def test_provider_yaml_mismatch(tmp_path: Path) -> None:
    (tmp_path / "openai.yaml").write_text("provider: gemini\nmodels:\n  m: {}\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mismatch"):
        load_provider_config(tmp_path, Provider.OPENAI)
