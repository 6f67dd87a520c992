"""Configuration loading from YAML files."""

from pathlib import Path
from typing import Any

import yaml

from infrastructure.config.models import (
    FetchConfig,
    Provider,
    ProviderConfig,
    ProviderModelConfig,
    RunConfig,
)
from infrastructure.constants import DEFAULT_HISTORY_FILE, PROMPTS_DIR, PROVIDERS_DIR

from .registry import PARAM_MODEL_BY_PROVIDER


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file and return as dict."""
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Expected YAML dict in {path}, got {type(data)}")

    return data


def load_provider_config(providers_dir: Path, provider: Provider) -> ProviderConfig:
    """
    Load a provider YAML (e.g., configs/providers/gemini.yaml) into a ProviderConfig.

    Args:
        providers_dir: Directory containing provider YAML files
        provider: Provider enum value

    Returns:
        ProviderConfig with models and pricing

    Raises:
        ValueError: If YAML is missing required keys or has invalid types
    """
    path = providers_dir / f"{provider.value}.yaml"
    data = _load_yaml(path)

    if "provider" not in data:
        raise ValueError(f"Provider YAML missing required key 'provider': {path}")
    try:
        file_provider = Provider(data["provider"])
    except ValueError as e:
        raise ValueError(f"Invalid provider value {data.get('provider')!r} in {path}") from e

    if file_provider is not provider:
        raise ValueError(f"Provider YAML mismatch: expected {provider.value}, got {file_provider.value} in {path}")

    models_raw = data.get("models") or {}
    if not isinstance(models_raw, dict) or not models_raw:
        raise ValueError(f"Provider YAML missing/invalid 'models' mapping: {path}")

    models: dict[str, ProviderModelConfig] = {
        str(model_name): ProviderModelConfig(
            params=dict((block or {}).get("params") or {}),
            pricing=dict((block or {}).get("pricing") or {}),
        )
        for model_name, block in models_raw.items()
    }

    return ProviderConfig(provider=file_provider, models=models)


def build_run_config(data: dict[str, Any], *, base_dir: Path | None = None) -> RunConfig:
    """
    Construct a fully-resolved RunConfig from an already-loaded classifier.yaml mapping.

    Conventions (required for adding providers):
    - The Provider enum value must match the RunConfig field name used for provider-specific params.
      Example: if Provider.GEMINI.value == "gemini", RunConfig must define a `gemini` field.
    - This naming convention allows provider parameter models to be bound dynamically from the registry.
    """
    if "provider" not in data:
        raise ValueError("classifier.yaml missing required key: provider")
    if "model" not in data:
        raise ValueError("classifier.yaml missing required key: model")

    try:
        provider = Provider(str(data["provider"]).strip().lower())
    except ValueError as e:
        raise ValueError(f"Unsupported provider {data['provider']!r}. Available: {[p.value for p in Provider]}") from e
    model = str(data["model"]).strip()

    def _path(key: str, default: Path) -> Path:
        p = Path(data.get(key) or default)
        if base_dir is not None and not p.is_absolute():
            p = base_dir / p
        return p

    providers_dir = _path("providers_dir", PROVIDERS_DIR)
    prompts_root = _path("prompts_root", PROMPTS_DIR)
    history_file = _path("history_file", DEFAULT_HISTORY_FILE)
    prompt_path = _path("prompt_path", Path()) if data.get("prompt_path") else None

    prov_cfg = load_provider_config(providers_dir, provider)
    if model not in prov_cfg.models:
        raise KeyError(
            f"Model '{model}' not found in {providers_dir / (provider.value + '.yaml')}. "
            f"Available: {list(prov_cfg.models.keys())}"
        )

    provider_model: ProviderModelConfig = prov_cfg.models[model]
    params = provider_model.params or {}

    # Bind provider params using the registry
    param_model_cls = PARAM_MODEL_BY_PROVIDER.get(provider)
    if param_model_cls is None:
        raise ValueError(f"No param model registered for provider: {provider.value}")

    # field name == provider.value
    if provider.value not in RunConfig.model_fields:
        raise ValueError(
            f"RunConfig has no field '{provider.value}'. "
            f"Add `'{provider.value}': Optional[<YourProviderConfig>] = None` to RunConfig "
            f"(field name must match Provider.value)."
        )

    run_kwargs = {provider.value: param_model_cls(**params)}

    optional: dict[str, Any] = {}
    for key in ("max_content_chars", "url_col", "id_col", "prompts_register_in_opik"):
        if data.get(key) is not None:
            optional[key] = data[key]

    return RunConfig(
        provider=provider,
        model=model,
        fetch=FetchConfig(**(data.get("fetch") or {})),
        prompts_root=prompts_root,
        prompt_path=prompt_path,
        history_file=history_file,
        providers_dir=providers_dir,
        provider_model=provider_model,
        **optional,
        **run_kwargs,
    )


def load_run_config(config_path: Path) -> RunConfig:
    """Load classifier.yaml and construct a fully-resolved RunConfig."""
    return build_run_config(_load_yaml(config_path))
