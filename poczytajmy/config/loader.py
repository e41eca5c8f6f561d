"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- generation parameters checked into the repo
  2. .env file / environment variables (through :class:`Settings`)

Environment-derived values are deep-merged on top of the YAML so a key set
in both places takes the environment value.
"""

from pathlib import Path

import yaml

from poczytajmy.config.settings import Settings

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config" / "config.yaml"


def load_config(path: str | Path | None = None, settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML file.  Defaults to ``config/config.yaml`` at the
            project root; a missing file yields an empty base.
        settings: Settings instance to take overrides from.  A fresh one is
            built when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "race": {
            "deadline_ms": settings.fast_timeout_ms,
        },
        "generation": {
            "motivation": {"max_tokens": settings.max_tokens_fast},
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def generation_params(config: dict, capability: str) -> dict:
    """Return the sampling parameters for *capability* with safe defaults."""
    params = {"temperature": 0.7, "top_p": 0.95, "max_tokens": 64}
    params.update(config.get("generation", {}).get(capability, {}))
    return params


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
