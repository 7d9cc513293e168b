"""YAML and env loader with fail-fast validation."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from mlr_citations.models import SettingsConfig

# Environment variables that override settings file values.
ENV_DATABASE_PATH = "MLR_DATABASE_PATH"
ENV_BRAND_ID = "MLR_BRAND_ID"

_ENV_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _read_yaml(path: str) -> dict:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with resolved.open("r", encoding="utf-8") as file_obj:
        loaded = yaml.safe_load(file_obj) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Expected object at root of YAML file: {path}")
    return loaded


def substitute_env_vars(value: Any) -> Any:
    """Replace ${VAR} placeholders with environment values; unknown vars are left as-is."""
    if isinstance(value, str):
        return _ENV_PLACEHOLDER.sub(lambda m: os.getenv(m.group(1), m.group(0)), value)
    if isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}
    if isinstance(value, list):
        return [substitute_env_vars(item) for item in value]
    return value


def load_settings(settings_path: str | None = "config/settings.yaml") -> SettingsConfig:
    """Load settings from YAML (optional) and apply env overrides.

    Passing None skips the file and starts from defaults.
    """
    load_dotenv()
    raw = substitute_env_vars(_read_yaml(settings_path)) if settings_path else {}
    settings = SettingsConfig.model_validate(raw)
    if os.getenv(ENV_DATABASE_PATH):
        settings.database_path = os.environ[ENV_DATABASE_PATH]
    if os.getenv(ENV_BRAND_ID):
        settings.default_brand_id = os.environ[ENV_BRAND_ID]
    return settings
