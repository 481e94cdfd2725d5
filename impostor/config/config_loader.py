"""
Settings loader for YAML-based configuration.
"""

import logging
import os
from dataclasses import fields, replace
from pathlib import Path
from typing import Optional

import yaml

from .settings import CATALOG_API_KEY_ENV, Settings

logger = logging.getLogger(__name__)


def load_settings_from_yaml(config_path: str) -> Settings:
    """
    Load settings from a YAML file.

    Keys the Settings dataclass doesn't know are logged and skipped.

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValueError: If the top level of the file is not a mapping
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r', encoding='utf-8') as f:
        raw = yaml.safe_load(f)

    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping of settings")

    known = {field.name for field in fields(Settings)}
    values = {}
    for key, value in raw.items():
        if key in known:
            values[key] = value
        else:
            logger.warning("Unknown config key '%s' in %s", key, config_path)

    return replace(Settings(), **values)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from a YAML file, or defaults when no path is given.

    The catalog API key falls back to the ``CLASH_ROYALE_API_KEY`` environment
    variable; either way it is stripped of surrounding whitespace.
    """
    settings = Settings() if config_path is None else load_settings_from_yaml(config_path)

    api_key = settings.catalog_api_key or os.environ.get(CATALOG_API_KEY_ENV)
    settings.catalog_api_key = api_key.strip() if api_key else None

    return settings
