"""Configuration module for loading briefing settings and API credentials."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Env var names per provider, first non-empty wins
_KEY_ENV_VARS = {
    "newsapi": ("NEWS_API_KEY",),
    "fmp": ("FMP_API_KEY", "FMPAPIKEY"),
    "alpha_vantage": ("ALPHA_VANTAGE_KEY", "ALPHAVANTAGE_API_KEY"),
}


def load_config(config_path: str | Path = "config.yaml") -> Dict[str, Any]:
    """
    Load configuration from the specified YAML file.

    Args:
        config_path (str | Path): Path to the configuration file. Defaults to "config.yaml".

    Returns:
        Dict[str, Any]: A dictionary containing the configuration settings.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_file, "r", encoding="utf-8") as file:
        config_data = yaml.safe_load(file)

    if not config_data:
        raise ValueError(f"Configuration file {config_path} is empty or invalid.")

    return config_data


def get_api_key(provider: str) -> Optional[str]:
    """Return the API key configured for ``provider``, or None when unset."""
    for var in _KEY_ENV_VARS.get(provider, ()):
        value = os.getenv(var, "").strip()
        if value:
            return value
    return None


def setting(config: Dict[str, Any], section: str, key: str, default: Any) -> Any:
    """Read ``config[section][key]``, tolerating a missing section."""
    return (config.get(section) or {}).get(key, default)
