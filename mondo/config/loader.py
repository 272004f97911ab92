"""
Configuration loader for the Mondo client and CLI tools.

Loads configuration from a YAML file and environment variables (including a
local .env file) with nested key access.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/mondo.yaml"

# Global configuration cache
_config_cache: dict[str, Any] | None = None


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """Load configuration from YAML file with environment variable support.

    The path defaults to $MONDO_CONFIG, then config/mondo.yaml. A missing file
    yields an empty configuration so every key falls back to its default.
    """
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    # Load environment variables
    load_dotenv()

    config_file = Path(config_path or os.getenv("MONDO_CONFIG", DEFAULT_CONFIG_PATH))
    if not config_file.exists():
        logger.warning(f"Config file not found: {config_file}. Using defaults.")
        config: dict[str, Any] = {}
    else:
        with open(config_file) as f:
            config = yaml.safe_load(f) or {}

    # Cache the configuration
    _config_cache = config
    return config


def cfg(key: str, default: Any = None) -> Any:
    """
    Get configuration value using dot notation.

    Args:
        key: Dot-separated key path (e.g., "cli.history_file")
        default: Default value if key is not found

    Returns:
        Configuration value or default

    Examples:
        cfg("logging.level", "WARNING")
        cfg("api.base_url", "https://production-api.gmon.io")
    """
    config = load_config()

    # Handle simple key
    if "." not in key:
        return config.get(key, default)

    # Handle nested key with dot notation
    keys = key.split(".")
    value = config

    try:
        for k in keys:
            value = value[k]
        return value
    except (KeyError, TypeError):
        return default


def env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    load_config()
    return os.getenv(key, default)


def get_required_env(key: str) -> str:
    """
    Get required environment variable or raise error.

    Raises:
        ValueError: If environment variable is not set
    """
    value = env(key)
    if not value:
        raise ValueError(f"could not read ${key} from environment")
    return value


def get_mondo_credentials(with_user: bool = True) -> dict[str, str]:
    """Get Mondo OAuth credentials from environment.

    Args:
        with_user: Also require MONDO_USERNAME and MONDO_PASSWORD

    Returns:
        Dict with client_id, client_secret and, if requested, username and password
    """
    credentials = {
        "client_id": get_required_env("MONDO_CLIENT_ID"),
        "client_secret": get_required_env("MONDO_CLIENT_SECRET"),
    }
    if with_user:
        credentials["username"] = get_required_env("MONDO_USERNAME")
        credentials["password"] = get_required_env("MONDO_PASSWORD")
    return credentials


def reload_config() -> None:
    """Force reload of configuration cache."""
    global _config_cache
    _config_cache = None
