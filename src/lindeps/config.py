"""Configuration file handling for lindeps."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from lindeps.client import LINEAR_API_URL

logger = logging.getLogger(__name__)

# Config filename
CONFIG_FILENAME = "config.toml"

# Environment variables
CONFIG_DIR_ENV = "LINDEPS_CONFIG_DIR"
API_KEY_ENV = "LINEAR_API_KEY"

# Known config keys and their descriptions
KNOWN_KEYS: dict[str, str] = {
    "api_key": "Linear personal API key (LINEAR_API_KEY overrides it)",
    "default_team": "Team key used by 'deps' when --team is omitted",
    "api_url": "GraphQL endpoint URL",
}


def get_config_dir() -> Path:
    """Get the configuration directory.

    Precedence:
    1. $LINDEPS_CONFIG_DIR
    2. $XDG_CONFIG_HOME/lindeps
    3. ~/.config/lindeps
    """
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir)
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "lindeps"


def get_config_path() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / CONFIG_FILENAME


def load_config() -> dict[str, Any]:
    """Load configuration from config.toml.

    Returns:
        Configuration dictionary, or empty dict if the file is missing or
        cannot be parsed
    """
    config_path = get_config_path()
    if not config_path.exists():
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return {}


def save_config(config: dict[str, Any]) -> None:
    """Save configuration to config.toml.

    Args:
        config: Configuration dictionary to save
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with config_path.open("wb") as f:
        tomli_w.dump(config, f)


def get_api_key() -> str | None:
    """Get the API key from the environment or the config file."""
    key = os.environ.get(API_KEY_ENV)
    if key:
        return key
    value = load_config().get("api_key")
    return str(value) if value else None


def get_default_team() -> str | None:
    """Get the default team key from the config file."""
    value = load_config().get("default_team")
    return str(value) if value else None


def get_api_url() -> str:
    """Get the GraphQL endpoint URL from config or return the default."""
    return str(load_config().get("api_url") or LINEAR_API_URL)


def mask_secret(value: str) -> str:
    """Mask all but the last four characters of a secret."""
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]
