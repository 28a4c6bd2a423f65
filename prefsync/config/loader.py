"""Configuration loading for prefsync."""

import copy
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from prefsync.config.types import DEFAULT_CONFIG, Config

logger = logging.getLogger(__name__)

APP_DIR_NAME = "prefsync"


def _get_appdata_dir() -> Path:
    r"""Get the per-user application data directory.

    Returns:
        %APPDATA%\prefsync on Windows, $XDG_CONFIG_HOME/prefsync elsewhere.
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if not appdata:
            appdata = Path.home() / "AppData" / "Roaming"
        return Path(appdata) / APP_DIR_NAME

    config_home = os.environ.get("XDG_CONFIG_HOME")
    if not config_home:
        config_home = Path.home() / ".config"
    return Path(config_home) / APP_DIR_NAME


def _get_appdata_config_path() -> Path:
    """Get path to user settings.

    Returns:
        <appdata dir>/user-settings.toml
    """
    return _get_appdata_dir() / "user-settings.toml"


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def resolve_directory(config: Config, name: str) -> Path:
    """Resolve a collaborator directory from the paths section.

    Args:
        config: Loaded configuration.
        name: One of "dictionary_dir", "translations_dir", "avatar_cache_dir".

    Returns:
        Configured path, or the default under the app data directory.
    """
    configured = config.get("paths", {}).get(name, "")
    if configured:
        return Path(configured).expanduser()

    defaults = {
        "dictionary_dir": "Dictionaries",
        "translations_dir": "Translation",
        "avatar_cache_dir": "Images",
    }
    return _get_appdata_dir() / defaults.get(name, name)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration: user overrides merged over DEFAULT_CONFIG.

    A missing file yields the defaults. An unreadable or malformed file is
    logged and ignored so the settings session can always be opened.

    Args:
        config_path: Optional override path (tests). Defaults to the user
            settings file in the app data directory.

    Returns:
        Configuration dictionary with defaults applied.
    """
    if config_path is None:
        config_path = _get_appdata_config_path()

    config = copy.deepcopy(DEFAULT_CONFIG)

    if not config_path.exists():
        logger.debug("load_config: no user settings at %s, using defaults", config_path)
        return config

    try:
        with open(config_path, "rb") as f:
            user_overrides = tomllib.load(f)
        config = _deep_merge(config, user_overrides)
        logger.info("load_config: loaded user overrides from %s", config_path)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("load_config: failed to load user overrides (using defaults): %s", e)

    return config
