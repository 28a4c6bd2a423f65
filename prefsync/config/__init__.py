"""Configuration loading, saving, and the settings store for prefsync."""

from prefsync.config.types import (
    AppearanceConfig,
    AvatarsConfig,
    BranchesConfig,
    Config,
    DEFAULT_CONFIG,
    LanguageConfig,
    PathsConfig,
    RevisionsConfig,
)
from prefsync.config.loader import (
    _deep_merge,
    _get_appdata_config_path,
    _get_appdata_dir,
    load_config,
    resolve_directory,
)
from prefsync.config.saver import render_config, save_config
from prefsync.config.store import PersistenceFailure, SettingsStore, TomlSettingsStore

__all__ = [
    # Types
    "AppearanceConfig",
    "AvatarsConfig",
    "BranchesConfig",
    "Config",
    "DEFAULT_CONFIG",
    "LanguageConfig",
    "PathsConfig",
    "RevisionsConfig",
    # Loading
    "load_config",
    "resolve_directory",
    "_deep_merge",
    "_get_appdata_config_path",
    "_get_appdata_dir",
    # Saving
    "render_config",
    "save_config",
    # Store
    "PersistenceFailure",
    "SettingsStore",
    "TomlSettingsStore",
]
