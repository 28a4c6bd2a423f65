"""Key/value settings store for prefsync.

The settings engine talks to persisted settings only through the
SettingsStore protocol, so tests can pass an in-memory double and the
application can pass a TomlSettingsStore with an explicit lifetime.
"""

from __future__ import annotations

import copy
import logging
import threading
from pathlib import Path
from typing import Any, Protocol

from prefsync.config.loader import _get_appdata_config_path, load_config
from prefsync.config.saver import save_config
from prefsync.config.types import Config

logger = logging.getLogger(__name__)


class PersistenceFailure(Exception):
    """Raised when the settings store rejects a write."""

    def __init__(self, key: str, reason: str) -> None:
        self.key = key
        self.reason = reason
        super().__init__(f"Failed to persist {key}: {reason}")


class SettingsStore(Protocol):
    """Interface of the persisted settings store.

    Keys are dotted paths ("avatars.provider").
    """

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or default when absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Persist value for key.

        Raises:
            PersistenceFailure: If the value could not be stored.
        """
        ...


def _split_key(key: str) -> tuple[str, str]:
    section, sep, name = key.partition(".")
    if not sep or not section or not name:
        raise KeyError(f"Settings key must be 'section.name': {key!r}")
    return section, name


class TomlSettingsStore:
    """SettingsStore backed by the user settings TOML file.

    Every set() writes the whole document through to disk, so a failure
    part way through a commit leaves the earlier writes persisted.

    Example:
        >>> store = TomlSettingsStore(tmp_path / "user-settings.toml")
        >>> store.set("avatars.provider", "Custom")
        >>> store.get("avatars.provider")
        'Custom'
    """

    def __init__(self, config_path: Path | None = None) -> None:
        """Initialize the store and load the current document.

        Args:
            config_path: Settings file. Defaults to the user settings file.
        """
        self._path = config_path if config_path is not None else _get_appdata_config_path()
        self._lock = threading.Lock()
        self._config: Config = load_config(self._path)
        logger.debug("settings_store: opened %s", self._path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def config(self) -> Config:
        """Deep copy of the current document."""
        with self._lock:
            return copy.deepcopy(self._config)

    def get(self, key: str, default: Any = None) -> Any:
        section, name = _split_key(key)
        with self._lock:
            values = self._config.get(section)
            if not isinstance(values, dict):
                return default
            return copy.deepcopy(values.get(name, default))

    def set(self, key: str, value: Any) -> None:
        section, name = _split_key(key)
        with self._lock:
            values = self._config.setdefault(section, {})
            missing = object()
            previous = values.get(name, missing)
            values[name] = value
            try:
                save_config(self._config, self._path)
            except (OSError, TypeError) as e:
                # Only the rejected value is rolled back in memory
                if previous is missing:
                    del values[name]
                else:
                    values[name] = previous
                logger.error("settings_store: write failed, key=%s, error=%s", key, e)
                raise PersistenceFailure(key, str(e)) from e
        logger.debug("settings_store: %s = %r", key, value)

    def reload(self) -> None:
        """Re-read the document from disk, discarding in-memory state."""
        with self._lock:
            self._config = load_config(self._path)
        logger.info("settings_store: reloaded %s", self._path)
