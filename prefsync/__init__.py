"""prefsync - Appearance settings synchronization for a Git GUI."""

__version__ = "0.1.0"

from prefsync.choices import (  # noqa: E402
    DirectoryUnavailable,
    FileBackedChoices,
    resolve_file_backed_choices,
)
from prefsync.config.store import PersistenceFailure, TomlSettingsStore  # noqa: E402
from prefsync.options import InvalidationFlags  # noqa: E402
from prefsync.settings import (  # noqa: E402
    AppearanceSettingsController,
    AppearanceSnapshot,
    CommitResult,
    SideEffectDispatcher,
    commit_snapshot,
    create_settings_controller,
    load_snapshot,
)

__all__ = [
    "DirectoryUnavailable",
    "FileBackedChoices",
    "resolve_file_backed_choices",
    "PersistenceFailure",
    "TomlSettingsStore",
    "InvalidationFlags",
    "AppearanceSettingsController",
    "AppearanceSnapshot",
    "CommitResult",
    "SideEffectDispatcher",
    "commit_snapshot",
    "create_settings_controller",
    "load_snapshot",
]
