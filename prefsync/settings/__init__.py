"""Appearance settings session: load, edit, commit, dispatch."""

from prefsync.settings.model import (
    AppearanceChoices,
    AppearanceSnapshot,
    MAX_AVATAR_CACHE_DAYS,
    MIN_AVATAR_CACHE_DAYS,
    SNAPSHOT_FIELDS,
    SnapshotValidator,
    ValidationResult,
)
from prefsync.settings.loader import LoadResult, load_snapshot
from prefsync.settings.committer import CommitResult, commit_snapshot, to_persisted
from prefsync.settings.dispatcher import SideEffectDispatcher
from prefsync.settings.view import SettingsViewProtocol
from prefsync.settings.controller import (
    AppearanceSettingsController,
    create_settings_controller,
)

__all__ = [
    # Model
    "AppearanceChoices",
    "AppearanceSnapshot",
    "MAX_AVATAR_CACHE_DAYS",
    "MIN_AVATAR_CACHE_DAYS",
    "SNAPSHOT_FIELDS",
    "SnapshotValidator",
    "ValidationResult",
    # Loader
    "LoadResult",
    "load_snapshot",
    # Committer
    "CommitResult",
    "commit_snapshot",
    "to_persisted",
    # Dispatcher
    "SideEffectDispatcher",
    # View
    "SettingsViewProtocol",
    # Controller
    "AppearanceSettingsController",
    "create_settings_controller",
]
