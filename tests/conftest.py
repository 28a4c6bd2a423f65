"""Shared pytest fixtures for prefsync tests.

This module provides reusable fixtures for:
- In-memory settings stores
- Dictionary directories and listers
- String catalog and avatar cache doubles
- Synchronous executor for deterministic async testing
"""

from __future__ import annotations

from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from prefsync.options import InvalidationFlags
from prefsync.settings.dispatcher import SideEffectDispatcher
from tests.helpers import (
    FakeDirectoryLister,
    MemorySettingsStore,
    RecordingView,
    StaticTranslationCatalog,
)


# ============================================================================
# Synchronous Executor for Testing
# ============================================================================


class SynchronousExecutor(Executor):
    """Executor that runs tasks immediately in calling thread.

    Useful for testing async code deterministically without threading.
    """

    def __init__(self) -> None:
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        """Execute fn immediately and return a completed Future."""
        self.submitted += 1
        future = Future()
        try:
            result = fn(*args, **kwargs)
            future.set_result(result)
        except Exception as e:
            future.set_exception(e)
        return future

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        """No-op shutdown since tasks run synchronously."""
        pass


# ============================================================================
# Store Fixtures
# ============================================================================


@pytest.fixture
def stored_values() -> dict[str, Any]:
    """Persisted values for a typical user.

    Returns:
        Flat key -> persisted value mapping.
    """
    return {
        "appearance.enable_auto_scale": True,
        "appearance.truncate_path_method": "compact",
        "appearance.show_repo_current_branch": False,
        "appearance.show_current_branch_in_visual_studio": True,
        "appearance.relative_date": False,
        "branches.sort_order": "Descending",
        "branches.sort_by": "committerdate",
        "revisions.sort_by_author_date": True,
        "avatars.show_in_commit_info": True,
        "avatars.show_column": False,
        "avatars.cache_days": 30,
        "avatars.provider": "Default",
        "avatars.fallback_type": "Identicon",
        "avatars.custom_template": "",
        "language.translation": "English",
        "language.dictionary": "en-US",
    }


@pytest.fixture
def memory_store(stored_values) -> MemorySettingsStore:
    """In-memory store holding stored_values."""
    return MemorySettingsStore(stored_values)


@pytest.fixture
def dictionary_lister() -> FakeDirectoryLister:
    """Lister reporting two installed dictionaries."""
    return FakeDirectoryLister(["de-DE.dic", "en-US.dic"])


@pytest.fixture
def dictionary_dir(tmp_path) -> Path:
    """Real dictionary directory with two .dic files and one unrelated file.

    Returns:
        Path to the directory.
    """
    directory = tmp_path / "Dictionaries"
    directory.mkdir()
    (directory / "en-US.dic").write_text("")
    (directory / "de-DE.dic").write_text("")
    (directory / "readme.txt").write_text("")
    return directory


@pytest.fixture
def translation_catalog() -> StaticTranslationCatalog:
    """Catalog reporting two installed translations."""
    return StaticTranslationCatalog(["German", "Japanese"])


# ============================================================================
# Collaborator Fixtures
# ============================================================================


@pytest.fixture
def string_catalog() -> MagicMock:
    """Mock string catalog tracking reinitialize() calls."""
    return MagicMock(name="string_catalog")


@pytest.fixture
def sync_executor() -> SynchronousExecutor:
    """Executor running submitted work inline."""
    return SynchronousExecutor()


@pytest.fixture
def avatar_cache_clear() -> MagicMock:
    """Mock avatar cache clear handler."""
    return MagicMock(name="avatar_cache_clear")


@pytest.fixture
def dispatcher(sync_executor, avatar_cache_clear) -> SideEffectDispatcher:
    """Dispatcher with the avatar cache clear registered, running inline."""
    dispatcher = SideEffectDispatcher(executor=sync_executor)
    dispatcher.register_handler(InvalidationFlags.AVATAR_CACHE, avatar_cache_clear)
    return dispatcher


@pytest.fixture
def view() -> RecordingView:
    """Recording settings view."""
    return RecordingView()


@pytest.fixture
def mock_notifications(mocker) -> MagicMock:
    """Patch desktop notifications used by the dispatcher.

    Returns:
        Mock for prefsync.notifications.report_side_effect_failure.
    """
    return mocker.patch("prefsync.notifications.report_side_effect_failure", return_value=True)
