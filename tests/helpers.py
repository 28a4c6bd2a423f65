"""Shared test helper classes and utilities.

This module contains classes and utilities that need to be imported
directly in test files (as opposed to pytest fixtures which are
auto-injected).
"""

from __future__ import annotations

import copy
from concurrent.futures import Executor, Future
from pathlib import Path
from typing import Any, Callable

from prefsync.choices import DirectoryUnavailable
from prefsync.config.store import PersistenceFailure


class MemorySettingsStore:
    """In-memory SettingsStore double.

    Records every write in order and can be told to reject writes to
    specific keys.
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        self.values: dict[str, Any] = dict(values or {})
        self.writes: list[tuple[str, Any]] = []
        self.fail_on: set[str] = set()

    def get(self, key: str, default: Any = None) -> Any:
        return copy.deepcopy(self.values.get(key, default))

    def set(self, key: str, value: Any) -> None:
        if key in self.fail_on:
            raise PersistenceFailure(key, "disk full")
        self.values[key] = value
        self.writes.append((key, value))

    def written_keys(self) -> list[str]:
        return [key for key, _ in self.writes]


class FakeDirectoryLister:
    """DirectoryLister double returning a fixed file list.

    Set `unavailable` to make every listing raise DirectoryUnavailable.
    """

    def __init__(self, files: list[str] | None = None, unavailable: bool = False) -> None:
        self.files = list(files or [])
        self.unavailable = unavailable
        self.calls: list[tuple[Path, str]] = []

    def list_files(self, directory: Path, suffix: str) -> list[str]:
        self.calls.append((Path(directory), suffix))
        if self.unavailable:
            raise DirectoryUnavailable(directory, "permission denied")
        return [name for name in self.files if name.endswith(suffix)]


class StaticTranslationCatalog:
    """TranslationCatalog double with a fixed list."""

    def __init__(self, names: list[str] | None = None) -> None:
        self.names = list(names or [])

    def list_available_translations(self) -> list[str]:
        return list(self.names)


class RecordingView:
    """SettingsViewProtocol double that records what the controller asks of it.

    `edited` is returned by collect(); tests replace it to simulate edits.
    """

    def __init__(self) -> None:
        self.on_save_requested = None
        self.on_cancel_requested = None
        self.on_setting_changed = None

        self.populated = None
        self.choices = None
        self.edited = None
        self.dirty_states: list[bool] = []
        self.validation_errors = []
        self.warnings: list[str] = []
        self.dictionary_choices = []
        self.confirm_discard = True
        self.shown = False
        self.closed = False

    def populate(self, settings, choices) -> None:
        self.populated = settings
        self.choices = choices
        self.edited = settings

    def collect(self):
        if self.edited is None:
            raise RuntimeError("view not populated")
        return self.edited

    def set_dictionary_choices(self, choices) -> None:
        self.dictionary_choices.append(choices)

    def set_dirty(self, is_dirty: bool) -> None:
        self.dirty_states.append(is_dirty)

    def show_validation_errors(self, result) -> None:
        self.validation_errors.append(result)

    def show_warning(self, message: str) -> None:
        self.warnings.append(message)

    def confirm_discard_changes(self) -> bool:
        return self.confirm_discard

    def close(self) -> None:
        self.closed = True

    def show(self) -> None:
        self.shown = True


class DeferredExecutor(Executor):
    """Executor that queues work until run_pending() is called.

    Lets tests cancel a submitted task before it starts.
    """

    def __init__(self) -> None:
        self.pending: list[tuple[Future, Callable[..., Any], tuple, dict]] = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.pending.append((future, fn, args, kwargs))
        return future

    def run_pending(self) -> None:
        pending, self.pending = self.pending, []
        for future, fn, args, kwargs in pending:
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn(*args, **kwargs))
            except Exception as e:
                future.set_exception(e)

    def shutdown(self, wait: bool = True, *, cancel_futures: bool = False) -> None:
        self.pending.clear()
