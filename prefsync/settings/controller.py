"""Settings controller for prefsync.

Orchestrates the appearance settings session:
load -> populate -> edit -> validate -> commit -> dispatch side effects.
Decoupled from any specific GUI framework.
"""

from __future__ import annotations

import dataclasses
import logging
from concurrent.futures import Future
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from prefsync.avatars import AvatarCache
from prefsync.choices import (
    DICTIONARY_SUFFIX,
    DirectoryLister,
    DirectoryTranslationCatalog,
    FileBackedChoices,
    FileSystemDirectoryLister,
    TranslationCatalog,
    resolve_file_backed_choices,
)
from prefsync.config.loader import resolve_directory
from prefsync.config.store import PersistenceFailure, SettingsStore, TomlSettingsStore
from prefsync.options import SENTINEL_PERSISTED, TRANSLATION, InvalidationFlags
from prefsync.settings.committer import CommitResult, commit_snapshot
from prefsync.settings.dispatcher import SideEffectDispatcher
from prefsync.settings.loader import LoadResult, load_snapshot
from prefsync.settings.model import (
    AppearanceChoices,
    AppearanceSnapshot,
    SnapshotValidator,
    ValidationResult,
)
from prefsync.strings import StringCatalog, StringCatalogProtocol

if TYPE_CHECKING:
    from prefsync.settings.view import SettingsViewProtocol

logger = logging.getLogger(__name__)


class AppearanceSettingsController:
    """Orchestrates the settings session - decoupled from GUI.

    The controller manages:
    - Loading the snapshot from the settings store
    - Tracking dirty state (unsaved changes)
    - Validation before commit
    - Committing and dispatching side effects
    - Rescanning dictionaries and clearing the avatar cache on request

    Example:
        >>> controller = create_settings_controller(view)
        >>> controller.open()  # Load, populate, show
    """

    def __init__(
        self,
        view: "SettingsViewProtocol",
        store: SettingsStore,
        *,
        dictionary_dir: Path,
        string_catalog: StringCatalogProtocol,
        dispatcher: SideEffectDispatcher,
        dictionary_lister: DirectoryLister | None = None,
        translation_catalog: TranslationCatalog | None = None,
        on_settings_applied: Callable[[CommitResult], None] | None = None,
        owns_dispatcher: bool = False,
    ) -> None:
        """Initialize the settings controller.

        Args:
            view: GUI implementation of SettingsViewProtocol.
            store: Settings store the session reads and writes.
            dictionary_dir: Directory holding spell-check dictionaries.
            string_catalog: Re-initialized on every commit.
            dispatcher: Runs side effects of a commit.
            dictionary_lister: Lister for dictionary_dir.
            translation_catalog: Source of installed translation names.
            on_settings_applied: Optional callback after a successful commit.
            owns_dispatcher: Shut the dispatcher down in close().
        """
        self._view = view
        self._store = store
        self._dictionary_dir = Path(dictionary_dir)
        self._string_catalog = string_catalog
        self._dispatcher = dispatcher
        self._dictionary_lister = dictionary_lister or FileSystemDirectoryLister()
        self._translation_catalog = translation_catalog
        self._on_settings_applied = on_settings_applied
        self._owns_dispatcher = owns_dispatcher

        # State tracking
        self._original: AppearanceSnapshot | None = None  # Store state at open time
        self._current: AppearanceSnapshot | None = None  # Working copy
        self._choices: AppearanceChoices | None = None
        self._pending_effects: list[Future] = []
        self._scan: Future | None = None  # In-flight directory scan

        # Wire up view callbacks
        self._view.on_save_requested = self._handle_save
        self._view.on_cancel_requested = self._handle_cancel
        self._view.on_setting_changed = self._handle_setting_changed

    @property
    def is_dirty(self) -> bool:
        """Check if there are unsaved changes.

        Returns:
            True if current settings differ from original.
        """
        if self._original is None or self._current is None:
            return False
        return self._original != self._current

    @property
    def choices(self) -> AppearanceChoices | None:
        return self._choices

    @property
    def pending_effects(self) -> list[Future]:
        """Futures of side effects started by the last commit."""
        return list(self._pending_effects)

    def open(self) -> None:
        """Open the settings session.

        Loads the snapshot, populates the view, surfaces load warnings and
        shows the view. The dictionary scan runs on the calling thread; use
        open_async() to keep a slow filesystem off the UI thread.
        """
        logger.info("settings_controller: opening settings")
        self._apply_loaded(self._load())

    def open_async(self) -> Future:
        """Load the session on the dispatcher's executor.

        The view is populated when the load completes, from the executor
        thread; views marshal the call onto their UI thread. A cancelled
        load (see close()) leaves the view untouched.

        Returns:
            Future of the LoadResult.
        """
        logger.info("settings_controller: opening settings in background")
        future = self._start_scan(self._load)
        future.add_done_callback(self._on_loaded)
        return future

    def rescan_dictionaries(self) -> FileBackedChoices:
        """Re-read installed dictionaries, keeping the edited selection if still present.

        Returns:
            The rescanned dictionary choices.
        """
        current = self._collect_or_current()
        choices = self._scan_dictionaries(current)
        self._apply_dictionaries(choices, current)
        return choices

    def rescan_dictionaries_async(self) -> Future:
        """Rescan dictionaries on the dispatcher's executor.

        Starting a new scan cancels one still waiting to run. The result is
        applied to the view on completion unless the scan was cancelled.

        Returns:
            Future of the rescanned FileBackedChoices.
        """
        current = self._collect_or_current()
        future = self._start_scan(lambda: self._scan_dictionaries(current))
        future.add_done_callback(lambda f: self._on_dictionaries_scanned(f, current))
        return future

    def clear_avatar_cache(self) -> list[Future]:
        """Clear the avatar cache now, independent of any settings change.

        Returns:
            Futures of the started clear handlers.
        """
        logger.info("settings_controller: avatar cache clear requested")
        return self._dispatcher.trigger(InvalidationFlags.AVATAR_CACHE)

    def close(self) -> None:
        """End the session.

        Cancels a directory scan that has not started yet and shuts down
        the dispatcher if this controller owns it, waiting for running side
        effects such as an avatar cache clear to finish.
        """
        self.cancel_scan()
        if self._owns_dispatcher:
            self._dispatcher.shutdown(wait=True)
        logger.debug("settings_controller: closed")

    def cancel_scan(self) -> bool:
        """Cancel the pending directory scan, if any.

        Returns:
            True if a scan was cancelled before it ran.
        """
        scan, self._scan = self._scan, None
        if scan is None:
            return False
        return scan.cancel()

    def _load(self) -> LoadResult:
        return load_snapshot(
            self._store,
            dictionary_dir=self._dictionary_dir,
            dictionary_lister=self._dictionary_lister,
            translation_catalog=self._translation_catalog,
        )

    def _apply_loaded(self, result: LoadResult) -> None:
        self._original = result.snapshot
        self._current = result.snapshot
        self._choices = result.choices

        self._view.populate(result.snapshot, result.choices)
        for warning in result.warnings:
            self._view.show_warning(warning)
        self._view.set_dirty(False)
        self._view.show()

    def _start_scan(self, fn: Callable[[], object]) -> Future:
        self.cancel_scan()
        future = self._dispatcher.executor.submit(fn)
        self._scan = future
        return future

    def _finish_scan(self, future: Future) -> bool:
        """Forget a completed scan; True if its result should be applied."""
        if self._scan is future:
            self._scan = None
        if future.cancelled():
            logger.debug("settings_controller: scan cancelled, result ignored")
            return False
        error = future.exception()
        if error is not None:
            logger.error("settings_controller: directory scan failed: %s", error)
            self._view.show_warning(f"Failed to read settings: {error}")
            return False
        return True

    def _on_loaded(self, future: Future) -> None:
        if self._finish_scan(future):
            self._apply_loaded(future.result())

    def _scan_dictionaries(self, current: AppearanceSnapshot | None) -> FileBackedChoices:
        selection = current.dictionary if current is not None else None
        return resolve_file_backed_choices(
            self._dictionary_lister,
            self._dictionary_dir,
            DICTIONARY_SUFFIX,
            selection if selection is not None else SENTINEL_PERSISTED,
        )

    def _on_dictionaries_scanned(
        self, future: Future, current: AppearanceSnapshot | None
    ) -> None:
        if self._finish_scan(future):
            self._apply_dictionaries(future.result(), current)

    def _apply_dictionaries(
        self, choices: FileBackedChoices, current: AppearanceSnapshot | None
    ) -> None:
        if choices.warning:
            self._view.show_warning(choices.warning)

        if self._choices is not None:
            self._choices = dataclasses.replace(
                self._choices,
                dictionaries=choices.names,
                dictionary_index=choices.selected_index,
            )
        if current is not None:
            self._current = current.with_changes(dictionary=choices.selected)

        self._view.set_dictionary_choices(choices)
        self._view.set_dirty(self.is_dirty)
        logger.debug("settings_controller: dictionaries rescanned, count=%d", len(choices.names) - 1)

    def _collect_or_current(self) -> AppearanceSnapshot | None:
        try:
            return self._view.collect()
        except Exception as e:
            logger.debug("settings_controller: collect failed, using last state: %s", e)
            return self._current

    def _handle_save(self) -> None:
        """Handle Save button click.

        Flow:
        1. Collect current UI state
        2. Validate all settings
        3. If invalid: show errors and abort
        4. Commit to the store
        5. Dispatch side effects (not awaited)
        6. Update original to match and close
        """
        logger.info("settings_controller: save requested")

        # Collect current UI state
        try:
            self._current = self._view.collect()
        except Exception as e:
            logger.error("settings_controller: collect failed: %s", e)
            return

        # Validate
        result = SnapshotValidator.validate(self._current)
        if not result.is_valid:
            logger.warning(
                "settings_controller: validation failed, errors=%s",
                list(result.errors.keys()),
            )
            self._view.show_validation_errors(result)
            return

        # Commit; a failure halts the closing flow
        try:
            commit_result = commit_snapshot(self._current, self._store, self._string_catalog)
        except PersistenceFailure as e:
            logger.error("settings_controller: commit failed: %s", e)
            error_result = ValidationResult()
            error_result.add_error("_save", f"Failed to save: {e}")
            self._view.show_validation_errors(error_result)
            return

        # Side effects run in the background; their failures never undo the commit
        self._pending_effects = self._dispatcher.dispatch(commit_result)

        # Update original (no longer dirty)
        self._original = self._current
        self._view.set_dirty(False)

        # Invoke callback
        if self._on_settings_applied is not None:
            try:
                self._on_settings_applied(commit_result)
            except Exception as e:
                logger.error("settings_controller: on_settings_applied callback failed: %s", e)

        logger.info(
            "settings_controller: save complete, cache_invalidation=%s",
            commit_result.cache_invalidation_needed,
        )
        self._view.close()

    def _handle_cancel(self) -> None:
        """Handle Cancel button click or window close.

        If dirty, prompts for confirmation before closing.
        """
        current = self._collect_or_current()
        if current is not None:
            self._current = current

        logger.debug("settings_controller: cancel requested, is_dirty=%s", self.is_dirty)

        if self.is_dirty:
            if not self._view.confirm_discard_changes():
                logger.debug("settings_controller: discard cancelled by user")
                return

        logger.info("settings_controller: closing settings")
        self._view.close()

    def _handle_setting_changed(self, field: str, value: object) -> None:
        """Handle individual setting change.

        Updates dirty state based on whether current differs from original.

        Args:
            field: Name of changed field.
            value: New value (for logging, not used directly).
        """
        try:
            self._current = self._view.collect()
        except Exception as e:
            logger.debug("settings_controller: view not ready: %s", e)
            return

        is_dirty = self.is_dirty
        self._view.set_dirty(is_dirty)

        logger.debug(
            "settings_controller: setting changed, field=%s, is_dirty=%s",
            field,
            is_dirty,
        )


def create_settings_controller(
    view: "SettingsViewProtocol",
    config_path: Path | None = None,
    on_settings_applied: Callable[[CommitResult], None] | None = None,
) -> AppearanceSettingsController:
    """Wire a controller to the TOML store and the on-disk collaborators.

    Args:
        view: GUI implementation of SettingsViewProtocol.
        config_path: Settings file. Defaults to the user settings file.
        on_settings_applied: Optional callback after a successful commit.

    Returns:
        Ready-to-open controller. Call close() when the session ends to
        stop its background worker.
    """
    store = TomlSettingsStore(config_path)
    config = store.config

    translations_dir = resolve_directory(config, "translations_dir")
    avatar_cache = AvatarCache(resolve_directory(config, "avatar_cache_dir"))

    dispatcher = SideEffectDispatcher()
    dispatcher.register_handler(InvalidationFlags.AVATAR_CACHE, avatar_cache.clear)

    return AppearanceSettingsController(
        view,
        store,
        dictionary_dir=resolve_directory(config, "dictionary_dir"),
        string_catalog=StringCatalog(lambda: store.get(TRANSLATION), translations_dir),
        dispatcher=dispatcher,
        translation_catalog=DirectoryTranslationCatalog(translations_dir),
        on_settings_applied=on_settings_applied,
        owns_dispatcher=True,
    )
