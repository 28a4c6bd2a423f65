"""Form-to-settings committer for prefsync.

Writes an edited snapshot back to the settings store and decides which
side effects the write requires.

Commit flow:
1. Capture the store's current values of every option with side effects
2. Build the persisted representation of every option
3. Compare captured values with the values about to be written
4. Write every option; re-initialize translated strings right after the
   translation option is written
5. Report the invalidations for the side-effect dispatcher

There is no transaction: if the store rejects a write, the writes that
already succeeded stay in the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from prefsync import options
from prefsync.choices import is_sentinel
from prefsync.config.store import SettingsStore
from prefsync.options import SENTINEL_PERSISTED, InvalidationFlags, OptionKind
from prefsync.settings.model import SNAPSHOT_FIELDS, AppearanceSnapshot
from prefsync.strings import StringCatalogProtocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommitResult:
    """Outcome of a successful commit.

    Attributes:
        invalidated: Invalidations triggered by changed options.
        written: Option key -> persisted value, in write order.
        skipped: Option keys left untouched (enum options with no selection).
    """

    invalidated: InvalidationFlags = InvalidationFlags.NONE
    written: dict[str, Any] = field(default_factory=dict)
    skipped: tuple[str, ...] = ()

    @property
    def cache_invalidation_needed(self) -> bool:
        return InvalidationFlags.AVATAR_CACHE in self.invalidated


# Marks an enum option with no selection: its stored value is kept as is
_KEEP_STORED = object()


def to_persisted(key: str, value: Any) -> Any:
    """Convert a snapshot value to its persisted representation.

    Args:
        key: Option key.
        value: Snapshot value in engine form.

    Returns:
        Value to store, or _KEEP_STORED for an enum with no selection.
    """
    spec = options.get_option(key)

    if spec.kind is OptionKind.INDEXED_CHOICE:
        return options.index_to_truncate_method(value).value
    if spec.kind is OptionKind.ENUM_CHOICE:
        if value is None:
            return _KEEP_STORED
        return value.value
    if spec.kind is OptionKind.FILE_BACKED_CHOICE:
        return SENTINEL_PERSISTED if is_sentinel(value) else value
    return value


def _comparable(key: str, value: Any) -> Any:
    """Normalize a value for the before/after comparison."""
    spec = options.get_option(key)
    if spec.enum_type is not None:
        return options.parse_enum(spec.enum_type, value)
    return value


def _compute_invalidations(
    before: dict[str, Any],
    pending: dict[str, Any],
) -> InvalidationFlags:
    """Compare captured store values with the values about to be written.

    Enum options compare by member; text compares exactly (case-sensitive).
    """
    changed = InvalidationFlags.NONE

    for key, old_raw in before.items():
        new_raw = pending.get(key, _KEEP_STORED)
        if new_raw is _KEEP_STORED:
            continue
        old_val = _comparable(key, old_raw)
        new_val = _comparable(key, new_raw)
        if old_val != new_val:
            logger.debug("settings_commit: %s changed: %s -> %s", key, old_val, new_val)
            changed |= options.get_option(key).invalidates

    return changed


def commit_snapshot(
    snapshot: AppearanceSnapshot,
    store: SettingsStore,
    string_catalog: StringCatalogProtocol,
) -> CommitResult:
    """Write a snapshot to the store.

    Args:
        snapshot: Edited values to commit.
        store: Settings store to write to.
        string_catalog: Re-initialized after the translation is written,
            whether or not the translation changed.

    Returns:
        CommitResult with the invalidations to dispatch.

    Raises:
        PersistenceFailure: If the store rejects a write. Earlier writes
            are not rolled back.
    """
    # Captured before any write, so the diff never sees our own writes
    before = {
        key: store.get(key, spec.default)
        for key, spec in options.OPTIONS.items()
        if spec.invalidates != InvalidationFlags.NONE
    }

    pending = {
        key: to_persisted(key, getattr(snapshot, field_name))
        for field_name, key in SNAPSHOT_FIELDS.items()
    }

    invalidated = _compute_invalidations(before, pending)

    written: dict[str, Any] = {}
    skipped: list[str] = []
    for key, value in pending.items():
        if value is _KEEP_STORED:
            logger.info("settings_commit: no selection, keeping stored value, key=%s", key)
            skipped.append(key)
            continue

        store.set(key, value)
        written[key] = value

        if key == options.TRANSLATION:
            string_catalog.reinitialize()

    logger.info(
        "settings_commit: complete, written=%d, skipped=%d, invalidated=%s",
        len(written),
        len(skipped),
        invalidated,
    )
    return CommitResult(invalidated=invalidated, written=written, skipped=tuple(skipped))
