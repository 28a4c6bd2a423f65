"""Settings-to-form loader for prefsync.

Reads every option from the settings store and builds the editable
snapshot plus the choice lists a view needs. Loading never writes to the
store and never fails on malformed stored values: anything unrecognized
degrades to a safe default so the session can always be opened, even
with settings written by another version.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from prefsync import options
from prefsync.choices import (
    DICTIONARY_SUFFIX,
    DirectoryLister,
    FileBackedChoices,
    FileSystemDirectoryLister,
    TranslationCatalog,
    resolve_file_backed_choices,
)
from prefsync.config.store import SettingsStore
from prefsync.options import DEFAULT_TRANSLATION, OptionKind
from prefsync.settings.model import SNAPSHOT_FIELDS, AppearanceChoices, AppearanceSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadResult:
    """Result of loading a settings session.

    Attributes:
        snapshot: Editable values.
        choices: Choice lists for the enumerated options.
        warnings: Non-fatal problems to show the user.
    """

    snapshot: AppearanceSnapshot
    choices: AppearanceChoices
    warnings: tuple[str, ...] = field(default_factory=tuple)


def _coerce(spec: options.OptionSpec, raw: Any) -> Any:
    """Coerce a stored plain value to its option kind, or the default."""
    if spec.kind is OptionKind.BOOLEAN:
        if isinstance(raw, bool):
            return raw
    elif spec.kind is OptionKind.INTEGER:
        if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            try:
                return int(raw.strip())
            except ValueError:
                pass
    elif isinstance(raw, str):
        return raw

    if raw is not None:
        logger.warning(
            "settings_loader: malformed value, using default, key=%s, value=%r",
            spec.key,
            raw,
        )
    return spec.default


def _read(store: SettingsStore, key: str) -> Any:
    spec = options.get_option(key)
    return store.get(key, spec.default)


def _translation_choices(
    catalog: TranslationCatalog | None,
    stored: str,
) -> tuple[tuple[str, ...], int | None]:
    names = [DEFAULT_TRANSLATION]
    if catalog is not None:
        names.extend(catalog.list_available_translations())

    # The stored text is kept even when it is not one of the listed names
    selected = names.index(stored) if stored in names else None
    return tuple(names), selected


def load_snapshot(
    store: SettingsStore,
    *,
    dictionary_dir: Path,
    dictionary_lister: DirectoryLister | None = None,
    translation_catalog: TranslationCatalog | None = None,
) -> LoadResult:
    """Load the editable snapshot from the settings store.

    Args:
        store: Settings store to read from (never written).
        dictionary_dir: Directory holding spell-check dictionaries.
        dictionary_lister: Lister used to scan dictionary_dir.
        translation_catalog: Source of installed translation names.

    Returns:
        LoadResult with snapshot, choices and any warnings.
    """
    lister = dictionary_lister or FileSystemDirectoryLister()
    values: dict[str, Any] = {}
    warnings: list[str] = []

    for field_name, key in SNAPSHOT_FIELDS.items():
        spec = options.get_option(key)
        raw = _read(store, key)

        if spec.kind is OptionKind.INDEXED_CHOICE:
            method = options.parse_enum(options.TruncatePathMethod, raw)
            values[field_name] = options.truncate_method_to_index(method)
        elif spec.kind is OptionKind.ENUM_CHOICE:
            member = options.parse_enum(spec.enum_type, raw)
            if member is None:
                logger.info(
                    "settings_loader: unrecognized enum value, no selection, key=%s, value=%r",
                    key,
                    raw,
                )
            values[field_name] = member
        else:
            # File-backed choices are resolved below, once the directory is scanned
            values[field_name] = _coerce(spec, raw)

    dictionaries: FileBackedChoices = resolve_file_backed_choices(
        lister,
        dictionary_dir,
        DICTIONARY_SUFFIX,
        values["dictionary"],
    )
    if dictionaries.warning:
        warnings.append(dictionaries.warning)
    values["dictionary"] = dictionaries.selected

    translations, translation_index = _translation_choices(
        translation_catalog, values["translation"]
    )

    snapshot = AppearanceSnapshot(**values)
    choices = AppearanceChoices(
        dictionaries=dictionaries.names,
        dictionary_index=dictionaries.selected_index,
        translations=translations,
        translation_index=translation_index,
    )

    logger.debug(
        "settings_loader: loaded, provider=%s, fallback=%s, dictionary=%s, translation=%s",
        snapshot.avatar_provider,
        snapshot.avatar_fallback_type,
        snapshot.dictionary,
        snapshot.translation,
    )
    return LoadResult(snapshot=snapshot, choices=choices, warnings=tuple(warnings))
