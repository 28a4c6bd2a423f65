"""Choice sources for file-backed options.

Enumerates the valid values of options whose choices are files on disk:
- Spell-check dictionaries (*.dic in the dictionary directory)
- UI translations (*.xlf in the translations directory)

Lists are recomputed on every call and never cached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from prefsync.options import DEFAULT_TRANSLATION, SENTINEL_PERSISTED

logger = logging.getLogger(__name__)

DICTIONARY_SUFFIX = ".dic"
TRANSLATION_SUFFIX = ".xlf"

# In-engine representation of "no selection"; "none" exists only in the store
NO_SELECTION = None


class DirectoryUnavailable(Exception):
    """Raised when a backing directory cannot be listed."""

    def __init__(self, directory: Path, reason: str = "") -> None:
        self.directory = Path(directory)
        self.reason = reason
        message = f"Directory unavailable: {self.directory}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DirectoryLister(Protocol):
    """Lists files with a given suffix in one directory."""

    def list_files(self, directory: Path, suffix: str) -> list[str]:
        """Return matching file names (top directory only).

        Raises:
            DirectoryUnavailable: If the directory cannot be listed.
        """
        ...


class FileSystemDirectoryLister:
    """DirectoryLister over the local filesystem."""

    def list_files(self, directory: Path, suffix: str) -> list[str]:
        directory = Path(directory)
        if not directory.is_dir():
            raise DirectoryUnavailable(directory, "not a directory")

        suffix_folded = suffix.casefold()
        try:
            names = [
                entry.name
                for entry in directory.iterdir()
                if entry.is_file() and entry.name.casefold().endswith(suffix_folded)
            ]
        except OSError as e:
            raise DirectoryUnavailable(directory, e.strerror or type(e).__name__) from e
        return sorted(names, key=str.casefold)


@dataclass(frozen=True)
class FileBackedChoices:
    """Choices discovered for a file-backed option.

    Attributes:
        names: Display names; names[0] is always NO_SELECTION.
        selected_index: Index into names of the current selection.
        warning: Non-fatal message when the directory could not be listed.
    """

    names: tuple[str | None, ...]
    selected_index: int = 0
    warning: str | None = None

    @property
    def selected(self) -> str | None:
        return self.names[self.selected_index]


def is_sentinel(value: str | None) -> bool:
    """Check whether a value means "no selection".

    Args:
        value: Persisted or in-engine value.

    Returns:
        True for None and for "none" in any case.
    """
    if value is None:
        return True
    return value.strip().casefold() == SENTINEL_PERSISTED


def _strip_suffix(file_name: str, suffix: str) -> str:
    if file_name.casefold().endswith(suffix.casefold()):
        return file_name[: len(file_name) - len(suffix)]
    return file_name


def resolve_file_backed_choices(
    lister: DirectoryLister,
    directory: Path,
    suffix: str,
    current_selection: str | None,
    label: str = "dictionary",
) -> FileBackedChoices:
    """Discover choices for a file-backed option and locate the selection.

    Selection rules:
    - "none" (any case) or None selects the sentinel
    - a listed file named current_selection + suffix selects that entry,
      compared case-insensitively like the lister's suffix filter
    - anything else silently falls back to the sentinel

    If the directory cannot be listed the result holds only the sentinel
    and carries a warning instead of raising.

    Args:
        lister: Directory lister collaborator.
        directory: Directory to scan.
        suffix: File suffix filter, stripped from display names.
        current_selection: Persisted selection string.
        label: Human name of the files, used in the warning.

    Returns:
        FileBackedChoices with the sentinel first.
    """
    try:
        file_names = lister.list_files(directory, suffix)
    except DirectoryUnavailable as e:
        logger.warning("choices: directory unavailable, dir=%s, reason=%s", e.directory, e.reason)
        return FileBackedChoices(
            names=(NO_SELECTION,),
            selected_index=0,
            warning=f"No {label} files found in: {directory}",
        )

    names: list[str | None] = [NO_SELECTION]
    names.extend(_strip_suffix(name, suffix) for name in file_names)

    selected_index = 0
    if not is_sentinel(current_selection):
        # Suffix case follows the lister, which matches it case-insensitively
        wanted = f"{current_selection}{suffix}".casefold()
        for index, file_name in enumerate(file_names, start=1):
            if file_name.casefold() == wanted:
                selected_index = index
                break
        else:
            logger.info(
                "choices: stored selection not found, resetting to none, selection=%s",
                current_selection,
            )

    logger.debug(
        "choices: resolved, dir=%s, count=%d, selected=%d",
        directory,
        len(file_names),
        selected_index,
    )
    return FileBackedChoices(names=tuple(names), selected_index=selected_index)


class TranslationCatalog(Protocol):
    """Source of installed translation names."""

    def list_available_translations(self) -> list[str]:
        """Return translation names; never raises."""
        ...


class DirectoryTranslationCatalog:
    """TranslationCatalog reading *.xlf files from a directory.

    English is the built-in language and is never listed here.
    """

    def __init__(
        self,
        translations_dir: Path,
        lister: DirectoryLister | None = None,
    ) -> None:
        self._translations_dir = Path(translations_dir)
        self._lister = lister or FileSystemDirectoryLister()

    @property
    def translations_dir(self) -> Path:
        return self._translations_dir

    def list_available_translations(self) -> list[str]:
        try:
            file_names = self._lister.list_files(self._translations_dir, TRANSLATION_SUFFIX)
        except DirectoryUnavailable as e:
            logger.warning("translations: directory unavailable, dir=%s", e.directory)
            return []

        names = []
        for file_name in file_names:
            name = _strip_suffix(file_name, TRANSLATION_SUFFIX)
            if name.casefold() == DEFAULT_TRANSLATION.casefold():
                continue
            names.append(name)
        return names

    def translation_path(self, name: str) -> Path:
        """Get the file holding a translation's strings."""
        return self._translations_dir / f"{name}{TRANSLATION_SUFFIX}"
