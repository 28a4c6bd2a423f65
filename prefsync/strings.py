"""Translated UI string catalog for prefsync.

Strings are loaded lazily for the translation currently stored in
settings. reinitialize() drops the loaded strings so the next lookup
re-reads the translation setting; it is cheap, idempotent and safe to
call unconditionally after every settings commit.
"""

from __future__ import annotations

import logging
import threading
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Callable, Protocol

from prefsync.choices import TRANSLATION_SUFFIX
from prefsync.options import DEFAULT_TRANSLATION

logger = logging.getLogger(__name__)


class StringCatalogProtocol(Protocol):
    """Collaborator re-read after the translation setting is written."""

    def reinitialize(self) -> None:
        ...


def load_xliff_strings(path: Path) -> dict[str, str]:
    """Read trans-unit id -> target text from an XLIFF file.

    Args:
        path: Translation file.

    Returns:
        Mapping of string id to translated text. Units without a target
        are skipped.

    Raises:
        OSError: If the file cannot be read.
        ET.ParseError: If the file is not valid XML.
    """
    tree = ET.parse(path)
    strings: dict[str, str] = {}
    for unit in tree.iter():
        if not unit.tag.endswith("trans-unit"):
            continue
        unit_id = unit.get("id")
        if not unit_id:
            continue
        for child in unit:
            if child.tag.endswith("target") and child.text:
                strings[unit_id] = child.text
                break
    return strings


class StringCatalog:
    """Lazily loaded translated strings.

    Example:
        >>> catalog = StringCatalog(lambda: store.get("language.translation"), translations_dir)
        >>> catalog.get("error", "Error")
        'Fehler'
    """

    def __init__(
        self,
        current_translation: Callable[[], str | None],
        translations_dir: Path,
        loader: Callable[[Path], dict[str, str]] = load_xliff_strings,
    ) -> None:
        """Initialize the catalog.

        Args:
            current_translation: Returns the translation name from settings.
            translations_dir: Directory holding translation files.
            loader: Reads one translation file (injectable for testing).
        """
        self._current_translation = current_translation
        self._translations_dir = Path(translations_dir)
        self._loader = loader
        self._lock = threading.Lock()
        self._strings: dict[str, str] | None = None
        self._translation: str = DEFAULT_TRANSLATION

    @property
    def translation(self) -> str:
        with self._lock:
            self._ensure_loaded()
            return self._translation

    def get(self, name: str, default: str) -> str:
        """Look up a translated string.

        Args:
            name: String id.
            default: English text used when no translation exists.

        Returns:
            Translated text, or default.
        """
        with self._lock:
            self._ensure_loaded()
            return (self._strings or {}).get(name, default)

    def reinitialize(self) -> None:
        """Drop loaded strings; the next lookup reloads them."""
        with self._lock:
            self._strings = None
        logger.debug("strings: reinitialized")

    def _ensure_loaded(self) -> None:
        """Load strings for the current translation. Must be called with lock held."""
        if self._strings is not None:
            return

        translation = (self._current_translation() or DEFAULT_TRANSLATION).strip()
        self._translation = translation or DEFAULT_TRANSLATION
        if self._translation.casefold() == DEFAULT_TRANSLATION.casefold():
            self._strings = {}
            return

        path = self._translations_dir / f"{self._translation}{TRANSLATION_SUFFIX}"
        try:
            self._strings = self._loader(path)
            logger.info("strings: loaded %d strings for %s", len(self._strings), self._translation)
        except (OSError, ET.ParseError) as e:
            logger.warning(
                "strings: failed to load translation %s, using English: %s",
                self._translation,
                e,
            )
            self._strings = {}
