"""Tests for file-backed choice sources."""

from __future__ import annotations

import pytest

from prefsync.choices import (
    DICTIONARY_SUFFIX,
    NO_SELECTION,
    DirectoryTranslationCatalog,
    DirectoryUnavailable,
    FileSystemDirectoryLister,
    is_sentinel,
    resolve_file_backed_choices,
)
from tests.helpers import FakeDirectoryLister


class TestResolveFileBackedChoices:
    """Tests for resolve_file_backed_choices."""

    def test_sentinel_first_and_suffix_stripped(self, dictionary_lister, tmp_path):
        """Test that names are derived from files, after the sentinel."""
        result = resolve_file_backed_choices(dictionary_lister, tmp_path, DICTIONARY_SUFFIX, "none")

        assert result.names == (NO_SELECTION, "de-DE", "en-US")

    @pytest.mark.parametrize("stored", ["none", "None", "NONE", None])
    def test_none_selects_sentinel(self, dictionary_lister, tmp_path, stored):
        """Test that "none" in any case selects the sentinel."""
        result = resolve_file_backed_choices(dictionary_lister, tmp_path, DICTIONARY_SUFFIX, stored)

        assert result.selected_index == 0
        assert result.selected is NO_SELECTION

    def test_existing_file_is_selected(self, dictionary_lister, tmp_path):
        """Test that a stored name with a matching file is selected."""
        result = resolve_file_backed_choices(dictionary_lister, tmp_path, DICTIONARY_SUFFIX, "en-US")

        assert result.selected_index == 2
        assert result.selected == "en-US"
        assert result.warning is None

    def test_stale_reference_falls_back_to_sentinel(self, dictionary_lister, tmp_path):
        """Test that a removed dictionary silently resets to none."""
        result = resolve_file_backed_choices(dictionary_lister, tmp_path, DICTIONARY_SUFFIX, "fr-FR")

        assert result.selected_index == 0
        assert result.warning is None

    def test_directory_unavailable_yields_sentinel_only(self, tmp_path):
        """Test that a failing lister never propagates."""
        lister = FakeDirectoryLister(["en-US.dic"], unavailable=True)

        result = resolve_file_backed_choices(lister, tmp_path, DICTIONARY_SUFFIX, "en-US")

        assert result.names == (NO_SELECTION,)
        assert result.selected_index == 0
        assert str(tmp_path) in result.warning
        assert "dictionary" in result.warning

    def test_rescan_sees_new_files(self, tmp_path):
        """Test that nothing is cached between calls."""
        lister = FakeDirectoryLister(["en-US.dic"])
        first = resolve_file_backed_choices(lister, tmp_path, DICTIONARY_SUFFIX, "de-DE")
        lister.files.append("de-DE.dic")
        second = resolve_file_backed_choices(lister, tmp_path, DICTIONARY_SUFFIX, "de-DE")

        assert first.selected_index == 0
        assert second.selected == "de-DE"
        assert len(lister.calls) == 2


class TestFileSystemDirectoryLister:
    """Tests for the pathlib lister."""

    def test_lists_matching_files_sorted(self, dictionary_dir):
        """Test that only matching files are listed, in name order."""
        names = FileSystemDirectoryLister().list_files(dictionary_dir, ".dic")

        assert names == ["de-DE.dic", "en-US.dic"]

    def test_skips_subdirectories(self, dictionary_dir):
        """Test that a directory named like a dictionary is ignored."""
        (dictionary_dir / "nested.dic").mkdir()

        names = FileSystemDirectoryLister().list_files(dictionary_dir, ".dic")

        assert "nested.dic" not in names

    def test_missing_directory_raises(self, tmp_path):
        """Test that a missing directory raises DirectoryUnavailable."""
        with pytest.raises(DirectoryUnavailable) as exc_info:
            FileSystemDirectoryLister().list_files(tmp_path / "missing", ".dic")

        assert exc_info.value.directory == tmp_path / "missing"

    def test_unreadable_directory_raises(self, tmp_path, mocker):
        """Test that listing errors become DirectoryUnavailable."""
        mocker.patch("pathlib.Path.iterdir", side_effect=PermissionError(13, "Permission denied"))

        with pytest.raises(DirectoryUnavailable):
            FileSystemDirectoryLister().list_files(tmp_path, ".dic")

    def test_end_to_end_with_resolver(self, dictionary_dir):
        """Test resolving against a real directory."""
        result = resolve_file_backed_choices(
            FileSystemDirectoryLister(), dictionary_dir, DICTIONARY_SUFFIX, "de-DE"
        )

        assert result.names == (NO_SELECTION, "de-DE", "en-US")
        assert result.selected == "de-DE"

    def test_uppercase_suffix_selection_survives_reload(self, tmp_path):
        """Test that a dictionary offered from an upper-case .DIC file is found again."""
        (tmp_path / "en_US.DIC").write_text("")
        lister = FileSystemDirectoryLister()

        offered = resolve_file_backed_choices(lister, tmp_path, DICTIONARY_SUFFIX, "none")
        stored = offered.names[1]
        reloaded = resolve_file_backed_choices(lister, tmp_path, DICTIONARY_SUFFIX, stored)

        assert offered.names == (NO_SELECTION, "en_US")
        assert reloaded.selected_index == 1
        assert reloaded.selected == "en_US"


class TestIsSentinel:
    """Tests for is_sentinel."""

    @pytest.mark.parametrize("value", [None, "none", "None", " NONE "])
    def test_sentinel_values(self, value):
        assert is_sentinel(value) is True

    @pytest.mark.parametrize("value", ["", "en-US", "nonexistent"])
    def test_non_sentinel_values(self, value):
        assert is_sentinel(value) is False


class TestDirectoryTranslationCatalog:
    """Tests for DirectoryTranslationCatalog."""

    def test_lists_translations_without_english(self, tmp_path):
        """Test that English is never listed as an installed translation."""
        for name in ("German.xlf", "English.xlf", "Japanese.xlf", "notes.txt"):
            (tmp_path / name).write_text("")

        catalog = DirectoryTranslationCatalog(tmp_path)

        assert catalog.list_available_translations() == ["German", "Japanese"]

    def test_missing_directory_degrades_to_empty(self, tmp_path):
        """Test that a missing directory yields no translations."""
        catalog = DirectoryTranslationCatalog(tmp_path / "missing")

        assert catalog.list_available_translations() == []

    def test_translation_path(self, tmp_path):
        catalog = DirectoryTranslationCatalog(tmp_path)

        assert catalog.translation_path("German") == tmp_path / "German.xlf"
