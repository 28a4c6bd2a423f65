"""Tests for the avatar image cache."""

from __future__ import annotations

import pytest

from prefsync.avatars import AvatarCache, AvatarCacheError


@pytest.fixture
def cache_dir(tmp_path):
    """Cache directory with a few images."""
    directory = tmp_path / "Images"
    directory.mkdir()
    for name in ("a.png", "b.png", "c.png"):
        (directory / name).write_bytes(b"\x89PNG")
    return directory


class TestAvatarCache:
    """Tests for AvatarCache."""

    def test_image_count(self, cache_dir):
        assert AvatarCache(cache_dir).image_count() == 3

    def test_image_count_missing_dir(self, tmp_path):
        assert AvatarCache(tmp_path / "missing").image_count() == 0

    def test_clear_removes_everything(self, cache_dir):
        cache = AvatarCache(cache_dir)

        cache.clear()

        assert not cache_dir.exists()
        assert cache.image_count() == 0
        # Nothing left behind next to the cache
        assert list(cache_dir.parent.iterdir()) == []

    def test_clear_is_idempotent(self, cache_dir):
        cache = AvatarCache(cache_dir)

        cache.clear()
        cache.clear()

        assert not cache_dir.exists()

    def test_clear_failure_leaves_cache(self, cache_dir, mocker):
        """Test that a failed move raises and leaves the images in place."""
        mocker.patch("pathlib.Path.rename", side_effect=PermissionError("in use"))
        cache = AvatarCache(cache_dir)

        with pytest.raises(AvatarCacheError):
            cache.clear()

        assert cache.image_count() == 3
