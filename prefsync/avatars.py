"""Avatar image cache for prefsync.

The cache is a directory of downloaded avatar images. Clearing it is
all-or-nothing from the caller's point of view: the directory is first
renamed aside in a single step, then deleted.
"""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path

logger = logging.getLogger(__name__)


class AvatarCacheError(Exception):
    """Raised when the avatar cache cannot be cleared."""


class AvatarCache:
    """On-disk avatar image cache.

    Example:
        >>> cache = AvatarCache(Path("~/.config/prefsync/Images").expanduser())
        >>> dispatcher.register_handler(InvalidationFlags.AVATAR_CACHE, cache.clear)
    """

    def __init__(self, cache_dir: Path) -> None:
        self._cache_dir = Path(cache_dir)

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def image_count(self) -> int:
        """Count cached files.

        Returns:
            Number of files in the cache, 0 if the cache does not exist.
        """
        if not self._cache_dir.is_dir():
            return 0
        return sum(1 for entry in self._cache_dir.iterdir() if entry.is_file())

    def clear(self) -> None:
        """Remove every cached image.

        Idempotent: clearing an absent cache is a no-op.

        Raises:
            AvatarCacheError: If the cache could not be moved aside. The
                cache is then left untouched.
        """
        if not self._cache_dir.exists():
            logger.debug("avatar_cache: nothing to clear at %s", self._cache_dir)
            return

        doomed = self._cache_dir.with_name(f".{self._cache_dir.name}-{uuid.uuid4().hex}")
        try:
            self._cache_dir.rename(doomed)
        except OSError as e:
            logger.error("avatar_cache: failed to clear %s: %s", self._cache_dir, e)
            raise AvatarCacheError(f"Failed to clear avatar cache: {e}") from e

        # The cache is already empty for readers; leftovers are only disk space
        shutil.rmtree(doomed, ignore_errors=True)
        logger.info("avatar_cache: cleared %s", self._cache_dir)
