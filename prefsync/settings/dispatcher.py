"""Side-effect dispatcher for settings commits.

Provides a single point for:
- Registering invalidation handlers (e.g. the avatar cache clear)
- Running them after a commit, off the committing thread

Each handler runs at most once per commit, however many of the options
watching it changed. Handler failures are logged and reported but never
fail the commit.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable

from prefsync import notifications
from prefsync.options import InvalidationFlags
from prefsync.settings.committer import CommitResult

logger = logging.getLogger(__name__)


class SideEffectDispatcher:
    """Runs registered handlers for the invalidations a commit reports.

    Example:
        >>> dispatcher = SideEffectDispatcher()
        >>> dispatcher.register_handler(InvalidationFlags.AVATAR_CACHE, avatar_cache.clear)
        >>> futures = dispatcher.dispatch(commit_result)  # returns immediately
    """

    def __init__(self, executor: Executor | None = None) -> None:
        """Initialize the dispatcher.

        Args:
            executor: Optional executor for handlers (injectable for testing).
        """
        self._handlers: dict[InvalidationFlags, list[Callable[[], None]]] = {}
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="settings-side-effects",
        )
        self._owns_executor = executor is None  # Only shutdown if we created it

    @property
    def executor(self) -> Executor:
        return self._executor

    def register_handler(
        self,
        flags: InvalidationFlags,
        handler: Callable[[], None],
    ) -> None:
        """Register a handler for the given invalidation flags.

        Args:
            flags: Invalidation flags to respond to.
            handler: Callable to invoke when a matching invalidation fires.
        """
        for flag in InvalidationFlags:
            if flag in flags and flag != InvalidationFlags.NONE:
                self._handlers.setdefault(flag, []).append(handler)
                logger.debug(
                    "dispatcher: registered handler for %s",
                    flag.name,
                )

    def dispatch(self, result: CommitResult) -> list[Future]:
        """Start the handlers a commit requires.

        Args:
            result: Result of the commit.

        Returns:
            Futures of the started handlers; empty if nothing changed.
        """
        if result.invalidated == InvalidationFlags.NONE:
            logger.debug("dispatcher: nothing to invalidate")
            return []
        return self.trigger(result.invalidated)

    def trigger(self, flags: InvalidationFlags) -> list[Future]:
        """Start every handler registered for flags, once each.

        Args:
            flags: Invalidations to fire.

        Returns:
            Futures of the started handlers.
        """
        handlers: list[Callable[[], None]] = []
        for flag in InvalidationFlags:
            if flag in flags and flag in self._handlers:
                for handler in self._handlers[flag]:
                    if handler not in handlers:
                        handlers.append(handler)

        futures = []
        for handler in handlers:
            future = self._executor.submit(handler)
            future.add_done_callback(self._on_handler_done)
            futures.append(future)

        logger.info("dispatcher: started %d handler(s) for %s", len(futures), flags)
        return futures

    @staticmethod
    def _on_handler_done(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is None:
            return
        logger.error(
            "dispatcher: handler failed, error_type=%s, error=%s",
            type(error).__name__,
            error,
        )
        notifications.report_side_effect_failure(error)

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the executor if the dispatcher created it.

        Args:
            wait: Wait for in-flight handlers to finish.
        """
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
            logger.info("dispatcher: executor shutdown complete")
