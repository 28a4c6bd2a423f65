"""Desktop notices for failures the settings window cannot show.

Side effects such as the avatar cache clear finish after the settings
window has closed, so their failures are reported as a desktop
notification through plyer. A missing or broken plyer backend only
costs the notice; it is logged once and never raised.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

APP_NAME = "prefsync"
FAILURE_TITLE = f"{APP_NAME} - Settings"
MAX_MESSAGE_LENGTH = 100

_backend_warned = False


def _notifier():
    """Return plyer's notification facade, or None if it cannot be used."""
    global _backend_warned

    try:
        from plyer import notification

        _ = notification.notify
        return notification
    except Exception as e:
        if not _backend_warned:
            logger.warning(
                "notifications: desktop notices unavailable, error_type=%s",
                type(e).__name__,
            )
            _backend_warned = True
        return None


def describe_side_effect_failure(error: BaseException) -> str:
    """One-line notice text for a failed follow-up task.

    >>> describe_side_effect_failure(OSError("cache locked"))
    'Settings saved, but a follow-up task failed: cache locked'
    """
    detail = str(error) or type(error).__name__
    text = f"Settings saved, but a follow-up task failed: {detail}"
    return " ".join(text.split())[:MAX_MESSAGE_LENGTH]


def report_side_effect_failure(error: BaseException) -> bool:
    """Tell the user a background side effect failed after a commit.

    Args:
        error: Exception raised by the handler.

    Returns:
        True if a notice was shown, False otherwise.
    """
    notifier = _notifier()
    if notifier is None:
        return False

    try:
        notifier.notify(
            title=FAILURE_TITLE,
            message=describe_side_effect_failure(error),
            app_name=APP_NAME,
            timeout=5,
        )
    except Exception as e:
        logger.warning("notifications: notice failed, error_type=%s", type(e).__name__)
        return False

    logger.debug("notifications: side effect failure reported")
    return True
