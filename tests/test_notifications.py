"""Tests for the notifications module."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest


@pytest.fixture
def plyer_notification(mocker):
    """Replace plyer's notification facade."""
    mock_notification = MagicMock()
    mocker.patch("plyer.notification", mock_notification)
    return mock_notification


class TestReportSideEffectFailure:
    """Tests for report_side_effect_failure."""

    def test_notice_shown(self, plyer_notification):
        from prefsync.notifications import report_side_effect_failure

        result = report_side_effect_failure(OSError("cache locked"))

        assert result is True
        plyer_notification.notify.assert_called_once_with(
            title="prefsync - Settings",
            message="Settings saved, but a follow-up task failed: cache locked",
            app_name="prefsync",
            timeout=5,
        )

    def test_backend_error_returns_false(self, plyer_notification):
        """Test that a failing notification backend is swallowed."""
        plyer_notification.notify.side_effect = Exception("no dbus")

        from prefsync.notifications import report_side_effect_failure

        assert report_side_effect_failure(OSError("cache locked")) is False

    def test_backend_unavailable(self, mocker):
        mocker.patch("prefsync.notifications._notifier", return_value=None)

        from prefsync.notifications import report_side_effect_failure

        assert report_side_effect_failure(OSError("cache locked")) is False


class TestDescribeSideEffectFailure:
    """Tests for the notice text."""

    def test_multiline_error_is_one_short_line(self):
        from prefsync.notifications import MAX_MESSAGE_LENGTH, describe_side_effect_failure

        text = describe_side_effect_failure(OSError("line one\r\nline two" + "x" * 200))

        assert "\n" not in text
        assert "\r" not in text
        assert "line one line two" in text
        assert len(text) <= MAX_MESSAGE_LENGTH

    def test_error_without_message_uses_type(self):
        from prefsync.notifications import describe_side_effect_failure

        assert describe_side_effect_failure(PermissionError()).endswith("PermissionError")
