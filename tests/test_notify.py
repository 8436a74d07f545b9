"""Tests for desktop notifications and the open action."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from stnotify.core import notify
from stnotify.core.notify import DesktopNotifier, LogNotifier, Notification, open_path

NOTIFICATION = Notification(
    summary="File modified",
    body="/home/u/Sync/docs/report.pdf",
    path=Path("/home/u/Sync/docs/report.pdf"),
)


@pytest.fixture
def linux() -> object:
    with patch.object(notify, "IS_MACOS", False), patch.object(notify, "IS_WINDOWS", False):
        yield


class TestDesktopNotifier:
    """Tests for DesktopNotifier on freedesktop platforms."""

    def test_default_action_opens_file(self, linux: object) -> None:
        opener = MagicMock()
        notifier = DesktopNotifier(app_name="stnotify", opener=opener, background=False)

        with patch("stnotify.core.notify.subprocess.run") as run:
            run.return_value = MagicMock(stdout="default\n")
            notifier.notify(NOTIFICATION)

        cmd = run.call_args.args[0]
        assert cmd[0] == "notify-send"
        assert "--wait" in cmd
        assert "--action=default=Open" in cmd
        assert cmd[-2:] == ["File modified", "/home/u/Sync/docs/report.pdf"]
        opener.assert_called_once_with(NOTIFICATION.path)

    def test_dismissed_does_not_open(self, linux: object) -> None:
        opener = MagicMock()
        notifier = DesktopNotifier(opener=opener, background=False)

        with patch("stnotify.core.notify.subprocess.run") as run:
            run.return_value = MagicMock(stdout="")
            notifier.notify(NOTIFICATION)

        opener.assert_not_called()

    def test_without_action(self, linux: object) -> None:
        notifier = DesktopNotifier(open_on_action=False, background=False)

        with patch("stnotify.core.notify.subprocess.run") as run:
            run.return_value = MagicMock(stdout="")
            notifier.notify(NOTIFICATION)

        cmd = run.call_args.args[0]
        assert "--wait" not in cmd

    def test_failure_is_logged(self, linux: object, caplog: pytest.LogCaptureFixture) -> None:
        notifier = DesktopNotifier(background=False)

        with patch("stnotify.core.notify.subprocess.run", side_effect=FileNotFoundError("notify-send")):
            notifier.notify(NOTIFICATION)

        assert "Desktop notification failed" in caplog.text

    def test_nonzero_exit_is_logged(self, linux: object, caplog: pytest.LogCaptureFixture) -> None:
        notifier = DesktopNotifier(background=False)
        error = subprocess.CalledProcessError(1, ["notify-send"])

        with patch("stnotify.core.notify.subprocess.run", side_effect=error):
            notifier.notify(NOTIFICATION)

        assert "Desktop notification failed" in caplog.text

    def test_background_thread(self, linux: object) -> None:
        notifier = DesktopNotifier()

        with patch("stnotify.core.notify.threading.Thread") as thread:
            notifier.notify(NOTIFICATION)

        assert thread.call_args.kwargs["daemon"] is True
        thread.return_value.start.assert_called_once()

    def test_visible_notifications_are_bounded(self, linux: object, caplog: pytest.LogCaptureFixture) -> None:
        notifier = DesktopNotifier(max_visible=3)

        with caplog.at_level("INFO"), patch("stnotify.core.notify.threading.Thread") as thread:
            for _ in range(300):
                notifier.notify(NOTIFICATION)

        assert thread.call_count == 3
        assert "Too many open notifications" in caplog.text

    def test_finished_notification_frees_slot(self, linux: object) -> None:
        notifier = DesktopNotifier(max_visible=1)

        with patch("stnotify.core.notify.threading.Thread") as thread:
            notifier.notify(NOTIFICATION)
            notifier.notify(NOTIFICATION)
            assert thread.call_count == 1

            with patch("stnotify.core.notify.subprocess.run") as run:
                run.return_value = MagicMock(stdout="")
                notifier._show_and_release(NOTIFICATION)

            notifier.notify(NOTIFICATION)
            assert thread.call_count == 2

    def test_failed_notification_frees_slot(self, linux: object) -> None:
        notifier = DesktopNotifier(max_visible=1)

        with patch("stnotify.core.notify.threading.Thread") as thread:
            notifier.notify(NOTIFICATION)
            with patch("stnotify.core.notify.subprocess.run", side_effect=FileNotFoundError("notify-send")):
                notifier._show_and_release(NOTIFICATION)
            notifier.notify(NOTIFICATION)

        assert thread.call_count == 2

    def test_thread_start_failure_is_logged(self, linux: object, caplog: pytest.LogCaptureFixture) -> None:
        notifier = DesktopNotifier(max_visible=1)

        with patch("stnotify.core.notify.threading.Thread") as thread:
            thread.return_value.start.side_effect = RuntimeError("can't start new thread")
            notifier.notify(NOTIFICATION)
            thread.return_value.start.side_effect = None
            notifier.notify(NOTIFICATION)

        assert "Could not start notification thread" in caplog.text
        assert thread.call_count == 2

    def test_macos_uses_osascript(self) -> None:
        notifier = DesktopNotifier(background=False)

        with patch.object(notify, "IS_MACOS", True), patch("stnotify.core.notify.subprocess.run") as run:
            notifier.notify(Notification(summary='Say "hi"', body="/tmp/x", path=Path("/tmp/x")))

        cmd = run.call_args.args[0]
        assert cmd[:2] == ["osascript", "-e"]
        assert '\\"hi\\"' in cmd[2]


class TestOpenPath:
    """Tests for open_path."""

    def test_uses_xdg_open(self, linux: object) -> None:
        with patch("stnotify.core.notify.subprocess.Popen") as popen:
            open_path(Path("/home/u/Sync/docs/report.pdf"))

        popen.assert_called_once_with(["xdg-open", "/home/u/Sync/docs/report.pdf"])

    def test_failure_is_logged(self, linux: object, caplog: pytest.LogCaptureFixture) -> None:
        with patch("stnotify.core.notify.subprocess.Popen", side_effect=FileNotFoundError("xdg-open")):
            open_path("/home/u/Sync/docs/report.pdf")

        assert "Could not open file" in caplog.text


class TestLogNotifier:
    """Tests for LogNotifier."""

    def test_logs_notification(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("INFO"):
            LogNotifier().notify(NOTIFICATION)

        assert "File modified" in caplog.text
