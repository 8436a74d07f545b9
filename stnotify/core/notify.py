"""Desktop notifications and the "open file" action.

On Linux, ``notify-send --wait`` shows the notification with a default
action and reports on stdout whether the user invoked it. On macOS the
notification is shown through ``osascript`` without an action. Elsewhere
notifications are only logged.
"""

import logging
import os
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

IS_WINDOWS: bool = sys.platform == "win32"
IS_MACOS: bool = sys.platform == "darwin"

DEFAULT_ACTION = "default"


@dataclass
class Notification:
    """What the user sees, and the file the default action opens."""

    summary: str
    body: str
    path: Path


def open_path(path: str | Path) -> None:
    """Open a file with the OS default application.

    Failures are logged, never raised.
    """
    fp = str(path)
    try:
        if IS_WINDOWS:
            os.startfile(fp)  # type: ignore[attr-defined]
        elif IS_MACOS:
            subprocess.Popen(["open", fp])
        else:
            subprocess.Popen(["xdg-open", fp])
    except OSError:
        logger.warning("Could not open file: %s", fp, exc_info=True)


class DesktopNotifier:
    """Shows notifications and opens the file when the user clicks them.

    Each notification is shown on its own daemon thread, since waiting for
    the user's action would otherwise block the caller. At most
    ``max_visible`` notifications are on screen at once; further ones are
    logged instead of shown until a slot frees up.
    """

    def __init__(
        self,
        app_name: str = "stnotify",
        open_on_action: bool = True,
        opener: Callable[[Path], None] = open_path,
        background: bool = True,
        max_visible: int = 8,
    ) -> None:
        self.app_name = app_name
        self.open_on_action = open_on_action
        self.opener = opener
        self.background = background
        self.max_visible = max_visible
        self._slots = threading.BoundedSemaphore(max_visible)

    def notify(self, notification: Notification) -> None:
        """Present a notification without blocking."""
        if not self.background:
            self._show(notification)
            return

        if not self._slots.acquire(blocking=False):
            logger.info("Too many open notifications, not shown: %s: %s", notification.summary, notification.body)
            return

        try:
            threading.Thread(
                target=self._show_and_release,
                args=(notification,),
                daemon=True,
                name="Notify",
            ).start()
        except RuntimeError:
            self._slots.release()
            logger.warning("Could not start notification thread: %s", notification.summary, exc_info=True)

    def _show_and_release(self, notification: Notification) -> None:
        try:
            self._show(notification)
        finally:
            self._slots.release()

    def _show(self, notification: Notification) -> None:
        try:
            if IS_MACOS:
                self._show_macos(notification)
            elif IS_WINDOWS:
                logger.info("%s: %s", notification.summary, notification.body)
            else:
                self._show_freedesktop(notification)
        except (OSError, subprocess.SubprocessError):
            logger.warning("Desktop notification failed: %s", notification.summary, exc_info=True)

    def _show_freedesktop(self, notification: Notification) -> None:
        cmd = [
            "notify-send",
            f"--app-name={self.app_name}",
            notification.summary,
            notification.body,
        ]
        if self.open_on_action:
            cmd[1:1] = ["--wait", f"--action={DEFAULT_ACTION}=Open"]

        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        if self.open_on_action and result.stdout.strip() == DEFAULT_ACTION:
            logger.debug("Notification action invoked for %s", notification.path)
            self.opener(notification.path)

    def _show_macos(self, notification: Notification) -> None:
        script = "display notification {} with title {} subtitle {}".format(
            _applescript_string(notification.body),
            _applescript_string(self.app_name),
            _applescript_string(notification.summary),
        )
        subprocess.run(
            ["osascript", "-e", script],
            timeout=15,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
        )


class LogNotifier:
    """Notifier used when desktop notifications are disabled."""

    def notify(self, notification: Notification) -> None:
        logger.info("%s: %s", notification.summary, notification.body)


def _applescript_string(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
