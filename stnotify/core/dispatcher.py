"""Routing of decoded events to notifications or logs."""

import logging
from pathlib import Path
from typing import Protocol

from ..models.events import Event, OtherEventData, RemoteChangeDetected, StateChanged
from .client import SyncthingAPIError
from .notify import Notification
from .resolver import FolderPathResolver

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...


def compose_path(root: Path, relative: str) -> Path:
    """Join a folder root with a folder-relative event path.

    Leading separators are stripped so the root is never discarded.
    """
    return Path(root) / relative.lstrip("/\\")


def summarize(change: RemoteChangeDetected) -> str:
    """Human-readable summary such as "File modified"."""
    return f"{change.change_type.value.capitalize()} {change.action.value}"


class EventDispatcher:
    """Applies the per-variant policy to each decoded event."""

    def __init__(self, resolver: FolderPathResolver, notifier: Notifier) -> None:
        """Initialize dispatcher.

        Args:
            resolver: Folder path resolver (owns the folder path cache)
            notifier: Receives notifications for file changes
        """
        self.resolver = resolver
        self.notifier = notifier

    def dispatch(self, event: Event) -> Notification | None:
        """Handle one event.

        Folder resolution failures are logged and skipped; they never
        propagate to the poll loop.

        Returns:
            The notification that was sent, if any
        """
        data = event.data

        if isinstance(data, RemoteChangeDetected):
            return self._on_remote_change(event, data)

        if isinstance(data, StateChanged):
            if data.duration is None:
                logger.info("Folder %s: %s -> %s", data.folder, data.from_state, data.to_state)
            else:
                logger.info(
                    "Folder %s: %s -> %s (%.3fs)",
                    data.folder,
                    data.from_state,
                    data.to_state,
                    data.duration,
                )
        elif isinstance(data, OtherEventData):
            logger.info("Event %d (%s): %r", event.id, data.type or "untyped", data.raw)

        return None

    def _on_remote_change(self, event: Event, change: RemoteChangeDetected) -> Notification | None:
        try:
            root = self.resolver.resolve(change.folder)
        except SyncthingAPIError as e:
            logger.error("Event %d: cannot resolve folder %s: %s", event.id, change.folder, e)
            return None

        path = compose_path(root, change.path)
        body = str(path)
        if change.label:
            body = f"{body}\n({change.label})"

        notification = Notification(summary=summarize(change), body=body, path=path)
        logger.info("%s: %s (by %s)", notification.summary, path, change.modified_by or "unknown")
        self.notifier.notify(notification)
        return notification
