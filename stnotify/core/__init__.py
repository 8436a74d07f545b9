"""Core event watching functionality."""

from .auth import ApiKeyAuth
from .client import SyncthingAPIError, SyncthingClient
from .dispatcher import EventDispatcher, compose_path
from .health import HealthCheckError, probe_health
from .notify import DesktopNotifier, LogNotifier, Notification, open_path
from .poller import EventPoller
from .resolver import FolderPathResolver

__all__ = [
    "ApiKeyAuth",
    "DesktopNotifier",
    "EventDispatcher",
    "EventPoller",
    "FolderPathResolver",
    "HealthCheckError",
    "LogNotifier",
    "Notification",
    "SyncthingAPIError",
    "SyncthingClient",
    "compose_path",
    "open_path",
    "probe_health",
]
