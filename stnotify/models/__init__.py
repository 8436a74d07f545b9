"""Data models for the event watcher."""

from .config import (
    ConfigError,
    NotifySettings,
    PollSettings,
    WatchConfig,
)
from .events import (
    Action,
    ChangeType,
    Event,
    EventData,
    EventDecodeError,
    OtherEventData,
    RemoteChangeDetected,
    StateChanged,
    decode_event,
    decode_events,
)

__all__ = [
    "Action",
    "ChangeType",
    "ConfigError",
    "Event",
    "EventData",
    "EventDecodeError",
    "NotifySettings",
    "OtherEventData",
    "PollSettings",
    "RemoteChangeDetected",
    "StateChanged",
    "WatchConfig",
    "decode_event",
    "decode_events",
]
