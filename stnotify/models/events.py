"""Event models for the Syncthing event feed.

Each envelope carries a ``type`` tag and a ``data`` payload. Two payload
variants are modelled; everything else decodes to :class:`OtherEventData` so
that a new or unexpected event type never blocks the rest of a batch.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

logger = logging.getLogger(__name__)

REMOTE_CHANGE_DETECTED = "RemoteChangeDetected"
STATE_CHANGED = "StateChanged"


class EventDecodeError(ValueError):
    """Raised when an event envelope or batch cannot be decoded."""


class ChangeType(Enum):
    """Kind of item a remote change refers to."""

    FILE = "file"


class Action(Enum):
    """What happened to the item."""

    DELETED = "deleted"
    MODIFIED = "modified"


@dataclass
class RemoteChangeDetected:
    """A single file changed locally because of a remote device."""

    change_type: ChangeType
    action: Action
    folder: str  # Folder ID, not the label
    path: str  # Relative to the folder root
    label: str
    modified_by: str  # Short device ID of the originating peer

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RemoteChangeDetected":
        """Create from the event payload.

        The legacy ``folderID`` key duplicates ``folder`` and is ignored.
        """
        return cls(
            change_type=ChangeType(data["type"]),
            action=Action(data["action"]),
            folder=_require_str(data, "folder"),
            path=_require_str(data, "path"),
            label=data.get("label") or "",
            modified_by=data.get("modifiedBy") or "",
        )


@dataclass
class StateChanged:
    """A folder moved between sync states (idle, scanning, syncing, ...)."""

    folder: str
    from_state: str
    to_state: str
    duration: float | None = None  # Seconds spent in from_state

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "StateChanged":
        """Create from the event payload."""
        duration = data.get("duration")
        return cls(
            folder=_require_str(data, "folder"),
            from_state=data.get("from") or "",
            to_state=data.get("to") or "",
            duration=float(duration) if duration is not None else None,
        )


@dataclass
class OtherEventData:
    """Pass-through payload for event types this client does not model."""

    type: str
    raw: Any


EventData = Union[RemoteChangeDetected, StateChanged, OtherEventData]

_VARIANTS = {
    REMOTE_CHANGE_DETECTED: RemoteChangeDetected,
    STATE_CHANGED: StateChanged,
}


@dataclass
class Event:
    """An item of the event feed."""

    id: int
    global_id: int
    time: str
    type: str
    data: EventData

    @classmethod
    def from_dict(cls, raw: Any) -> "Event":
        """Create from a raw envelope; see :func:`decode_event`."""
        return decode_event(raw)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


def decode_data(event_type: str, payload: Any) -> EventData:
    """Decode the ``data`` payload for a given event type.

    Unknown types, and known types whose payload does not fit the model,
    become :class:`OtherEventData` carrying the raw payload.
    """
    variant = _VARIANTS.get(event_type)
    if variant is None:
        return OtherEventData(type=event_type, raw=payload)

    if not isinstance(payload, dict):
        logger.debug("%s payload is not an object: %r", event_type, payload)
        return OtherEventData(type=event_type, raw=payload)

    try:
        return variant.from_dict(payload)
    except (KeyError, TypeError, ValueError) as e:
        logger.debug("Passing through unrecognised %s payload (%s): %r", event_type, e, payload)
        return OtherEventData(type=event_type, raw=payload)


def decode_event(raw: Any) -> Event:
    """Decode one event envelope.

    Raises:
        EventDecodeError: If the envelope is not an object or has no integer id
    """
    if not isinstance(raw, dict):
        raise EventDecodeError(f"Event envelope must be an object, got {type(raw).__name__}")

    event_id = raw.get("id")
    # bool is an int subclass
    if not isinstance(event_id, int) or isinstance(event_id, bool):
        raise EventDecodeError(f"Event envelope has no integer id: {raw!r}")

    global_id = raw.get("globalID", 0)
    if not isinstance(global_id, int) or isinstance(global_id, bool):
        raise EventDecodeError(f"Event {event_id} has a non-integer globalID: {global_id!r}")

    event_type = raw.get("type")
    if not isinstance(event_type, str):
        event_type = ""

    return Event(
        id=event_id,
        global_id=global_id,
        time=str(raw.get("time") or ""),
        type=event_type,
        data=decode_data(event_type, raw.get("data")),
    )


def decode_events(raw: Any) -> list[Event]:
    """Decode a whole poll response.

    Raises:
        EventDecodeError: If the response is not a list or any envelope is malformed
    """
    if not isinstance(raw, list):
        raise EventDecodeError(f"Event batch must be a list, got {type(raw).__name__}")
    return [decode_event(item) for item in raw]
