"""Configuration models for the event watcher."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .events import REMOTE_CHANGE_DETECTED, STATE_CHANGED


class ConfigError(ValueError):
    """Raised for invalid configuration values."""


def _number(data: dict[str, Any], key: str, default: float, minimum: float = 0.0) -> float:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{key} must be a number, got {value!r}")
    if value < minimum:
        raise ConfigError(f"{key} must be >= {minimum}, got {value!r}")
    return float(value)


def _integer(data: dict[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"{key} must be a non-negative integer, got {value!r}")
    return value


def _positive(data: dict[str, Any], key: str, default: int) -> int:
    value = _integer(data, key, default)
    if value == 0:
        raise ConfigError(f"{key} must be at least 1")
    return value


@dataclass
class PollSettings:
    """Poll loop pacing and retry settings."""

    min_interval: float = 1.0  # Seconds between the start of consecutive polls
    long_poll_timeout: int | None = 60  # Server-side wait when no events are pending
    bootstrap_timeout: int = 1  # Server-side wait for the initial last-id request
    backoff_initial: float = 1.0
    backoff_factor: float = 2.0
    backoff_max: float = 60.0
    max_consecutive_errors: int = 0  # 0 retries forever

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PollSettings":
        """Create from dictionary."""
        long_poll = data.get("long_poll_timeout", 60)
        if long_poll is not None:
            long_poll = _integer(data, "long_poll_timeout", 60)
        return cls(
            min_interval=_number(data, "min_interval", 1.0),
            long_poll_timeout=long_poll,
            bootstrap_timeout=_integer(data, "bootstrap_timeout", 1),
            backoff_initial=_number(data, "backoff_initial", 1.0),
            backoff_factor=_number(data, "backoff_factor", 2.0, minimum=1.0),
            backoff_max=_number(data, "backoff_max", 60.0),
            max_consecutive_errors=_integer(data, "max_consecutive_errors", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return {
            "min_interval": self.min_interval,
            "long_poll_timeout": self.long_poll_timeout,
            "bootstrap_timeout": self.bootstrap_timeout,
            "backoff_initial": self.backoff_initial,
            "backoff_factor": self.backoff_factor,
            "backoff_max": self.backoff_max,
            "max_consecutive_errors": self.max_consecutive_errors,
        }


@dataclass
class NotifySettings:
    """Desktop notification settings."""

    enabled: bool = True
    app_name: str = "stnotify"
    open_on_action: bool = True  # Open the file when the notification is clicked
    max_visible: int = 8  # Notifications on screen at once

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NotifySettings":
        """Create from dictionary."""
        return cls(
            enabled=bool(data.get("enabled", True)),
            app_name=str(data.get("app_name", "stnotify")),
            open_on_action=bool(data.get("open_on_action", True)),
            max_visible=_positive(data, "max_visible", 8),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for YAML serialization."""
        return {
            "enabled": self.enabled,
            "app_name": self.app_name,
            "open_on_action": self.open_on_action,
            "max_visible": self.max_visible,
        }


def default_event_types() -> list[str]:
    """Event types requested from the server by default."""
    return [REMOTE_CHANGE_DETECTED, STATE_CHANGED]


@dataclass
class WatchConfig:
    """Main configuration for the watcher.

    The API key is never stored here; it comes from the environment.
    """

    base_url: str | None = None  # Falls back to SYNCTHING_URL, then localhost
    events: list[str] = field(default_factory=default_event_types)
    poll: PollSettings = field(default_factory=PollSettings)
    notify: NotifySettings = field(default_factory=NotifySettings)
    log_level: str = "info"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WatchConfig":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a mapping")

        events = data.get("events") or default_event_types()
        if not isinstance(events, list) or not all(isinstance(e, str) for e in events):
            raise ConfigError(f"events must be a list of event type names, got {events!r}")

        log_level = str(data.get("log_level", "info")).lower()
        if log_level not in ("debug", "info", "warning", "error"):
            raise ConfigError(f"Unknown log_level: {log_level!r}")

        return cls(
            base_url=data.get("base_url"),
            events=events,
            poll=PollSettings.from_dict(data.get("poll") or {}),
            notify=NotifySettings.from_dict(data.get("notify") or {}),
            log_level=log_level,
        )

    @classmethod
    def load(cls, config_path: Path) -> "WatchConfig":
        """Load configuration from YAML file, or defaults if it does not exist."""
        config_path = Path(config_path)
        if not config_path.exists():
            return cls()

        with open(config_path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        return cls.from_dict(data)

    def save(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        data: dict[str, Any] = {}

        if self.base_url:
            data["base_url"] = self.base_url

        data["events"] = list(self.events)
        data["poll"] = self.poll.to_dict()
        data["notify"] = self.notify.to_dict()
        data["log_level"] = self.log_level

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
