#!/usr/bin/env python3
"""CLI entry point for the Syncthing change notifier."""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .core.auth import ApiKeyAuth
from .core.client import SyncthingAPIError, SyncthingClient
from .core.dispatcher import EventDispatcher
from .core.health import HealthCheckError, probe_health
from .core.notify import DesktopNotifier, LogNotifier
from .core.poller import EventPoller
from .core.resolver import FolderPathResolver
from .logging_setup import setup_logging
from .models.config import ConfigError, WatchConfig
from .models.events import (
    EventDecodeError,
    OtherEventData,
    RemoteChangeDetected,
    StateChanged,
    decode_events,
)

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path("stnotify.yaml")


def load_config(args: argparse.Namespace) -> WatchConfig:
    """Load the YAML config and apply command line overrides."""
    config = WatchConfig.load(Path(args.config))
    if args.url:
        config.base_url = args.url
    if args.verbose:
        config.log_level = "debug"
    return config


def make_client(config: WatchConfig) -> SyncthingClient:
    """Create a client; raises ValueError on missing key or bad URL."""
    return SyncthingClient(ApiKeyAuth(base_url=config.base_url))


def cmd_health(args: argparse.Namespace, config: WatchConfig) -> int:
    """Check the daemon's health endpoint."""
    try:
        client = make_client(config)
        status = probe_health(client)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}")
        return 1
    except HealthCheckError as e:
        console.print(f"[red]{e}")
        return 1

    console.print(f"[green]{client.auth.base_url} is healthy ({status})")
    return 0


def cmd_watch(args: argparse.Namespace, config: WatchConfig) -> int:
    """Watch the event feed and notify about remote changes."""
    try:
        client = make_client(config)
        status = probe_health(client)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}")
        return 1
    except HealthCheckError as e:
        console.print(f"[red]{e}")
        return 1

    logger.info("Connected to %s (%s), key %s", client.auth.base_url, status, client.auth.masked_key())

    if config.notify.enabled:
        notifier = DesktopNotifier(
            app_name=config.notify.app_name,
            open_on_action=config.notify.open_on_action,
            max_visible=config.notify.max_visible,
        )
    else:
        notifier = LogNotifier()

    dispatcher = EventDispatcher(FolderPathResolver(client), notifier)
    poller = EventPoller(client, dispatcher, config.events, config.poll)

    try:
        poller.run()
    except SyncthingAPIError as e:
        logger.error("Stopped watching: %s", e)
        return 1
    except EventDecodeError as e:
        logger.error("Malformed event batch after id %d: %s", poller.last_id, e)
        return 1

    return 0


def cmd_events(args: argparse.Namespace, config: WatchConfig) -> int:
    """Fetch events once and show them as a table."""
    try:
        client = make_client(config)
        raw = client.get_events(
            since=args.since,
            events=config.events,
            limit=args.limit,
            server_timeout=args.timeout,
        )
        batch = decode_events(raw)
    except ValueError as e:
        # EventDecodeError is a ValueError too
        console.print(f"[red]Error: {e}")
        return 1
    except SyncthingAPIError as e:
        console.print(f"[red]Failed to fetch events: {e}")
        return 1

    if not batch:
        console.print("[yellow]No events.")
        return 0

    table = Table(title=f"Events since {args.since}")
    table.add_column("ID", justify="right")
    table.add_column("Time")
    table.add_column("Type")
    table.add_column("Details")

    for event in batch:
        data = event.data
        if isinstance(data, RemoteChangeDetected):
            details = f"{data.action.value} {data.label or data.folder}/{data.path}"
        elif isinstance(data, StateChanged):
            details = f"{data.folder}: {data.from_state} -> {data.to_state}"
        elif isinstance(data, OtherEventData):
            details = repr(data.raw)[:80]
        else:
            details = ""
        table.add_row(str(event.id), event.time, event.type, details)

    console.print(table)
    return 0


def cmd_folder(args: argparse.Namespace, config: WatchConfig) -> int:
    """Resolve a folder ID to its local path."""
    try:
        client = make_client(config)
        path = FolderPathResolver(client).resolve(args.folder_id)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}")
        return 1
    except SyncthingAPIError as e:
        console.print(f"[red]Failed to resolve folder: {e}")
        return 1

    console.print(f"[bold]{args.folder_id}[/bold]: {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="stnotify",
        description="Desktop notifications for files changed by Syncthing peers",
    )
    parser.add_argument("--config", default=str(DEFAULT_CONFIG), help="YAML config file (default: ./stnotify.yaml)")
    parser.add_argument("--url", help="Syncthing GUI/REST address (default: $SYNCTHING_URL or localhost:8384)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command to run (default: watch)")

    # watch command
    subparsers.add_parser("watch", help="Watch the event feed and notify about changes")

    # health command
    subparsers.add_parser("health", help="Check that the daemon is reachable and healthy")

    # events command
    events_parser = subparsers.add_parser("events", help="Show events once")
    events_parser.add_argument("--since", type=int, default=0, help="Show events after this id")
    events_parser.add_argument("--limit", type=int, help="Only the most recent N events")
    events_parser.add_argument("--timeout", type=int, default=1, help="Server-side wait in seconds (default: 1)")

    # folder command
    folder_parser = subparsers.add_parser("folder", help="Resolve a folder ID to its local path")
    folder_parser.add_argument("folder_id", help="Folder ID")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as e:
        console.print(f"[red]Config error: {e}")
        return 1

    setup_logging(config.log_level)  # type: ignore[arg-type]

    command = args.command or "watch"
    try:
        if command == "watch":
            return cmd_watch(args, config)
        elif command == "health":
            return cmd_health(args, config)
        elif command == "events":
            return cmd_events(args, config)
        elif command == "folder":
            return cmd_folder(args, config)
    except KeyboardInterrupt:
        console.print("\nInterrupted.")
        return 130

    parser.print_help()
    return 1


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
