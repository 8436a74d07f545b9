"""Resumable polling of the event feed.

The poller owns a single piece of state, the watermark ``last_id``: the id
of the last event handed to the dispatcher. Each poll asks for events
``since`` the watermark, so delivery resumes exactly where the previous
batch ended. Side effects are at-most-once: the watermark advances past an
event even when its dispatch did nothing.
"""

import logging
import time
from typing import Callable

from ..models.config import PollSettings
from ..models.events import Event, decode_events
from .client import SyncthingAPIError, SyncthingClient
from .dispatcher import EventDispatcher

logger = logging.getLogger(__name__)

# Extra HTTP time on top of the server-side wait of the bootstrap request
BOOTSTRAP_GRACE = 5.0


class EventPoller:
    """Polls the event feed and feeds each event to the dispatcher in order."""

    def __init__(
        self,
        client: SyncthingClient,
        dispatcher: EventDispatcher,
        events: list[str],
        settings: PollSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize poller.

        Args:
            client: REST client
            dispatcher: Receives every decoded event
            events: Event type names requested from the server
            settings: Pacing and backoff settings
            sleep: Sleep function (injectable for tests)
            clock: Monotonic clock (injectable for tests)
        """
        self.client = client
        self.dispatcher = dispatcher
        self.events = list(events)
        self.settings = settings or PollSettings()
        self._sleep = sleep
        self._clock = clock
        self.last_id = 0

    def bootstrap(self) -> int:
        """Start the watermark at the most recent event.

        If the feed is empty or the request fails, the watermark stays at 0
        and the first poll returns the full backlog.

        Returns:
            The initial watermark
        """
        try:
            raw = self.client.get_events(
                since=0,
                events=self.events,
                limit=1,
                server_timeout=self.settings.bootstrap_timeout,
                timeout=self.settings.bootstrap_timeout + BOOTSTRAP_GRACE,
            )
        except SyncthingAPIError as e:
            logger.warning("Could not fetch last event id, starting from 0: %s", e)
            return self.last_id

        batch = decode_events(raw)
        if batch:
            self._advance(batch[-1].id)
        logger.info("Starting after event id %d", self.last_id)
        return self.last_id

    def poll_once(self) -> list[Event]:
        """Fetch one batch, dispatch it and advance the watermark.

        Returns:
            The decoded batch (may be empty)

        Raises:
            SyncthingAPIError: On transport errors; the watermark is unchanged
            EventDecodeError: If the batch is malformed; the watermark is unchanged
        """
        raw = self.client.get_events(
            since=self.last_id,
            events=self.events,
            server_timeout=self.settings.long_poll_timeout,
        )
        batch = decode_events(raw)
        logger.debug("Received %d event(s) since %d", len(batch), self.last_id)

        for event in batch:
            try:
                self.dispatcher.dispatch(event)
            except Exception:
                # Side effects are at-most-once; the watermark moves on regardless
                logger.exception("Event %d: dispatch failed", event.id)
            self._advance(event.id)

        return batch

    def run(self, max_polls: int | None = None) -> None:
        """Bootstrap, then poll until interrupted.

        Transport errors are retried with exponential backoff. When
        ``max_consecutive_errors`` is set, the last error is re-raised once
        that many polls in a row have failed.

        Args:
            max_polls: Stop after this many poll attempts (None runs forever)
        """
        self.bootstrap()

        attempts = 0
        failures = 0
        delay = self.settings.backoff_initial

        while max_polls is None or attempts < max_polls:
            attempts += 1
            started = self._clock()
            try:
                self.poll_once()
            except SyncthingAPIError as e:
                failures += 1
                limit = self.settings.max_consecutive_errors
                if limit and failures >= limit:
                    logger.error("Giving up after %d consecutive poll failures", failures)
                    raise
                logger.warning("Poll failed (%s), retrying in %.1fs", e, delay)
                self._sleep(delay)
                delay = min(delay * self.settings.backoff_factor, self.settings.backoff_max)
                continue

            failures = 0
            delay = self.settings.backoff_initial

            remaining = self.settings.min_interval - (self._clock() - started)
            if remaining > 0:
                self._sleep(remaining)

    def _advance(self, event_id: int) -> None:
        if event_id < self.last_id:
            logger.warning("Event id %d is older than watermark %d, keeping watermark", event_id, self.last_id)
            return
        self.last_id = event_id
