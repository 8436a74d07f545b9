"""HTTP client wrapper for the Syncthing REST API."""

import logging
from typing import Any
from urllib.parse import quote

import requests

from .auth import ApiKeyAuth

logger = logging.getLogger(__name__)


class SyncthingAPIError(Exception):
    """Exception raised for Syncthing API and transport errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class SyncthingClient:
    """HTTP client for the Syncthing REST API with API key authentication."""

    HEALTH_PATH = "/rest/noauth/health"
    EVENTS_PATH = "/rest/events"
    FOLDER_CONFIG_PATH = "/rest/config/folders"

    def __init__(self, auth: ApiKeyAuth | None = None) -> None:
        """Initialize client with authentication.

        Args:
            auth: ApiKeyAuth instance (creates one from env if not provided)
        """
        self.auth = auth or ApiKeyAuth()
        self.session = requests.Session()

    def _request(
        self,
        method: str,
        path: str,
        query_params: dict[str, str] | None = None,
        timeout: float | None = None,
        authenticated: bool = True,
    ) -> Any:
        """Make a request to the Syncthing API.

        Args:
            method: HTTP method
            path: API path (without base URL)
            query_params: Optional query parameters
            timeout: Optional HTTP timeout in seconds (None waits indefinitely)
            authenticated: Send the API key header

        Returns:
            Parsed JSON response

        Raises:
            SyncthingAPIError: On transport, HTTP or JSON errors
        """
        headers = self.auth.get_headers(authenticated=authenticated)
        url = self.auth.get_full_url(path, query_params)
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                timeout=timeout,
            )
        except requests.RequestException as e:
            raise SyncthingAPIError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            error_msg = f"API error {response.status_code}: {response.text[:500]}"
            raise SyncthingAPIError(error_msg, response.status_code, response)

        # Handle empty responses
        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise SyncthingAPIError(f"Invalid JSON from {path}: {e}", response.status_code, response) from e

    def get(
        self,
        path: str,
        query_params: dict[str, str] | None = None,
        timeout: float | None = None,
        authenticated: bool = True,
    ) -> Any:
        """Make a GET request."""
        return self._request("GET", path, query_params, timeout, authenticated)

    # -------------------------------------------------------------------------
    # Health Check
    # -------------------------------------------------------------------------

    def get_health(self, timeout: float | None = None) -> Any:
        """Fetch the unauthenticated health payload.

        Returns:
            Raw payload, normally {"status": "OK"}
        """
        return self.get(self.HEALTH_PATH, timeout=timeout, authenticated=False)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def get_events(
        self,
        since: int,
        events: list[str] | None = None,
        limit: int | None = None,
        server_timeout: int | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Fetch raw events newer than a given id.

        Args:
            since: Return only events with an id greater than this
            events: Optional event type names to filter on server side
            limit: Optional maximum number of (most recent) events
            server_timeout: Optional long-poll duration in seconds
            timeout: Optional HTTP timeout in seconds

        Returns:
            Raw JSON list of event envelopes
        """
        query_params = {"since": str(since)}
        if events:
            query_params["events"] = ",".join(events)
        if limit is not None:
            query_params["limit"] = str(limit)
        if server_timeout is not None:
            query_params["timeout"] = str(server_timeout)

        response = self.get(self.EVENTS_PATH, query_params, timeout=timeout)
        # An empty body means no events
        return [] if response is None else response

    # -------------------------------------------------------------------------
    # Folder Operations
    # -------------------------------------------------------------------------

    def get_folder_config(self, folder_id: str) -> dict[str, Any]:
        """Get the configuration of a single folder.

        Args:
            folder_id: Folder ID (not the label)

        Returns:
            Folder configuration including the local 'path'
        """
        path = f"{self.FOLDER_CONFIG_PATH}/{quote(folder_id, safe='')}"
        response = self.get(path)
        if not isinstance(response, dict):
            raise SyncthingAPIError(f"Unexpected folder config payload for {folder_id!r}")
        return response
