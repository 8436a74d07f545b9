"""API key authentication for the Syncthing REST API."""

import os
from urllib.parse import urlencode, urlparse

from dotenv import load_dotenv

DEFAULT_BASE_URL = "http://localhost:8384"
API_KEY_HEADER = "X-API-Key"


class ApiKeyAuth:
    """Holds the connection parameters and builds request headers."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize authentication with credentials.

        Args:
            api_key: Syncthing API key (or load from SYNCTHING_API_KEY env)
            base_url: GUI/REST address (or load from SYNCTHING_URL env)
        """
        load_dotenv()

        self.api_key = api_key or os.getenv("SYNCTHING_API_KEY", "")
        self.base_url = (base_url or os.getenv("SYNCTHING_URL", DEFAULT_BASE_URL)).rstrip("/")

        if not self.api_key:
            raise ValueError(
                "Missing Syncthing API key. Set the SYNCTHING_API_KEY environment "
                "variable or pass it directly."
            )

        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Malformed Syncthing base URL: {self.base_url!r}")

    def get_headers(self, authenticated: bool = True) -> dict[str, str]:
        """Generate headers for an API request.

        Args:
            authenticated: Include the API key header (False for noauth endpoints)

        Returns:
            Dictionary of headers
        """
        headers = {"Accept": "application/json"}
        if authenticated:
            headers[API_KEY_HEADER] = self.api_key
        return headers

    def get_full_url(self, path: str, query_params: dict[str, str] | None = None) -> str:
        """Build full URL from base URL, path, and query params.

        Args:
            path: API path (e.g., /rest/events)
            query_params: Optional query parameters

        Returns:
            Full URL string
        """
        url = f"{self.base_url}{path}"
        if query_params:
            url += "?" + urlencode(sorted(query_params.items()))
        return url

    def masked_key(self) -> str:
        """Return the API key with all but its edges hidden, for display."""
        if len(self.api_key) <= 8:
            return "*" * len(self.api_key)
        return f"{self.api_key[:4]}...{self.api_key[-4:]}"
