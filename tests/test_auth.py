"""Tests for API key authentication."""

import os
from unittest.mock import patch

import pytest

from stnotify.core.auth import API_KEY_HEADER, DEFAULT_BASE_URL, ApiKeyAuth


class TestApiKeyAuth:
    """Tests for ApiKeyAuth class."""

    def test_init_with_credentials(self) -> None:
        auth = ApiKeyAuth(api_key="test_key", base_url="http://127.0.0.1:9000")

        assert auth.api_key == "test_key"
        assert auth.base_url == "http://127.0.0.1:9000"

    def test_init_from_env(self) -> None:
        env = {"SYNCTHING_API_KEY": "env_key", "SYNCTHING_URL": "https://sync.local:8443"}
        with patch.dict(os.environ, env, clear=True), patch("stnotify.core.auth.load_dotenv"):
            auth = ApiKeyAuth()

        assert auth.api_key == "env_key"
        assert auth.base_url == "https://sync.local:8443"

    def test_default_base_url(self) -> None:
        with patch.dict(os.environ, {}, clear=True), patch("stnotify.core.auth.load_dotenv"):
            auth = ApiKeyAuth(api_key="test")

        assert auth.base_url == DEFAULT_BASE_URL

    def test_init_missing_key(self) -> None:
        # Clear env vars for this test
        with patch.dict(os.environ, {}, clear=True), patch("stnotify.core.auth.load_dotenv"):
            with pytest.raises(ValueError, match="Missing Syncthing API key"):
                ApiKeyAuth()

    @pytest.mark.parametrize("url", ["localhost:8384", "ftp://localhost", "http://"])
    def test_malformed_base_url(self, url: str) -> None:
        with pytest.raises(ValueError, match="Malformed"):
            ApiKeyAuth(api_key="test", base_url=url)

    def test_get_headers(self) -> None:
        auth = ApiKeyAuth(api_key="test_key", base_url=DEFAULT_BASE_URL)

        headers = auth.get_headers()

        assert headers[API_KEY_HEADER] == "test_key"
        assert headers["Accept"] == "application/json"

    def test_get_headers_unauthenticated(self) -> None:
        auth = ApiKeyAuth(api_key="test_key", base_url=DEFAULT_BASE_URL)

        headers = auth.get_headers(authenticated=False)

        assert API_KEY_HEADER not in headers

    def test_get_full_url(self) -> None:
        auth = ApiKeyAuth(api_key="test", base_url="http://localhost:8384")

        url = auth.get_full_url("/rest/events")
        assert url == "http://localhost:8384/rest/events"

        url_with_params = auth.get_full_url(
            "/rest/events",
            query_params={"since": "9", "limit": "1"},
        )
        assert url_with_params == "http://localhost:8384/rest/events?limit=1&since=9"

    def test_base_url_trailing_slash_removed(self) -> None:
        auth = ApiKeyAuth(api_key="test", base_url="http://localhost:8384/")

        assert auth.base_url == "http://localhost:8384"

    def test_masked_key(self) -> None:
        auth = ApiKeyAuth(api_key="abcd1234efgh5678", base_url=DEFAULT_BASE_URL)

        assert auth.masked_key() == "abcd...5678"
        assert "1234" not in auth.masked_key()
