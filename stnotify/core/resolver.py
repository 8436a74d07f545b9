"""Folder ID to local path resolution."""

import logging
import threading
from pathlib import Path

from .client import SyncthingAPIError, SyncthingClient

logger = logging.getLogger(__name__)


class FolderPathResolver:
    """Resolves folder IDs to local root paths, caching each one for good.

    The cache is append-only: a resolved folder is never fetched again.
    Failed fetches are not cached, so the next lookup retries.
    """

    def __init__(self, client: SyncthingClient) -> None:
        """Initialize resolver.

        Args:
            client: Client used for folder config lookups
        """
        self.client = client
        self._paths: dict[str, Path] = {}
        self._lock = threading.Lock()
        # One lock per folder ID so that concurrent misses fetch only once
        self._fetch_locks: dict[str, threading.Lock] = {}

    def __contains__(self, folder_id: object) -> bool:
        return folder_id in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def cached(self, folder_id: str) -> Path | None:
        """Get a cached root without calling the API."""
        return self._paths.get(folder_id)

    def resolve(self, folder_id: str) -> Path:
        """Get the local root path of a folder.

        Args:
            folder_id: Folder ID (not the label)

        Returns:
            Local root directory of the folder

        Raises:
            SyncthingAPIError: If the folder config cannot be fetched or has no path
        """
        path = self._paths.get(folder_id)
        if path is not None:
            return path

        with self._lock:
            fetch_lock = self._fetch_locks.setdefault(folder_id, threading.Lock())

        with fetch_lock:
            # Another caller may have finished the fetch while we waited
            path = self._paths.get(folder_id)
            if path is not None:
                return path

            try:
                path = self._fetch(folder_id)
                with self._lock:
                    self._paths[folder_id] = path
            finally:
                with self._lock:
                    self._fetch_locks.pop(folder_id, None)

        logger.debug("Resolved folder %s -> %s", folder_id, path)
        return path

    def _fetch(self, folder_id: str) -> Path:
        config = self.client.get_folder_config(folder_id)
        raw_path = config.get("path")
        if not isinstance(raw_path, str) or not raw_path:
            raise SyncthingAPIError(f"Folder {folder_id!r} has no local path in its config")
        try:
            return Path(raw_path).expanduser()
        except RuntimeError as e:
            # e.g. ~otheruser/... for a user unknown on this machine
            raise SyncthingAPIError(f"Folder {folder_id!r} has an unusable path {raw_path!r}: {e}") from e
