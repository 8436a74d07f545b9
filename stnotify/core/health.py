"""Startup health probe."""

import logging

from .client import SyncthingAPIError, SyncthingClient

logger = logging.getLogger(__name__)

HEALTHY_STATUS = "ok"


class HealthCheckError(Exception):
    """The daemon is unreachable or reports itself unhealthy."""


def probe_health(client: SyncthingClient, timeout: float | None = 10.0) -> str:
    """Check that the daemon answers its unauthenticated health endpoint.

    There is no retry; callers treat a failure as fatal.

    Returns:
        The status string reported by the daemon

    Raises:
        HealthCheckError: On transport failure or any status other than OK
    """
    try:
        payload = client.get_health(timeout=timeout)
    except SyncthingAPIError as e:
        raise HealthCheckError(f"Health check failed: {e}") from e

    if not isinstance(payload, dict) or not isinstance(payload.get("status"), str):
        raise HealthCheckError(f"Unexpected health payload: {payload!r}")

    status = payload["status"]
    if status.lower() != HEALTHY_STATUS:
        raise HealthCheckError(f"Daemon reports unhealthy status: {status!r}")

    logger.debug("Health check passed: %s", status)
    return status
