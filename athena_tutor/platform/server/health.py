"""
HTTP health check state and container metadata.
"""

import datetime
import os
import platform
import socket
import threading
import time

from athena_tutor.platform.constants import SERVICE_NAME

__all__ = ["HealthCheck", "MetadataManager", "metadata"]


class HealthCheck:
    """Thread-safe health check state manager.

    Flipped off by the signal handler so the load balancer stops routing new
    chat streams while in-flight ones drain.
    """

    _health_check_enabled = threading.Event()

    @staticmethod
    def enable() -> None:
        HealthCheck._health_check_enabled.set()

    @staticmethod
    def disable() -> None:
        HealthCheck._health_check_enabled.clear()

    @staticmethod
    def status() -> bool:
        return HealthCheck._health_check_enabled.is_set()


class MetadataManager:
    """
    Static container metadata plus uptime. One is created on import as
    ``metadata``; add entries to its ``metadata`` dict for other static data.
    """

    # keys to read from the environment
    ENV_INFO_KEYS = [
        "BUILD_DATE",
        "BUILD_VERSION",
        "GIT_COMMIT",
        "IMAGE_NAME",
        "SERVICE_NAME",
        "PYTHON_VERSION",
    ]

    def __init__(self):
        self._started_at = datetime.datetime.now(tz=datetime.UTC).isoformat()
        self._started_ts = time.monotonic()

        metadata = {key.lower(): os.environ.get(key) for key in self.ENV_INFO_KEYS}
        metadata["hostname"] = socket.gethostname()
        metadata["os_version"] = platform.platform()
        metadata["service_name"] = metadata["service_name"] or SERVICE_NAME
        self.metadata = metadata

    def info(self) -> dict:
        """
        Return metadata about the container and some basic stats
        """
        return {
            **self.metadata,
            "started": self._started_at,
            "uptime_seconds": round(time.monotonic() - self._started_ts, 3),
        }


metadata = MetadataManager()
