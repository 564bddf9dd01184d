"""Abstract base for all profile acquisition sources."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SourceError(Exception):
    """Raised when a source cannot produce a profile payload."""

    def __init__(self, source_name: str, message: str) -> None:
        self.source_name = source_name
        super().__init__(f"[{source_name}] {message}")


class ProfileSource(ABC):
    """Abstract base for all profile acquisition sources."""

    @abstractmethod
    def name(self) -> str:
        """Return the short source name (e.g. 'github', 'brightdata-linkedin')."""
        ...

    @abstractmethod
    def label(self) -> str:
        """Return the human-facing tool name shown in progress messages."""
        ...

    @abstractmethod
    async def fetch(self, url: str) -> dict[str, Any]:
        """Fetch the raw profile payload for a URL.

        Raises:
            SourceError: On network failure, empty or malformed response.
        """
        ...

    async def health_check(self) -> bool:
        """Return True when the backing service is reachable."""
        return True


async def soft_fetch(label: str, coro: Awaitable[T], default: T) -> T:
    """Await one sub-fetch of a fan-out, degrading any failure to ``default``.

    Never raises; the failure is logged at WARNING.
    """
    try:
        return await coro
    except Exception as exc:
        logger.warning("%s failed: %s", label, exc)
        return default
