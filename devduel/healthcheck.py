"""Collaborator health checks, probed in parallel before a duel."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[bool]]

_TIMEOUT_SEC = 15.0


async def _check_one(name: str, probe: Probe, timeout: float) -> tuple[str, bool, str]:
    """Run a single probe. Returns (name, ok, error_message)."""
    try:
        ok = await asyncio.wait_for(probe(), timeout=timeout)
    except TimeoutError:
        return name, False, f"timed out after {timeout}s"
    except Exception as exc:
        return name, False, str(exc)
    if not ok:
        return name, False, "unhealthy"
    return name, True, ""


async def run_health_checks(
    probes: dict[str, Probe],
    timeout: float = _TIMEOUT_SEC,
) -> dict[str, tuple[bool, str]]:
    """Run all probes in parallel.

    Returns:
        Dict mapping collaborator name -> (ok, error_message).
        error_message is "" when ok is True.
    """
    results = await asyncio.gather(*(_check_one(n, p, timeout) for n, p in probes.items()))
    for name, ok, err in results:
        if not ok:
            logger.warning("Health check failed for %s: %s", name, err)
    return {name: (ok, err) for name, ok, err in results}
