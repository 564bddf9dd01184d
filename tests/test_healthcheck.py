"""Unit tests for devduel/healthcheck.py -- no real API calls."""

import asyncio
from unittest.mock import AsyncMock

from devduel.healthcheck import run_health_checks
from devduel.providers.base import ProviderError
from devduel.sources.base import SourceError


async def test_all_probes_pass():
    """All probes succeed -> all marked ok, no errors."""
    results = await run_health_checks({
        "store": AsyncMock(return_value=True),
        "github": AsyncMock(return_value=True),
    })

    assert results["store"] == (True, "")
    assert results["github"] == (True, "")


async def test_one_probe_raises():
    """A probe that raises returns ok=False with the error message."""
    results = await run_health_checks({
        "store": AsyncMock(return_value=True),
        "narrator": AsyncMock(side_effect=ProviderError("grok", "403 Forbidden")),
    })

    assert results["store"] == (True, "")
    ok, err = results["narrator"]
    assert ok is False
    assert "403" in err
    assert err.startswith("[grok]")


async def test_probe_returning_false_is_unhealthy():
    results = await run_health_checks({"actionbook": AsyncMock(return_value=False)})
    assert results["actionbook"] == (False, "unhealthy")


async def test_all_probes_fail():
    """All fail -> all marked False."""
    results = await run_health_checks({
        "github": AsyncMock(side_effect=SourceError("github", "rate limited")),
        "wikipedia": AsyncMock(side_effect=ConnectionError("unreachable")),
    })

    assert all(not ok for ok, _ in results.values())
    assert results["wikipedia"][1] == "unreachable"


async def test_timeout_is_reported():
    """A probe that exceeds the timeout is marked failed."""

    async def slow() -> bool:
        await asyncio.sleep(5)
        return True

    results = await run_health_checks({"slow": slow}, timeout=0.01)

    ok, err = results["slow"]
    assert ok is False
    assert "timed out" in err


async def test_probes_run_in_parallel():
    """Three 0.2s probes finish well under 0.6s."""

    async def pause() -> bool:
        await asyncio.sleep(0.2)
        return True

    loop = asyncio.get_running_loop()
    start = loop.time()
    results = await run_health_checks({"a": pause, "b": pause, "c": pause})
    elapsed = loop.time() - start

    assert all(ok for ok, _ in results.values())
    assert elapsed < 0.5


async def test_empty_probes():
    assert await run_health_checks({}) == {}
