"""Per-platform acquisition with a synthetic fallback that never raises."""

import logging
import random
from collections.abc import Mapping
from datetime import datetime

from devduel.models import DuelStatus, FighterSlot, Platform, RawAcquisition
from devduel.sources.base import ProfileSource, SourceError
from devduel.store import DuelNotFoundError, SessionStore
from devduel.synthetic import pick_synthetic_index, synthetic_profile

logger = logging.getLogger(__name__)

_PLATFORM_HOSTS: list[tuple[str, Platform]] = [
    ("linkedin.com", "linkedin"),
    ("github.com", "github"),
    ("wikipedia.org", "wikipedia"),
]

_PLATFORM_NAMES: dict[Platform, str] = {
    "linkedin": "LinkedIn",
    "github": "GitHub",
    "wikipedia": "Wikipedia",
    "generic": "web",
}

# Tool shown in progress messages when no source is registered for a platform
DEFAULT_TOOL_LABELS: dict[Platform, str] = {
    "linkedin": "Bright Data",
    "github": "ActionBook",
    "wikipedia": "ActionBook",
    "generic": "Bright Data",
}

_SLOT_NUMBERS: dict[FighterSlot, int] = {"profile1": 1, "profile2": 2}

# Any of these present means the scraper saw a real public profile
_LINKEDIN_IDENTITY_KEYS = ("name", "full_name", "first_name", "about", "position")


def detect_platform(url: str) -> Platform:
    lowered = url.lower()
    for host, platform in _PLATFORM_HOSTS:
        if host in lowered:
            return platform
    return "generic"


class AcquisitionResolver:
    """Routes a URL to its platform source and degrades every failure to demo data.

    The "already used" synthetic indices are tracked per duel so the two
    fighters of one duel never share a synthetic identity.
    """

    def __init__(
        self,
        sources: Mapping[Platform, ProfileSource],
        store: SessionStore,
        rng: random.Random | None = None,
    ) -> None:
        self._sources = dict(sources)
        self._store = store
        self._rng = rng or random.Random()
        self._used_synthetic: dict[str, set[int]] = {}

    def sources(self) -> dict[Platform, ProfileSource]:
        return dict(self._sources)

    def tool_label(self, platform: Platform) -> str:
        source = self._sources.get(platform)
        return source.label() if source else DEFAULT_TOOL_LABELS[platform]

    def begin_duel(self, duel_id: str) -> None:
        self._used_synthetic[duel_id] = set()

    def end_duel(self, duel_id: str) -> None:
        self._used_synthetic.pop(duel_id, None)

    async def acquire(self, url: str, duel_id: str, slot: FighterSlot) -> RawAcquisition:
        """Fetch the raw payload for one fighter. Never raises."""
        platform = detect_platform(url)
        label = self.tool_label(platform)
        number = _SLOT_NUMBERS[slot]
        self._log(duel_id, "scraping", f"[{label}] Scraping {_PLATFORM_NAMES[platform]} profile {number}...")

        try:
            source = self._sources.get(platform)
            if source is None:
                raise SourceError(label, f"no source configured for {platform}")
            payload = await source.fetch(url)
            if not payload:
                raise SourceError(source.name(), "empty payload")
            if not isinstance(payload, dict):
                raise SourceError(source.name(), f"malformed payload ({type(payload).__name__})")
        except Exception as exc:
            logger.warning("[%s] Acquisition failed for %s: %s", label, url, exc)
            self._log(duel_id, "scraping", f"[{label}] Failed: {exc}, using demo data")
            return self._synthetic(url, platform, duel_id)

        if platform == "linkedin" and not any(payload.get(k) for k in _LINKEDIN_IDENTITY_KEYS):
            logger.info("[%s] LinkedIn returned limited data for %s (%d keys)", label, url, len(payload))
            self._log(
                duel_id,
                "scraping",
                f"Profile {number}: Limited public data, enriching with available info",
            )

        return RawAcquisition(
            platform=platform,
            source_url=url,
            payload=payload,
            captured_at=datetime.now(),
        )

    def _synthetic(self, url: str, platform: Platform, duel_id: str) -> RawAcquisition:
        used = self._used_synthetic.setdefault(duel_id, set())
        index = pick_synthetic_index(used, self._rng)
        profile = synthetic_profile(index, url, platform)
        return RawAcquisition(
            platform=platform,
            source_url=url,
            payload={"profile": profile},
            captured_at=datetime.now(),
            synthetic=True,
        )

    def _log(self, duel_id: str, stage: DuelStatus, message: str) -> None:
        try:
            self._store.append_log(duel_id, stage, message)
        except DuelNotFoundError:
            logger.debug("Session %s gone, dropping log line: %s", duel_id, message)
