"""Duel orchestration: stage sequencing, progress events, the commentary ticker."""

import asyncio
import logging
from typing import Any

from devduel.commentary import CommentaryGenerator
from devduel.events import EventBus
from devduel.healthcheck import Probe, run_health_checks
from devduel.models import (
    BattleCommentary,
    DuelResult,
    DuelStatus,
    FighterRecord,
    FighterSlot,
    RawAcquisition,
    StatusReport,
    Winner,
)
from devduel.normalizer import normalize
from devduel.resolver import AcquisitionResolver, detect_platform
from devduel.scoring import ScoringEngine, decide_winner
from devduel.sources.actionbook import ActionBookClient
from devduel.store import DuelNotFoundError, SessionStore

logger = logging.getLogger(__name__)

STATUS_PROGRESS: dict[DuelStatus, int] = {
    "pending": 0,
    "scraping": 20,
    "normalizing": 40,
    "scoring": 55,
    "transforming": 70,
    "generating_commentary": 85,
    "complete": 100,
    "error": 0,
}

TICKER_MESSAGES = [
    "Crafting savage roasts...",
    "Analyzing weak points...",
    "Loading comeback arsenal...",
    "Sharpening insults...",
    "Polishing the burns...",
]
TICKER_START = 87
TICKER_CEILING = 94

# Progress reported when each fighter's acquisition finishes
_COLLECTED_PROGRESS: dict[FighterSlot, int] = {"profile1": 25, "profile2": 30}


class DuelOrchestrator:
    """Runs one duel end to end and reports every step on the event bus.

    Stages are strictly sequential; inside a stage the two fighters' work is
    unordered. Acquisition and narrative failures never surface here, they are
    replaced by fallbacks below. Anything else moves the session to ``error``
    and is re-raised.
    """

    def __init__(
        self,
        store: SessionStore,
        bus: EventBus,
        resolver: AcquisitionResolver,
        engine: ScoringEngine,
        commentary: CommentaryGenerator,
        ticker_interval_sec: float = 4.0,
        health_timeout_sec: float = 15.0,
        dom: ActionBookClient | None = None,
    ) -> None:
        self._store = store
        self._bus = bus
        self._resolver = resolver
        self._engine = engine
        self._commentary = commentary
        self._ticker_interval_sec = ticker_interval_sec
        self._health_timeout_sec = health_timeout_sec
        self._dom = dom

    def create_session(self, url1: str, url2: str) -> str:
        return self._store.create(url1, url2).id

    async def run_duel(self, url1: str, url2: str, session_id: str | None = None) -> DuelResult:
        """Run the full pipeline for two URLs.

        Args:
            url1: Profile URL of fighter 1.
            url2: Profile URL of fighter 2.
            session_id: Existing session to run in; a new one is created when None.

        Returns:
            DuelResult with both fighter records, commentary and winner.

        Raises:
            DuelNotFoundError: If ``session_id`` is not in the store.
        """
        if session_id is None:
            session_id = self.create_session(url1, url2)

        self._resolver.begin_duel(session_id)
        try:
            return await self._run_stages(session_id, url1, url2)
        except asyncio.CancelledError:
            self._fail(session_id, "Battle interrupted: cancelled")
            raise
        except Exception as exc:
            self._fail(session_id, f"Battle interrupted: {exc}")
            raise
        finally:
            self._resolver.end_duel(session_id)

    def _fail(self, session_id: str, message: str) -> None:
        logger.error("Duel %s failed: %s", session_id, message)
        self._bus.broadcast(session_id, "error", message, 0)
        try:
            self._set_status(session_id, "error", message)
        except DuelNotFoundError:
            pass

    async def _run_stages(self, session_id: str, url1: str, url2: str) -> DuelResult:
        # 1. acquisition
        self._transition(session_id, "scraping", "Initiating profile reconnaissance...", 5)
        for n, (url, progress) in enumerate(((url1, 10), (url2, 12)), start=1):
            platform = detect_platform(url)
            self._broadcast(
                session_id, "scraping",
                f"Fighter {n}: Using {self._resolver.tool_label(platform)} for {platform}...", progress,
            )

        raw1, raw2 = await asyncio.gather(
            self._acquire(session_id, url1, "profile1"),
            self._acquire(session_id, url2, "profile2"),
        )
        self._broadcast(session_id, "scraping", "Both profiles scraped successfully ✓", 35)
        for n, raw in ((1, raw1), (2, raw2)):
            self._store.append_log(
                session_id,
                "scraping",
                f"Profile {n} acquired from {raw.platform}",
                data={"synthetic": raw.synthetic, "source_url": raw.source_url, "payload": raw.payload},
            )

        # 2. normalization
        self._transition(session_id, "normalizing", "Processing warrior data...", 40)
        profile1 = normalize(raw1)
        self._broadcast(
            session_id, "normalizing", f"Identified: {profile1.name}, {profile1.title}", 45,
            {"fighter": 1, "name": profile1.name, "avatar": profile1.avatar},
        )
        profile2 = normalize(raw2)
        self._broadcast(
            session_id, "normalizing", f"Identified: {profile2.name}, {profile2.title}", 50,
            {"fighter": 2, "name": profile2.name, "avatar": profile2.avatar},
        )

        # 3. scoring
        self._transition(session_id, "scoring", "Calculating power levels...", 55)
        stats1 = self._engine.calculate_stats(profile1)
        self._broadcast(session_id, "scoring", f"{profile1.name}: Power level computed", 60)
        stats2 = self._engine.calculate_stats(profile2)
        self._broadcast(session_id, "scoring", f"{profile2.name}: Power level computed", 65)

        # 4. transformation
        self._transition(session_id, "transforming", "Awakening warrior spirits...", 70)
        fighter1 = self._engine.transform(profile1, stats1)
        self._broadcast(session_id, "transforming", _awakening(fighter1), 73)
        fighter2 = self._engine.transform(profile2, stats2)
        self._broadcast(session_id, "transforming", _awakening(fighter2), 76)
        self._store.update(session_id, lambda s: _set_fighters(s, fighter1, fighter2))
        self._broadcast(session_id, "transforming", "Warrior profiles sealed ✓", 78)

        decision = decide_winner(fighter1.total_power, fighter2.total_power)
        if decision.winner == "draw":
            winner_name = "Draw"
        elif decision.winner == "profile1":
            winner_name = fighter1.profile.name
        else:
            winner_name = fighter2.profile.name
        logger.info("Duel %s: %s (margin %d)", session_id, decision.winner, decision.margin)
        self._broadcast(session_id, "transforming", "Power levels compared, preparing arena...", 80)

        # 5. narrative
        self._transition(
            session_id, "generating_commentary", "The announcer prepares the battle narrative...", 82,
        )
        self._broadcast(session_id, "generating_commentary", "Warming up the roast mic...", 84)
        narrator = self._commentary.provider_name() or "The house announcer"
        self._broadcast(
            session_id, "generating_commentary", f"{narrator} generating epic battle commentary...", 86,
        )
        commentary = await self._narrate(session_id, fighter1, fighter2, decision.winner)
        self._store.update(session_id, lambda s: setattr(s, "commentary", commentary))
        self._broadcast(session_id, "generating_commentary", "Battle commentary ready ✓", 95)

        # 6. result
        def finish(session):
            session.winner = decision.winner
            session.winner_name = winner_name

        self._store.update(session_id, finish)
        outcome = "is declared" if decision.winner == "draw" else "emerges victorious"
        self._transition(session_id, "complete", f"BATTLE COMPLETE! {winner_name} {outcome}!", 100)

        return DuelResult(
            id=session_id,
            status="complete",
            fighter1=fighter1,
            fighter2=fighter2,
            commentary=commentary,
            winner=decision.winner,
            winner_name=winner_name,
        )

    async def _acquire(self, session_id: str, url: str, slot: FighterSlot) -> RawAcquisition:
        raw = await self._resolver.acquire(url, session_id, slot)
        n = 1 if slot == "profile1" else 2
        self._broadcast(session_id, "scraping", f"Fighter {n} data collected ✓", _COLLECTED_PROGRESS[slot])
        return raw

    async def _narrate(
        self, session_id: str, fighter1: FighterRecord, fighter2: FighterRecord, winner: Winner
    ) -> BattleCommentary:
        """Run the narrative call with the flavor ticker alongside; the narrative owns cleanup."""
        narrative = asyncio.create_task(self._commentary.generate(fighter1, fighter2, winner))
        ticker = asyncio.create_task(self._tick(session_id))
        try:
            return await narrative
        finally:
            ticker.cancel()
            try:
                await ticker
            except asyncio.CancelledError:
                pass

    async def _tick(self, session_id: str) -> None:
        progress = TICKER_START
        index = 0
        while progress < TICKER_CEILING:
            await asyncio.sleep(self._ticker_interval_sec)
            progress += 1
            message = TICKER_MESSAGES[index % len(TICKER_MESSAGES)]
            self._broadcast(session_id, "generating_commentary", message, progress)
            index += 1

    def _set_status(self, session_id: str, status: DuelStatus, message: str) -> None:
        def apply(session):
            session.status = status

        self._store.update(session_id, apply)
        self._store.append_log(session_id, status, message)

    def _transition(self, session_id: str, status: DuelStatus, message: str, progress: int) -> None:
        self._set_status(session_id, status, message)
        self._broadcast(session_id, status, message, progress)
        logger.info("[%s] %s: %s", session_id[:8], status, message)

    def _broadcast(
        self,
        session_id: str,
        stage: DuelStatus,
        message: str,
        progress: int,
        data: dict[str, Any] | None = None,
    ) -> None:
        self._bus.broadcast(session_id, stage, message, progress, data)

    def get_status(self, session_id: str) -> StatusReport:
        """Raises DuelNotFoundError for an unknown id."""
        session = self._store.get(session_id)
        if session is None:
            raise DuelNotFoundError(session_id)
        return StatusReport(
            status=session.status,
            progress=STATUS_PROGRESS[session.status],
            logs=list(session.logs),
        )

    def get_result(self, session_id: str) -> DuelResult | None:
        session = self._store.get(session_id)
        if session is None:
            return None
        return DuelResult(
            id=session.id,
            status=session.status,
            fighter1=session.fighter1,
            fighter2=session.fighter2,
            commentary=session.commentary,
            winner=session.winner,
            winner_name=session.winner_name,
        )

    def health_probes(self) -> dict[str, Probe]:
        probes: dict[str, Probe] = {"store": self._store.health_check}
        for source in self._resolver.sources().values():
            probes.setdefault(source.name(), source.health_check)
        if self._dom is not None:
            probes[self._dom.name()] = self._dom.health_check
        probes["narrator"] = self._commentary.health_check
        return probes

    async def health_check(self) -> dict[str, bool]:
        results = await run_health_checks(self.health_probes(), timeout=self._health_timeout_sec)
        return {name: ok for name, (ok, _err) in results.items()}


def _awakening(fighter: FighterRecord) -> str:
    return f"{fighter.profile.name} awakens as {fighter.archetype} (Power: {fighter.total_power})"


def _set_fighters(session, fighter1: FighterRecord, fighter2: FighterRecord) -> None:
    session.fighter1 = fighter1
    session.fighter2 = fighter2
