"""Roast-battle narrative: model call, structural repair, fixed fallback."""

import asyncio
import dataclasses
import json
import logging
import math
import re
from typing import Any

from config.config_loader import PromptsConfig
from devduel.models import BattleCommentary, FighterRecord, FighterSlot, RoastRound, Winner
from devduel.providers.base import NarrativeProvider, PromptSpec

logger = logging.getLogger(__name__)

ROUND_COUNT = 6
MIN_DAMAGE = 30
MAX_DAMAGE = 95
DEFAULT_DAMAGE = 60

_FENCE_RE = re.compile(r"```(?:json)?\n?|\n?```")


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def _expected_attacker(index: int) -> FighterSlot:
    return "profile1" if index % 2 == 0 else "profile2"


def _infer_attacker(value: Any, name1: str, name2: str) -> FighterSlot | None:
    """Best guess at which fighter a free-text attacker field names."""
    if value in ("profile1", "profile2"):
        return value
    text = str(value or "").lower()
    if not text:
        return None
    if (name1 and name1.lower() in text) or "1" in text or "contender 1" in text:
        return "profile1"
    if (name2 and name2.lower() in text) or "2" in text or "contender 2" in text:
        return "profile2"
    return None


def _coerce_damage(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_DAMAGE
    try:
        damage = float(value)
    except (TypeError, ValueError):
        return DEFAULT_DAMAGE
    if not math.isfinite(damage) or damage == 0:
        return DEFAULT_DAMAGE
    return max(MIN_DAMAGE, min(MAX_DAMAGE, math.floor(damage + 0.5)))


def repair_rounds(rounds: list[Any], name1: str, name2: str) -> list[RoastRound]:
    """Force model rounds into shape.

    Keeps at most six rounds, renumbers them by position, alternates attackers
    starting with profile1 and clamps damage into [30, 95]. Total over any
    input list; repairing already-repaired rounds changes nothing.
    """
    repaired: list[RoastRound] = []
    for index, item in enumerate(rounds[:ROUND_COUNT]):
        if isinstance(item, RoastRound):
            item = dataclasses.asdict(item)
        elif not isinstance(item, dict):
            item = {}

        expected = _expected_attacker(index)
        claimed = _infer_attacker(item.get("attacker"), name1, name2)
        if claimed != expected:
            logger.debug(
                "Round %d attacker %r reassigned to %s",
                index + 1, item.get("attacker"), expected,
            )

        repaired.append(
            RoastRound(
                round_number=index + 1,
                attacker=expected,
                roast=str(item.get("roast") or ""),
                damage=_coerce_damage(item.get("damage")),
                reaction=str(item.get("reaction") or ""),
            )
        )
    return repaired


def fallback_commentary(f1: FighterRecord, f2: FighterRecord, winner: Winner) -> BattleCommentary:
    """Six fixed rounds personalized with both names."""
    n1 = f1.profile.name
    n2 = f2.profile.name
    lines = [
        (
            f"Hey {n2}, I saw your resume. It reads like a LinkedIn buzzword bingo card that nobody won.",
            65,
            f"{n2} forces an awkward smile.",
        ),
        (
            "That's rich coming from someone whose greatest achievement is being "
            f'"proficient in Microsoft Office." Welcome to 2026, {n1}.',
            70,
            f"{n1} clutches their chest dramatically.",
        ),
        (
            'At least I have achievements. Your LinkedIn says "Thought Leader" but your last post '
            "was sharing a motivational quote from 2019.",
            75,
            f"{n2} nervously checks their phone.",
        ),
        (
            "You call yourself a tech expert but your GitHub has more forks than original code. "
            "Even your commits are copy-paste.",
            80,
            f"{n1} looks visibly shaken.",
        ),
        (
            'Bold words from someone who lists "synergy" as a skill. The only thing you\'ve '
            "disrupted is the coffee machine at your coworking space.",
            85,
            f"The crowd goes wild. {n2} is stunned.",
        ),
        (
            "Nice try, but your career trajectory looks like a stock chart from 2008. "
            "At least my failures are in private repos.",
            70,
            f"{n1} takes a deep breath, knowing that one stung.",
        ),
    ]
    return BattleCommentary(
        introduction=(
            f"The microphone is live! {n1} versus {n2}. Two professionals enter, "
            "only one leaves with their dignity intact!"
        ),
        rounds=[
            RoastRound(
                round_number=i + 1,
                attacker=_expected_attacker(i),
                roast=roast,
                damage=damage,
                reaction=reaction,
            )
            for i, (roast, damage, reaction) in enumerate(lines)
        ],
        verdict=(
            "It was a brutal exchange. Both fighters left it all on the stage, "
            "but one came out with slightly more dignity."
        ),
        winner=winner,
    )


def build_matchup_prompt(template: str, f1: FighterRecord, f2: FighterRecord) -> str:
    def fields(record: FighterRecord, n: int, empty_summary: str) -> dict[str, Any]:
        p = record.profile
        return {
            f"name{n}": p.name,
            f"title{n}": p.title,
            f"guild{n}": record.guild,
            f"archetype{n}": record.archetype,
            f"power{n}": record.total_power,
            f"skills{n}": ", ".join(p.skills),
            f"summary{n}": p.summary or empty_summary,
            f"years{n}": p.years_experience,
            f"posts{n}": p.activity_metrics.posts or 0,
            f"followers{n}": p.activity_metrics.followers or 0,
        }

    return template.format(
        **fields(f1, 1, "No summary provided (boring?)"),
        **fields(f2, 2, "No summary provided (mysterious or lazy?)"),
    )


def parse_commentary(content: str, f1: FighterRecord, f2: FighterRecord, winner: Winner) -> BattleCommentary:
    """Parse and repair a model response.

    Raises:
        ValueError: If the text is not a JSON object with at least six rounds.
    """
    data = json.loads(strip_code_fences(content))
    if not isinstance(data, dict):
        raise ValueError("Commentary is not a JSON object")
    rounds = data.get("rounds")
    if not isinstance(rounds, list) or len(rounds) < ROUND_COUNT:
        got = len(rounds) if isinstance(rounds, list) else 0
        raise ValueError(f"Expected {ROUND_COUNT} rounds, got {got}")

    return BattleCommentary(
        introduction=str(data.get("introduction") or ""),
        rounds=repair_rounds(rounds, f1.profile.name, f2.profile.name),
        verdict=str(data.get("verdict") or ""),
        winner=winner,
    )


class CommentaryGenerator:
    """Produces the six-round narrative; falls back to the fixed template on any failure."""

    def __init__(
        self,
        provider: NarrativeProvider | None,
        prompts: PromptsConfig,
        timeout_sec: float = 45.0,
        max_tokens: int = 1500,
        temperature: float = 0.9,
    ) -> None:
        self._provider = provider
        self._prompts = prompts
        self._timeout_sec = timeout_sec
        self._max_tokens = max_tokens
        self._temperature = temperature

    def provider_name(self) -> str | None:
        return self._provider.name() if self._provider else None

    async def generate(self, f1: FighterRecord, f2: FighterRecord, winner: Winner) -> BattleCommentary:
        """Never raises. The commentary's winner is always ``winner``."""
        if self._provider is None:
            logger.warning("No narrator configured, using fallback commentary")
            return fallback_commentary(f1, f2, winner)

        spec = PromptSpec(
            system=self._prompts.system,
            user=build_matchup_prompt(self._prompts.matchup, f1, f2),
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )
        try:
            completion = await asyncio.wait_for(self._provider.complete(spec), timeout=self._timeout_sec)
            commentary = parse_commentary(completion.content, f1, f2, winner)
        except TimeoutError:
            logger.warning("Narrator %s timed out after %ss, using fallback", self._provider.name(), self._timeout_sec)
            return fallback_commentary(f1, f2, winner)
        except Exception as exc:
            logger.warning("Narrator %s failed: %s, using fallback", self._provider.name(), exc)
            return fallback_commentary(f1, f2, winner)

        logger.info("Commentary generated by %s", self._provider.name())
        return commentary

    async def health_check(self) -> bool:
        if self._provider is None:
            return False
        try:
            await asyncio.wait_for(self._provider.ping(), timeout=self._timeout_sec)
        except Exception as exc:
            logger.warning("Narrator health check failed: %s", exc)
            return False
        return True
