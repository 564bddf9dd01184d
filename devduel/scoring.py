"""Battle statistics, power aggregation, archetype classification and fighter flavor."""

import logging
import math
import random

from config.config_loader import ScoringWeights
from devduel.models import (
    Archetype,
    BattleStatistics,
    CanonicalProfile,
    Company,
    FighterRecord,
    Mission,
    MissionRank,
    Project,
    WinnerDecision,
)
from devduel.tables import (
    ABILITY_TEMPLATES,
    DEFAULT_SKILL_TIER,
    DIRECTOR_KEYWORDS,
    EXECUTIVE_KEYWORDS,
    EXPERIENCE_FLOOR_SCORE,
    EXPERIENCE_LABELS,
    EXPERIENCE_SCORES,
    LEAD_KEYWORDS,
    LEADERSHIP_KEYWORDS,
    MAX_SKILL_TIER,
    NEWCOMER_LABEL,
    PRESTIGE_COMPANIES,
    SKILL_TIERS,
    TECHNIQUE_NAMES,
    TECHNIQUE_PREFIXES,
    TECHNIQUE_SUFFIXES,
)

logger = logging.getLogger(__name__)

DEFAULT_WEIGHTS = ScoringWeights()

# Strategy is weighted with a fixed coefficient, not from the weight table.
STRATEGY_COEFFICIENT = 0.20

DRAW_MARGIN = 5
BALANCED_DEVIATION = 10

_STAT_ORDER = ("technical", "strategy", "execution", "leadership", "impact", "experience")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float) -> int:
    return max(0, min(100, _round_half_up(value)))


def _tier(value: float, bands: list[tuple[int, int]]) -> int:
    """Return the points of the first (threshold, points) band that value exceeds."""
    for threshold, points in bands:
        if value > threshold:
            return points
    return 0


def find_skill_tier(skill: str) -> int:
    """Tier points for a lower-cased skill: exact match, then substring either way."""
    if not skill:
        return DEFAULT_SKILL_TIER
    if skill in SKILL_TIERS:
        return SKILL_TIERS[skill]
    for key, value in SKILL_TIERS.items():
        if key in skill or skill in key:
            return value
    return DEFAULT_SKILL_TIER


def _total_stars(projects: list[Project]) -> int:
    return sum(p.stars or 0 for p in projects)


def _total_forks(projects: list[Project]) -> int:
    return sum(p.forks or 0 for p in projects)


def decide_winner(power1: int, power2: int) -> WinnerDecision:
    """Higher power wins unless the absolute gap is within DRAW_MARGIN."""
    margin = abs(power1 - power2)
    if margin <= DRAW_MARGIN:
        return WinnerDecision(winner="draw", margin=margin)
    return WinnerDecision(winner="profile1" if power1 > power2 else "profile2", margin=margin)


class ScoringEngine:
    """Deterministic scoring of canonical profiles into fighters.

    The only randomness is the fallback technique name for skills missing from
    TECHNIQUE_NAMES; pass a seeded ``random.Random`` to make it reproducible.
    """

    def __init__(self, weights: ScoringWeights = DEFAULT_WEIGHTS, rng: random.Random | None = None) -> None:
        self._weights = weights
        self._rng = rng or random.Random()

    def calculate_stats(self, profile: CanonicalProfile) -> BattleStatistics:
        return BattleStatistics(
            technical=self._score_technical(profile),
            strategy=self._score_strategy(profile),
            execution=self._score_execution(profile),
            leadership=self._score_leadership(profile),
            impact=self._score_impact(profile),
            experience=self._score_experience(profile),
        )

    def _score_technical(self, profile: CanonicalProfile) -> int:
        total = 0.0
        max_possible = 0.0

        for skill in profile.skills:
            total += find_skill_tier(skill.lower())
            max_possible += MAX_SKILL_TIER

        # project technologies count at half weight
        for project in profile.projects:
            for tech in project.technologies:
                total += find_skill_tier(tech.lower()) * 0.5
                max_possible += MAX_SKILL_TIER / 2

        total += _tier(_total_stars(profile.projects), [(1000, 20), (500, 15), (100, 10), (10, 5)])
        max_possible += 20

        return _clamp(total / max_possible * 100) if max_possible > 0 else 0

    def _score_strategy(self, profile: CanonicalProfile) -> int:
        project_count = len(profile.projects)
        score = min(30, project_count * 6)

        avg_desc = sum(len(p.description or "") for p in profile.projects) / max(1, project_count)
        score += _tier(avg_desc, [(200, 15), (100, 10), (50, 5)])

        score += min(30, len(profile.achievements) * 10)
        score += min(15, len(profile.certifications) * 5)
        score += min(10, len(profile.education) * 5)
        return _clamp(score)

    def _score_execution(self, profile: CanonicalProfile) -> int:
        metrics = profile.activity_metrics
        score = 0

        if metrics.commits:
            score += _tier(metrics.commits, [(5000, 30), (1000, 25), (500, 20), (100, 15)]) or 10
        if metrics.contributions:
            score += _tier(metrics.contributions, [(2000, 25), (500, 20), (100, 15)]) or 10
        if metrics.pull_requests:
            score += min(15, metrics.pull_requests)
        if metrics.repositories:
            score += _tier(metrics.repositories, [(100, 15), (50, 12), (20, 8)]) or 5
        if metrics.posts:
            score += min(10, metrics.posts)

        if score == 0 and profile.projects:
            score = len(profile.projects) * 10

        return _clamp(score)

    def _score_leadership(self, profile: CanonicalProfile) -> int:
        score = 0

        for role in profile.leadership_roles:
            role_lower = role.lower()
            if not any(k in role_lower for k in LEADERSHIP_KEYWORDS):
                continue
            if any(k in role_lower for k in EXECUTIVE_KEYWORDS):
                score += 25
            elif any(k in role_lower for k in DIRECTOR_KEYWORDS):
                score += 20
            elif any(k in role_lower for k in LEAD_KEYWORDS):
                score += 15
            else:
                score += 10

        for company in profile.companies:
            if any(k in company.role.lower() for k in LEADERSHIP_KEYWORDS):
                score += 10

        followers = profile.activity_metrics.followers or 0
        score += _tier(followers, [(10000, 20), (5000, 15), (1000, 10), (500, 5)])

        return _clamp(score)

    def _score_impact(self, profile: CanonicalProfile) -> int:
        score = _tier(
            _total_stars(profile.projects),
            [(10000, 40), (5000, 35), (1000, 30), (500, 25), (100, 20), (10, 10)],
        )
        score += _tier(_total_forks(profile.projects), [(1000, 20), (500, 15), (100, 10), (10, 5)])

        connections = profile.activity_metrics.connections or 0
        score += _tier(connections, [(10000, 20), (5000, 15), (1000, 10), (500, 5)])

        if any(p in c.name.lower() for c in profile.companies for p in PRESTIGE_COMPANIES):
            score += 15

        score += min(15, len(profile.achievements) * 5)
        return _clamp(score)

    def _score_experience(self, profile: CanonicalProfile) -> int:
        years = profile.years_experience
        for minimum, score in EXPERIENCE_SCORES:
            if years >= minimum:
                return score
        return EXPERIENCE_FLOOR_SCORE

    def calculate_total_power(self, stats: BattleStatistics) -> int:
        w = self._weights
        return _round_half_up(
            stats.technical * w.skills_depth
            + stats.strategy * STRATEGY_COEFFICIENT
            + stats.execution * w.activity
            + stats.leadership * w.leadership
            + stats.impact * w.impact
            + stats.experience * w.experience
        )

    def determine_archetype(self, stats: BattleStatistics) -> Archetype:
        values = {name: getattr(stats, name) for name in _STAT_ORDER}
        ranked = sorted(_STAT_ORDER, key=lambda name: values[name], reverse=True)
        top = ranked[0]

        avg = sum(values.values()) / len(values)
        deviation = sum(abs(v - avg) for v in values.values()) / len(values)
        if deviation < BALANCED_DEVIATION:
            return "The Warrior"

        # first match wins
        if stats.leadership >= 70:
            return "The Commander"
        if top == "technical" and stats.experience < 50:
            return "The Prodigy"
        if top == "technical" and stats.leadership < 30 and stats.impact < 40:
            return "The Shadow"
        if top == "experience" and stats.leadership >= 50:
            return "The Veteran"
        if top == "impact" and stats.strategy >= 60:
            return "The Visionary"
        if top == "strategy" and stats.leadership >= 50:
            return "The Strategist"
        if top in ("execution", "technical"):
            return "The Executor"
        return "The Warrior"

    def transform(self, profile: CanonicalProfile, stats: BattleStatistics) -> FighterRecord:
        """Wrap a scored profile into its fighter record."""
        archetype = self.determine_archetype(stats)
        return FighterRecord(
            profile=profile,
            stats=stats,
            total_power=self.calculate_total_power(stats),
            archetype=archetype,
            techniques=self._generate_techniques(profile.skills),
            guild=_format_guild(profile.companies),
            guild_history=[c.name for c in profile.companies],
            battle_experience=format_battle_experience(profile.years_experience),
            legendary_scrolls=list(profile.certifications),
            missions=[
                Mission(
                    name=p.name,
                    rank=mission_rank(p),
                    description=p.description or "A mysterious mission",
                )
                for p in profile.projects[:5]
            ],
            special_ability=ABILITY_TEMPLATES[archetype].format(
                skill=profile.skills[0] if profile.skills else "coding"
            ),
        )

    def _generate_techniques(self, skills: list[str]) -> list[str]:
        techniques = []
        for skill in skills[:6]:
            fixed = TECHNIQUE_NAMES.get(skill.lower())
            if fixed:
                techniques.append(fixed)
            else:
                prefix = self._rng.choice(TECHNIQUE_PREFIXES)
                suffix = self._rng.choice(TECHNIQUE_SUFFIXES)
                techniques.append(f"{prefix} {skill} {suffix}")
        return techniques


def _format_guild(companies: list[Company]) -> str:
    current = next((c for c in companies if c.current), None)
    if current:
        return f"{current.name} Guild"
    return f"{companies[0].name} Guild" if companies else "Independent Fighter"


def format_battle_experience(years: int) -> str:
    for minimum, label in EXPERIENCE_LABELS:
        if years >= minimum:
            return label
    return NEWCOMER_LABEL


def mission_rank(project: Project) -> MissionRank:
    score = (project.stars or 0) + (project.forks or 0) * 2
    if score > 1000:
        return "S"
    if score > 500:
        return "A"
    if score > 100:
        return "B"
    if score > 10:
        return "C"
    return "D"
