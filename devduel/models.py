"""Pure dataclasses for the DevDuel pipeline. No logic, no deps."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

Platform = Literal["linkedin", "github", "wikipedia", "generic"]
FighterSlot = Literal["profile1", "profile2"]
Winner = Literal["profile1", "profile2", "draw"]
DuelStatus = Literal[
    "pending",
    "scraping",
    "normalizing",
    "scoring",
    "transforming",
    "generating_commentary",
    "complete",
    "error",
]
Archetype = Literal[
    "The Strategist",    # high strategy + leadership
    "The Executor",      # high execution + technical
    "The Visionary",     # high impact + strategy
    "The Warrior",       # balanced
    "The Prodigy",       # high technical, lower experience
    "The Veteran",       # high experience + leadership
    "The Shadow",        # high technical, low visibility
    "The Commander",     # highest leadership
]
MissionRank = Literal["S", "A", "B", "C", "D"]


@dataclass(frozen=True)
class RawAcquisition:
    platform: Platform
    source_url: str
    payload: dict[str, Any]
    captured_at: datetime
    synthetic: bool = False  # payload["profile"] is already a CanonicalProfile


@dataclass
class Project:
    name: str
    description: str = ""
    technologies: list[str] = field(default_factory=list)
    url: str = ""
    stars: int = 0
    forks: int = 0


@dataclass
class ActivityMetrics:
    commits: int | None = None
    contributions: int | None = None
    followers: int | None = None
    following: int | None = None
    repositories: int | None = None
    pull_requests: int | None = None
    issues: int | None = None
    posts: int | None = None
    connections: int | None = None


@dataclass
class Company:
    name: str
    role: str = ""
    duration: str = ""
    current: bool = False


@dataclass
class Education:
    institution: str
    degree: str = ""
    field: str = ""
    year: int | None = None


@dataclass
class CanonicalProfile:
    name: str = "Unknown"
    title: str = ""
    avatar: str = ""
    location: str = ""
    skills: list[str] = field(default_factory=list)
    years_experience: int = 0
    leadership_roles: list[str] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    achievements: list[str] = field(default_factory=list)
    activity_metrics: ActivityMetrics = field(default_factory=ActivityMetrics)
    certifications: list[str] = field(default_factory=list)
    companies: list[Company] = field(default_factory=list)
    education: list[Education] = field(default_factory=list)
    summary: str = ""
    source_url: str = ""
    source_type: Platform = "generic"


@dataclass(frozen=True)
class BattleStatistics:
    technical: int
    strategy: int
    execution: int
    leadership: int
    impact: int
    experience: int


@dataclass(frozen=True)
class Mission:
    name: str
    rank: MissionRank
    description: str


@dataclass(frozen=True)
class FighterRecord:
    profile: CanonicalProfile
    stats: BattleStatistics
    total_power: int
    archetype: Archetype
    techniques: list[str]
    guild: str
    guild_history: list[str]
    battle_experience: str
    legendary_scrolls: list[str]
    missions: list[Mission]
    special_ability: str


@dataclass(frozen=True)
class WinnerDecision:
    winner: Winner
    margin: int


@dataclass
class RoastRound:
    round_number: int
    attacker: FighterSlot
    roast: str
    damage: int
    reaction: str


@dataclass
class BattleCommentary:
    introduction: str
    rounds: list[RoastRound]
    verdict: str
    winner: Winner


@dataclass
class LogEntry:
    timestamp: datetime
    stage: DuelStatus
    message: str
    data: dict[str, Any] | None = None


@dataclass
class DuelSession:
    id: str
    created_at: datetime
    url1: str
    url2: str
    status: DuelStatus = "pending"
    fighter1: FighterRecord | None = None
    fighter2: FighterRecord | None = None
    commentary: BattleCommentary | None = None
    winner: Winner | None = None
    winner_name: str | None = None
    logs: list[LogEntry] = field(default_factory=list)


@dataclass(frozen=True)
class ProgressEvent:
    session_id: str
    stage: DuelStatus
    message: str
    progress: int
    timestamp: datetime
    data: dict[str, Any] | None = None


@dataclass
class DuelResult:
    id: str
    status: DuelStatus
    fighter1: FighterRecord | None = None
    fighter2: FighterRecord | None = None
    commentary: BattleCommentary | None = None
    winner: Winner | None = None
    winner_name: str | None = None


@dataclass
class StatusReport:
    status: DuelStatus
    progress: int
    logs: list[LogEntry] = field(default_factory=list)
