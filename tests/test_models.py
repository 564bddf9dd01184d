"""Tests for devduel/models.py dataclasses."""

import dataclasses
from datetime import datetime, timezone

import pytest

from devduel.models import (
    ActivityMetrics,
    BattleStatistics,
    CanonicalProfile,
    DuelSession,
    Project,
    RawAcquisition,
    StatusReport,
)


def test_canonical_profile_defaults():
    p = CanonicalProfile()
    assert p.name == "Unknown"
    assert p.skills == []
    assert p.years_experience == 0
    assert p.source_type == "generic"
    assert p.activity_metrics == ActivityMetrics()


def test_canonical_profile_lists_not_shared():
    a = CanonicalProfile()
    b = CanonicalProfile()
    a.skills.append("Python")
    assert b.skills == []


def test_project_defaults():
    p = Project(name="linux")
    assert p.stars == 0
    assert p.forks == 0
    assert p.technologies == []


def test_activity_metrics_all_optional():
    m = ActivityMetrics()
    assert all(value is None for value in dataclasses.asdict(m).values())


def test_raw_acquisition_is_frozen():
    raw = RawAcquisition(
        platform="github",
        source_url="https://github.com/torvalds",
        payload={"login": "torvalds"},
        captured_at=datetime.now(timezone.utc),
    )
    assert raw.synthetic is False
    with pytest.raises(dataclasses.FrozenInstanceError):
        raw.synthetic = True  # type: ignore[misc]


def test_battle_statistics_is_frozen():
    stats = BattleStatistics(technical=1, strategy=2, execution=3, leadership=4, impact=5, experience=6)
    with pytest.raises(dataclasses.FrozenInstanceError):
        stats.technical = 99  # type: ignore[misc]


def test_duel_session_defaults():
    s = DuelSession(id="abc", created_at=datetime.now(timezone.utc), url1="a", url2="b")
    assert s.status == "pending"
    assert s.fighter1 is None
    assert s.winner is None
    assert s.logs == []


def test_status_report_default_logs():
    assert StatusReport(status="scoring", progress=55).logs == []
