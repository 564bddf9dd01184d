"""Shared pytest fixtures."""

import random
from typing import Any
from unittest.mock import AsyncMock

import pytest

from config.config_loader import (
    ActionBookConfig,
    BrightDataConfig,
    GitHubConfig,
    ModelConfig,
    PromptsConfig,
    WikipediaConfig,
)
from devduel.models import (
    ActivityMetrics,
    CanonicalProfile,
    Company,
    Project,
)
from devduel.providers.base import Completion, NarrativeProvider, PromptSpec
from devduel.sources.base import ProfileSource, SourceError


@pytest.fixture
def sample_model_config() -> ModelConfig:
    return ModelConfig(
        name="test_model",
        sdk="openai",
        model="test-model-1",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
        base_url=None,
    )


@pytest.fixture
def sample_prompts_config() -> PromptsConfig:
    return PromptsConfig(
        system='Return JSON: {"rounds": []}',
        matchup=(
            "1: {name1} ({title1}) of {guild1}, {archetype1} {power1}, skills {skills1}, "
            "{summary1}, {years1}y, {posts1} posts, {followers1} followers\n"
            "2: {name2} ({title2}) of {guild2}, {archetype2} {power2}, skills {skills2}, "
            "{summary2}, {years2}y, {posts2} posts, {followers2} followers"
        ),
    )


@pytest.fixture
def brightdata_config() -> BrightDataConfig:
    return BrightDataConfig(
        api_key_env="TEST_BRIGHTDATA_KEY",
        base_url="https://brightdata.test/datasets/v3",
        timeout_sec=5,
        datasets={"linkedin": "gd_linkedin", "generic": "gd_generic"},
    )


@pytest.fixture
def actionbook_config() -> ActionBookConfig:
    return ActionBookConfig(api_key_env="TEST_ACTIONBOOK_KEY", base_url="https://actionbook.test/v1", timeout_sec=5)


@pytest.fixture
def github_config() -> GitHubConfig:
    return GitHubConfig(base_url="https://api.github.test", timeout_sec=5)


@pytest.fixture
def wikipedia_config() -> WikipediaConfig:
    return WikipediaConfig(
        rest_url="https://wiki.test/api/rest_v1/page/summary/",
        api_url="https://wiki.test/w/api.php",
        timeout_sec=5,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def senior_profile() -> CanonicalProfile:
    return CanonicalProfile(
        name="Grace Hopper",
        title="Rear Admiral",
        skills=["Python", "Rust", "Kubernetes", "System Design"],
        years_experience=22,
        leadership_roles=["Director of Engineering", "Tech Lead"],
        projects=[
            Project(name="COBOL", description="Business language", technologies=["COBOL"], stars=12000, forks=900),
            Project(name="A-0", description="First compiler", stars=400, forks=20),
        ],
        achievements=["Compiler pioneer", "Presidential Medal of Freedom"],
        activity_metrics=ActivityMetrics(commits=6000, contributions=2500, followers=12000, repositories=60),
        certifications=["Navy Officer"],
        companies=[Company(name="US Navy", role="Director", current=True)],
        summary="Invented the first compiler",
        source_type="wikipedia",
    )


@pytest.fixture
def junior_profile() -> CanonicalProfile:
    return CanonicalProfile(
        name="Sam Newbie",
        title="Intern",
        skills=["HTML"],
        years_experience=0,
        source_type="generic",
    )


class MockNarrator(NarrativeProvider):
    """Test double NarrativeProvider."""

    def __init__(self, provider_name: str = "mock", response_content: str = "{}") -> None:
        self._name = provider_name
        self._response_content = response_content
        # Shadow the class methods with AsyncMocks at the instance level.
        # ABC check passes because both are defined in the class body below.
        self.complete = AsyncMock(  # type: ignore[assignment]
            return_value=Completion(
                provider=provider_name,
                model="mock-model",
                content=response_content,
                latency_sec=0.1,
                token_count=10,
            )
        )
        self.ping = AsyncMock(return_value=None)  # type: ignore[assignment]

    def name(self) -> str:
        return self._name

    def model_string(self) -> str:
        return "mock-model"

    async def complete(self, spec: PromptSpec) -> Completion:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""
        return Completion(
            provider=self._name,
            model="mock-model",
            content=self._response_content,
            latency_sec=0.1,
            token_count=10,
        )

    async def ping(self) -> None:  # type: ignore[override]
        """Default implementation; replaced by AsyncMock in __init__."""


class FakeSource(ProfileSource):
    """Test double ProfileSource returning a fixed payload or raising."""

    def __init__(
        self,
        payload: dict[str, Any] | None = None,
        error: Exception | None = None,
        source_name: str = "fake",
        tool_label: str = "Fake Tool",
    ) -> None:
        self._payload = payload
        self._error = error
        self._name = source_name
        self._label = tool_label
        self.calls: list[str] = []

    def name(self) -> str:
        return self._name

    def label(self) -> str:
        return self._label

    async def fetch(self, url: str) -> dict[str, Any]:
        self.calls.append(url)
        if self._error is not None:
            raise self._error
        if self._payload is None:
            raise SourceError(self._name, "nothing configured")
        return self._payload


def six_rounds(attackers: list[str] | None = None, damage: Any = 70) -> list[dict[str, Any]]:
    attackers = attackers or ["profile1", "profile2"] * 3
    return [
        {"roundNumber": i + 1, "attacker": a, "roast": f"roast {i + 1}", "damage": damage, "reaction": f"ouch {i + 1}"}
        for i, a in enumerate(attackers)
    ]


@pytest.fixture
def mock_narrator() -> MockNarrator:
    return MockNarrator()
