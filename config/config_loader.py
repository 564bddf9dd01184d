"""Load settings.yaml into typed dataclasses. Resolves which API keys are present."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class ModelConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: int
    max_tokens: int
    temperature: float = 0.9
    base_url: str | None = None


@dataclass
class PromptsConfig:
    system: str
    matchup: str


@dataclass
class PipelineConfig:
    ticker_interval_sec: float = 4.0
    commentary_timeout_sec: float = 45.0
    health_timeout_sec: float = 15.0
    output_dir: Path = Path("./duels")


@dataclass
class BrightDataConfig:
    api_key_env: str
    base_url: str
    timeout_sec: float
    datasets: dict[str, str] = field(default_factory=dict)


@dataclass
class ActionBookConfig:
    api_key_env: str
    base_url: str
    timeout_sec: float


@dataclass
class GitHubConfig:
    base_url: str
    timeout_sec: float
    repos_per_page: int = 20


@dataclass
class WikipediaConfig:
    rest_url: str
    api_url: str
    timeout_sec: float
    user_agent: str = "DevDuel/1.0"


@dataclass
class SourcesConfig:
    brightdata: BrightDataConfig
    actionbook: ActionBookConfig
    github: GitHubConfig
    wikipedia: WikipediaConfig


@dataclass
class ScoringWeights:
    skills_depth: float = 0.30
    experience: float = 0.20
    impact: float = 0.25
    leadership: float = 0.15
    activity: float = 0.10


@dataclass
class AppConfig:
    pipeline: PipelineConfig
    sources: SourcesConfig
    models: dict[str, ModelConfig]
    prompts: PromptsConfig
    narrator: str
    weights: ScoringWeights = field(default_factory=ScoringWeights)
    available_providers: set[str] = field(default_factory=set)


def _load_sources(raw: dict) -> SourcesConfig:
    bd = raw["brightdata"]
    ab = raw["actionbook"]
    gh = raw["github"]
    wp = raw["wikipedia"]
    return SourcesConfig(
        brightdata=BrightDataConfig(
            api_key_env=bd["api_key_env"],
            base_url=bd["base_url"],
            timeout_sec=float(bd["timeout_sec"]),
            datasets={k: str(v) for k, v in bd.get("datasets", {}).items()},
        ),
        actionbook=ActionBookConfig(
            api_key_env=ab["api_key_env"],
            base_url=ab["base_url"],
            timeout_sec=float(ab["timeout_sec"]),
        ),
        github=GitHubConfig(
            base_url=gh["base_url"],
            timeout_sec=float(gh["timeout_sec"]),
            repos_per_page=int(gh.get("repos_per_page", 20)),
        ),
        wikipedia=WikipediaConfig(
            rest_url=wp["rest_url"],
            api_url=wp["api_url"],
            timeout_sec=float(wp["timeout_sec"]),
            user_agent=str(wp.get("user_agent", "DevDuel/1.0")),
        ),
    )


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Models without an API key in the environment are left out of
    available_providers; the narrator then falls back to the fixed template.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    pipeline_raw = raw.get("pipeline", {})
    pipeline = PipelineConfig(
        ticker_interval_sec=float(pipeline_raw.get("ticker_interval_sec", 4.0)),
        commentary_timeout_sec=float(pipeline_raw.get("commentary_timeout_sec", 45.0)),
        health_timeout_sec=float(pipeline_raw.get("health_timeout_sec", 15.0)),
        output_dir=Path(pipeline_raw.get("output_dir", "./duels")),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        system=prompts_raw["system"],
        matchup=prompts_raw["matchup"],
    )

    weights_raw = raw.get("scoring", {}).get("weights", {})
    weights = ScoringWeights(**{k: float(v) for k, v in weights_raw.items()})

    models: dict[str, ModelConfig] = {}
    available_providers: set[str] = set()

    for provider_name, model_raw in raw["models"].items():
        model_cfg = ModelConfig(
            name=provider_name,
            sdk=model_raw["sdk"],
            model=model_raw["model"],
            api_key_env=model_raw["api_key_env"],
            timeout_sec=int(model_raw["timeout_sec"]),
            max_tokens=int(model_raw["max_tokens"]),
            temperature=float(model_raw.get("temperature", 0.9)),
            base_url=model_raw.get("base_url"),
        )
        models[provider_name] = model_cfg

        api_key = os.environ.get(model_raw["api_key_env"], "").strip()
        if api_key:
            available_providers.add(provider_name)
            logger.info("Narrator model available: %s", provider_name)
        else:
            logger.info(
                "Narrator model skipped (no API key): %s, set %s in .env",
                provider_name,
                model_raw["api_key_env"],
            )

    return AppConfig(
        pipeline=pipeline,
        sources=_load_sources(raw["sources"]),
        models=models,
        prompts=prompts,
        narrator=str(raw.get("narrator", "openai")),
        weights=weights,
        available_providers=available_providers,
    )
