"""Tests for config/config_loader.py."""

from pathlib import Path

import pytest
import yaml

from config.config_loader import AppConfig, ModelConfig, PromptsConfig, ScoringWeights, load_config


@pytest.fixture
def minimal_settings(tmp_path: Path) -> Path:
    """Write a minimal valid settings.yaml to a temp path."""
    settings = {
        "pipeline": {
            "ticker_interval_sec": 2,
            "commentary_timeout_sec": 30,
            "output_dir": "./duels",
        },
        "sources": {
            "brightdata": {
                "api_key_env": "TEST_BD_KEY",
                "base_url": "https://bd.test",
                "timeout_sec": 60,
                "datasets": {"linkedin": "gd_1", "generic": "gd_2"},
            },
            "actionbook": {"api_key_env": "TEST_AB_KEY", "base_url": "https://ab.test", "timeout_sec": 10},
            "github": {"base_url": "https://gh.test", "timeout_sec": 10},
            "wikipedia": {"rest_url": "https://wp.test/summary/", "api_url": "https://wp.test/api.php", "timeout_sec": 10},
        },
        "narrator": "claude",
        "models": {
            "claude": {
                "sdk": "anthropic",
                "model": "claude-sonnet-4-20250514",
                "api_key_env": "TEST_CLAUDE_KEY",
                "timeout_sec": 45,
                "max_tokens": 1500,
            },
            "grok": {
                "sdk": "openai",
                "model": "grok-3-mini",
                "api_key_env": "TEST_GROK_KEY",
                "base_url": "https://api.x.ai/v1",
                "timeout_sec": 45,
                "max_tokens": 1500,
                "temperature": 0.7,
            },
        },
        "scoring": {"weights": {"impact": 0.5}},
        "prompts": {
            "system": 'Return JSON {"rounds": []}',
            "matchup": "{name1} vs {name2}",
        },
    }
    path = tmp_path / "settings.yaml"
    path.write_text(yaml.dump(settings), encoding="utf-8")
    return path


def test_load_config_returns_app_config(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config, AppConfig)


def test_load_config_pipeline(minimal_settings):
    config = load_config(minimal_settings)
    assert config.pipeline.ticker_interval_sec == 2.0
    assert config.pipeline.commentary_timeout_sec == 30.0
    assert config.pipeline.health_timeout_sec == 15.0  # default
    assert isinstance(config.pipeline.output_dir, Path)


def test_load_config_sources(minimal_settings):
    config = load_config(minimal_settings)
    assert config.sources.brightdata.datasets == {"linkedin": "gd_1", "generic": "gd_2"}
    assert config.sources.github.repos_per_page == 20
    assert config.sources.wikipedia.user_agent == "DevDuel/1.0"


def test_load_config_models(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config.models["claude"], ModelConfig)
    assert config.models["claude"].temperature == 0.9
    assert config.models["claude"].base_url is None
    assert config.models["grok"].base_url == "https://api.x.ai/v1"
    assert config.models["grok"].temperature == 0.7


def test_load_config_weights_partial_override(minimal_settings):
    config = load_config(minimal_settings)
    assert config.weights == ScoringWeights(impact=0.5)


def test_load_config_prompts_kept_verbatim(minimal_settings):
    config = load_config(minimal_settings)
    assert isinstance(config.prompts, PromptsConfig)
    assert '{"rounds": []}' in config.prompts.system
    assert "{name1}" in config.prompts.matchup


def test_load_config_available_providers_with_key(minimal_settings, monkeypatch):
    monkeypatch.setenv("TEST_CLAUDE_KEY", "sk-test-key")
    monkeypatch.delenv("TEST_GROK_KEY", raising=False)
    config = load_config(minimal_settings)
    assert config.available_providers == {"claude"}
    assert config.narrator == "claude"


def test_load_config_blank_key_is_unavailable(minimal_settings, monkeypatch):
    monkeypatch.setenv("TEST_CLAUDE_KEY", "   ")
    config = load_config(minimal_settings)
    assert "claude" not in config.available_providers


def test_load_config_missing_file():
    with pytest.raises(FileNotFoundError):
        load_config(Path("/nonexistent/settings.yaml"))


def test_shipped_settings_load():
    config = load_config()
    assert config.narrator in config.models
    assert config.sources.brightdata.datasets["linkedin"]
    # system prompt carries literal JSON braces and is never str.format()ed
    assert "{" in config.prompts.system
    assert "{followers2}" in config.prompts.matchup
