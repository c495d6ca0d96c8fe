"""
Unit tests for settings loading and the engine configuration snapshot.
"""

import pytest
from pydantic import ValidationError

from pipeline_resilience.config import DEFAULT_MODEL_FALLBACKS, ResilienceSettings, Settings


def test_defaults(monkeypatch):
    """Test defaults match the documented engine configuration."""
    monkeypatch.delenv("MODEL_FALLBACKS", raising=False)
    settings = Settings(_env_file=None)

    assert settings.DEFAULT_RETRIES == 3
    assert settings.DEFAULT_RETRY_DELAY_MS == 15000
    assert settings.USE_EXPONENTIAL_BACKOFF is True
    assert settings.MAX_BACKOFF_MS == 120000
    assert settings.MODEL_FALLBACKS == DEFAULT_MODEL_FALLBACKS


def test_env_overrides(monkeypatch):
    """Test values are read from the environment, including JSON chains."""
    monkeypatch.setenv("DEFAULT_RETRIES", "5")
    monkeypatch.setenv("USE_EXPONENTIAL_BACKOFF", "false")
    monkeypatch.setenv("MODEL_FALLBACKS", '{"gpt-4o": ["gpt-4o-mini"]}')

    settings = Settings(_env_file=None)

    assert settings.DEFAULT_RETRIES == 5
    assert settings.USE_EXPONENTIAL_BACKOFF is False
    assert settings.MODEL_FALLBACKS == {"gpt-4o": ["gpt-4o-mini"]}


@pytest.mark.parametrize(
    "overrides",
    [
        {"DEFAULT_RETRIES": 0},
        {"DEFAULT_RETRY_DELAY_MS": -1},
        {"MAX_BACKOFF_MS": -5},
        {"BACKOFF_MULTIPLIER": 0.5},
        {"JITTER_RATIO": 1.5},
    ],
)
def test_invalid_ranges(overrides):
    """Test out-of-range settings are rejected at load time."""
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **overrides)


def test_resilience_snapshot(test_settings):
    """Test the snapshot is immutable and detached from the settings."""
    snapshot = test_settings.resilience()

    assert isinstance(snapshot, ResilienceSettings)
    assert snapshot.model_fallbacks == {"model-A": ("model-B", "model-C"), "model-B": ("model-C",)}

    test_settings.MODEL_FALLBACKS["model-A"].append("model-Z")
    assert snapshot.model_fallbacks["model-A"] == ("model-B", "model-C")

    with pytest.raises(ValidationError):
        snapshot.default_retries = 10


def test_resilience_settings_defaults():
    """Test ResilienceSettings carries the default chain table."""
    settings = ResilienceSettings()

    assert settings.model_fallbacks["gpt-4o"] == ("gpt-4o-mini", "claude-sonnet-4-20250514")
    assert settings.jitter_ratio == 0.1
