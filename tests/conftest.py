"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import json
import random
from pathlib import Path
from typing import Any, Dict

import pytest

from pipeline_resilience.config import ResilienceSettings, Settings
from pipeline_resilience.resilience.engine import DecisionEngine


@pytest.fixture
def test_settings() -> Settings:
    """Test settings with safe defaults for local testing.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            engine = DecisionEngine(test_settings.model_copy(update={"MAX_BACKOFF_MS": 1000}).resilience())
    """
    return Settings(
        # === Application ===
        APP_NAME="Pipeline Resilience Engine (Test)",
        APP_VERSION="0.1.0",
        DEBUG=True,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",

        # === Retry & Backoff ===
        DEFAULT_RETRIES=3,
        DEFAULT_RETRY_DELAY_MS=15000,
        USE_EXPONENTIAL_BACKOFF=True,
        BACKOFF_MULTIPLIER=2.0,
        MAX_BACKOFF_MS=120000,
        JITTER_RATIO=0.1,

        # === Fallback Models ===
        MODEL_FALLBACKS={
            "model-A": ["model-B", "model-C"],
            "model-B": ["model-C"],
        },
        MAX_FALLBACK_DEPTH=3,

        # === Monitoring ===
        PROMETHEUS_ENABLED=False,
    )


@pytest.fixture
def resilience_settings(test_settings: Settings) -> ResilienceSettings:
    """Immutable engine configuration built from test settings."""
    return test_settings.resilience()


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic random source for jitter."""
    return random.Random(42)


@pytest.fixture
def engine(resilience_settings: ResilienceSettings, seeded_rng: random.Random) -> DecisionEngine:
    """DecisionEngine with test chains and a seeded jitter source."""
    return DecisionEngine(resilience_settings, rng=seeded_rng)


@pytest.fixture
def create_engine(seeded_rng: random.Random):
    """Factory fixture to build an engine with custom configuration.

    Usage:
        def test_something(create_engine):
            engine = create_engine(model_fallbacks={}, use_exponential_backoff=False)
    """
    def _create(**overrides: Any) -> DecisionEngine:
        return DecisionEngine(ResilienceSettings(**overrides), rng=seeded_rng)

    return _create


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_faults(fixtures_dir: Path) -> list[Dict[str, Any]]:
    """Load sample fault payloads with their expected kinds."""
    with open(fixtures_dir / "sample_faults.json") as f:
        return json.load(f)
