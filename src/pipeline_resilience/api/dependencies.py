"""
FastAPI dependency injection for the resilience service.

Provides singleton instances of the settings and the decision engine. The
engine is immutable after construction, so one instance serves all requests.
Tests swap either through app.dependency_overrides.
"""

from functools import lru_cache

from pipeline_resilience.config import Settings
from pipeline_resilience.resilience.engine import DecisionEngine


@lru_cache()
def get_settings() -> Settings:
    """
    Get settings singleton.

    Returns:
        Settings instance loaded from environment / .env
    """
    return Settings()


@lru_cache()
def get_decision_engine() -> DecisionEngine:
    """
    Get decision engine singleton.

    Built from an immutable snapshot of the settings; the engine never
    reads the settings object afterwards.

    Returns:
        DecisionEngine instance
    """
    return DecisionEngine(get_settings().resilience())
