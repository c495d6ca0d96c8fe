"""Integration test fixtures (API client with injected engine).

The service has no external dependencies, so integration tests run the full
FastAPI app in-process through TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from pipeline_resilience.api.dependencies import get_decision_engine
from pipeline_resilience.main import app


@pytest.fixture
def client():
    """TestClient against the app with its configured (default) engine."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def test_client(engine):
    """TestClient whose decision engine uses the test chains and a seeded rng.

    Overrides are cleared after the test.
    """
    app.dependency_overrides[get_decision_engine] = lambda: engine
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
