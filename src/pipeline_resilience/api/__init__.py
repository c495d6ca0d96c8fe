"""
FastAPI API routes and endpoints.

- routes.py: Decision, classification, backoff, fallback and degradation endpoints
- dependencies.py: Dependency injection for settings and the decision engine
- models.py: API-specific request/response models
- middleware.py: Request tracing (X-Request-ID bound into structlog context)
- error_handlers.py: Exception handlers for structured error responses
"""

from pipeline_resilience.api import dependencies, error_handlers, models
from pipeline_resilience.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]
