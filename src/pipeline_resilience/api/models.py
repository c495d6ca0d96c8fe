"""
API-specific request and response models for FastAPI endpoints.

These models wrap the engine's value objects (Fault, DecisionOptions,
Decision) with the request/response envelopes the workflow host exchanges
over HTTP Request nodes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from pipeline_resilience.models.decisions import DecisionOptions, DegradationStrategy
from pipeline_resilience.models.fault import Fault


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DecideRequest(BaseModel):
    """Request for the decision endpoint."""

    fault: Fault = Field(
        default_factory=Fault,
        description="Fault observed by the pipeline step",
        examples=[{"status": 429, "message": "rate limit reached"}],
    )
    options: DecisionOptions = Field(
        default_factory=DecisionOptions,
        description="Attempt counters, continue flag, current model and identifiers",
    )


class RetryDelayRequest(BaseModel):
    """Request for a standalone backoff computation."""

    attempt_number: int = Field(default=1, ge=1, description="Attempts already made (1-indexed)")
    base_delay_ms: Optional[int] = Field(
        default=None, ge=0, description="Base delay (defaults to configured default delay)"
    )


class RetryDelayResponse(BaseModel):
    """Response for the backoff computation endpoint."""

    attempt_number: int
    delay_ms: int = Field(ge=0)


class FallbackResponse(BaseModel):
    """Response for fallback chain lookup."""

    model_id: str = Field(description="Model that failed")
    tried_count: int = Field(ge=0, description="Fallbacks already tried by the caller")
    chain: list[str] = Field(default_factory=list, description="Configured chain, in order")
    next_fallback: Optional[str] = Field(
        default=None, description="Model at position tried_count (null when exhausted)"
    )


class DegradationCatalogResponse(BaseModel):
    """Response listing the degradation catalogue."""

    strategies: list[DegradationStrategy]


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str = Field(
        description="Overall health status",
        examples=["healthy"]
    )
    version: str = Field(
        description="Service version",
        examples=["0.1.0"]
    )
    checks: dict[str, str] = Field(
        description="Component-specific health status",
        examples=[{"engine": "ok", "fallback_chains": "ok"}]
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Health check timestamp (UTC)"
    )


class VersionResponse(BaseModel):
    """Response for version info endpoint."""

    version: str = Field(description="Application version")
    environment: str = Field(description="Deployment environment")
    engine_config: dict[str, Any] = Field(
        description="Effective retry/backoff configuration",
        examples=[{
            "default_retries": 3,
            "default_retry_delay_ms": 15000,
            "use_exponential_backoff": True,
            "max_backoff_ms": 120000,
        }]
    )


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(
        description="Error code or type",
        examples=["invalid_request", "internal_error"]
    )
    message: str = Field(
        description="Human-readable error message"
    )
    details: Optional[Any] = Field(
        default=None,
        description="Additional error details (e.g., validation errors)"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Error timestamp (UTC)"
    )
