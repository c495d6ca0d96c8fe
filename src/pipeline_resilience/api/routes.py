"""
API routes for resilience decisions.

The workflow host calls these from HTTP Request nodes when a step fails:
POST /decide for the full decision, or the component endpoints when a
workflow only needs one piece (classification, a backoff delay, a fallback
model, a degradation strategy).
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Query, status

from pipeline_resilience.api.dependencies import get_decision_engine, get_settings
from pipeline_resilience.api.models import (
    DecideRequest,
    DegradationCatalogResponse,
    FallbackResponse,
    HealthResponse,
    RetryDelayRequest,
    RetryDelayResponse,
    VersionResponse,
)
from pipeline_resilience.config import Settings
from pipeline_resilience.models.decisions import Decision, DegradationResult, ErrorClassification
from pipeline_resilience.models.enums import DecisionAction
from pipeline_resilience.models.fault import Fault
from pipeline_resilience.monitoring.metrics import (
    decisions_total,
    degradations_total,
    fallbacks_total,
    retry_delay_seconds,
)
from pipeline_resilience.resilience import degradation
from pipeline_resilience.resilience.engine import DecisionEngine

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.post(
    "/decide",
    response_model=Decision,
    status_code=status.HTTP_200_OK,
    summary="Decide the next step after a failure",
    description="""
    Classify the fault and return exactly one action:
    RETRY (with delay_ms and next_attempt), USE_FALLBACK (with fallback_model),
    CONTINUE_WITH_ERROR or FAIL.

    The caller owns attempt_number and which fallback tier it is on; each
    call is independent.
    """,
    responses={
        200: {"description": "Decision computed"},
        400: {"description": "Invalid request format"},
    },
)
async def decide(
    request: DecideRequest,
    engine: DecisionEngine = Depends(get_decision_engine),
) -> Decision:
    """
    Decide what the pipeline should do after a failed step.

    Args:
        request: Fault and decision options
        engine: Decision engine (injected)

    Returns:
        Decision
    """
    decision = engine.decide(request.fault, request.options)

    decisions_total.labels(
        action=decision.action.value,
        kind=decision.classification.kind.value,
    ).inc()
    if decision.action is DecisionAction.RETRY:
        retry_delay_seconds.labels(kind=decision.classification.kind.value).observe(
            decision.delay_ms / 1000
        )
    elif decision.action is DecisionAction.USE_FALLBACK:
        fallbacks_total.labels(
            from_model=request.options.current_model_id,
            to_model=decision.fallback_model,
        ).inc()

    return decision


@router.post(
    "/classify",
    response_model=ErrorClassification,
    summary="Classify a fault",
)
async def classify_fault(
    fault: Fault,
    engine: DecisionEngine = Depends(get_decision_engine),
) -> ErrorClassification:
    """Map a fault to its taxonomy entry."""
    return engine.classify(fault)


@router.post(
    "/retry-delay",
    response_model=RetryDelayResponse,
    summary="Compute a backoff delay",
)
async def retry_delay(
    request: RetryDelayRequest,
    engine: DecisionEngine = Depends(get_decision_engine),
) -> RetryDelayResponse:
    """Jittered exponential backoff for the given attempt."""
    delay_ms = engine.compute_backoff(request.attempt_number, request.base_delay_ms)
    return RetryDelayResponse(attempt_number=request.attempt_number, delay_ms=delay_ms)


@router.get(
    "/fallbacks/{model_id:path}",
    response_model=FallbackResponse,
    summary="Look up a model's fallback chain",
)
async def get_fallback(
    model_id: str,
    tried_count: int = Query(default=0, ge=0, description="Fallbacks already tried"),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> FallbackResponse:
    """Return the configured chain and the next fallback for tried_count."""
    return FallbackResponse(
        model_id=model_id,
        tried_count=tried_count,
        chain=list(engine.fallbacks.chain_for(model_id)),
        next_fallback=engine.next_fallback(model_id, tried_count),
    )


@router.get(
    "/degradation",
    response_model=DegradationCatalogResponse,
    summary="List degradation strategies",
)
async def list_degradation_strategies() -> DegradationCatalogResponse:
    """Return the fixed degradation catalogue."""
    return DegradationCatalogResponse(strategies=degradation.list_strategies())


@router.post(
    "/degradation/{scenario}",
    response_model=DegradationResult,
    summary="Apply a degradation strategy",
    description="""
    Look up the substitute behavior for a named failure scenario.

    Unknown scenarios are not an HTTP error: the response has applied=false,
    continue_workflow=false and error="unknown scenario".
    """,
)
async def apply_degradation(
    scenario: str,
    context: Optional[dict[str, Any]] = Body(default=None),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> DegradationResult:
    """Apply the degradation strategy for a scenario, echoing the context."""
    result = engine.apply_degradation(scenario, context)

    degradations_total.labels(
        scenario=result.scenario.value if result.scenario else "unknown",
        applied=str(result.applied).lower(),
    ).inc()

    return result


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description="""
    The engine has no external dependencies, so health reflects whether it
    can be built from the current configuration and whether the fallback
    chains are acyclic (cycles are reported as degraded, not unhealthy).
    """,
)
async def health_check(
    settings: Settings = Depends(get_settings),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> HealthResponse:
    """
    Check engine health.

    Returns:
        HealthResponse with component statuses
    """
    checks = {"engine": "ok"}

    cycles = engine.fallbacks.find_cycles(engine.settings.max_fallback_depth)
    if cycles:
        checks["fallback_chains"] = f"cycles ({len(cycles)})"
        health_status = "degraded"
    else:
        checks["fallback_chains"] = "ok"
        health_status = "healthy"

    logger.info("Health check", status=health_status, checks=checks)

    return HealthResponse(
        status=health_status,
        version=settings.APP_VERSION,
        checks=checks,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/version",
    response_model=VersionResponse,
    summary="Get version and effective engine configuration",
)
async def get_version(
    settings: Settings = Depends(get_settings),
    engine: DecisionEngine = Depends(get_decision_engine),
) -> VersionResponse:
    """Return version information and the engine configuration in effect."""
    return VersionResponse(
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        engine_config=engine.settings.model_dump(mode="json"),
    )
