"""
Decision-engine value objects.

All models are frozen: they are constructed fresh per call, never mutated,
and only outlive the call when the caller chooses to keep them (for example
by logging a Decision). Presence rules between fields are enforced by model
validators so an inconsistent record cannot be built.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pipeline_resilience.models.enums import (
    DecisionAction,
    DegradationScenario,
    ErrorKind,
    FallbackAction,
    RecommendedAction,
)


class ErrorClassification(BaseModel):
    """Taxonomy entry a fault is mapped to."""
    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = Field(..., description="Fault kind (closed taxonomy)")
    retryable: bool = Field(..., description="Whether the operation may be attempted again")
    suggested_delay_ms: Optional[int] = Field(
        default=None, ge=0, description="Base delay before the next attempt (retryable only)"
    )
    action: RecommendedAction = Field(..., description="Recommended recovery action")

    @model_validator(mode="after")
    def _check_retryability(self) -> "ErrorClassification":
        if not self.retryable:
            if self.suggested_delay_ms is not None:
                raise ValueError("non-retryable classification must not suggest a delay")
            if self.action.is_retry_action:
                raise ValueError(f"non-retryable classification cannot recommend {self.action.value}")
        return self


class RetryDecision(BaseModel):
    """Whether to retry, and after how long. Computed fresh on every failure."""
    model_config = ConfigDict(frozen=True)

    should_retry: bool
    delay_ms: Optional[int] = Field(default=None, ge=0)
    next_attempt: Optional[int] = Field(default=None, ge=1)
    max_attempts: int = Field(..., ge=1)
    reason: Optional[str] = None

    @model_validator(mode="after")
    def _check_presence(self) -> "RetryDecision":
        if self.should_retry:
            if self.delay_ms is None or self.next_attempt is None:
                raise ValueError("retry decision requires delay_ms and next_attempt")
            if self.reason is not None:
                raise ValueError("retry decision must not carry a reason")
        else:
            if self.delay_ms is not None or self.next_attempt is not None:
                raise ValueError("no-retry decision must not carry delay_ms or next_attempt")
            if not self.reason:
                raise ValueError("no-retry decision requires a reason")
        return self


class ErrorContext(BaseModel):
    """Pass-through identifiers used only to enrich error records."""
    model_config = ConfigDict(frozen=True)

    request_id: Optional[str] = None
    workflow_name: Optional[str] = None
    node_name: Optional[str] = None
    attempt_number: Optional[int] = None
    input_summary: Optional[Any] = None


class DecisionOptions(BaseModel):
    """
    Caller-owned context for one decision.

    The caller threads attempt_number (attempts already made, 1-indexed)
    across retries of the same logical operation; the engine keeps nothing.
    """
    model_config = ConfigDict(frozen=True)

    attempt_number: int = Field(default=1, ge=1, description="Attempts already made (1-indexed)")
    max_attempts: Optional[int] = Field(
        default=None, ge=1, description="Attempt budget (defaults to configured retries)"
    )
    continue_on_error: bool = Field(default=False, description="Continue with degraded output instead of failing")
    current_model_id: Optional[str] = Field(default=None, description="Model that produced the fault")
    request_id: Optional[str] = None
    workflow_name: Optional[str] = None
    node_name: Optional[str] = None
    input_summary: Optional[Any] = None

    def error_context(self) -> ErrorContext:
        return ErrorContext(
            request_id=self.request_id,
            workflow_name=self.workflow_name,
            node_name=self.node_name,
            attempt_number=self.attempt_number,
            input_summary=self.input_summary,
        )


class FormattedError(BaseModel):
    """
    Enriched error record for the external logging collaborator.

    Handed over verbatim; the engine never writes it anywhere.
    """
    model_config = ConfigDict(frozen=True)

    error_id: str = Field(..., description="Unique id, 'err_' prefixed")
    timestamp: datetime = Field(..., description="Creation time (UTC)")
    type: ErrorKind
    message: str
    stack: Optional[str] = None
    classification: ErrorClassification
    context: ErrorContext
    retryable: bool
    suggested_action: RecommendedAction


class Decision(BaseModel):
    """Terminal record returned to the pipeline caller for one failure event."""
    model_config = ConfigDict(frozen=True)

    success: bool = False
    action: DecisionAction
    classification: ErrorClassification
    retry: RetryDecision
    error: FormattedError
    delay_ms: Optional[int] = Field(default=None, ge=0, description="Wait before retrying (RETRY only)")
    next_attempt: Optional[int] = Field(default=None, description="Attempt number to pass next time (RETRY only)")
    fallback_model: Optional[str] = Field(default=None, description="Model to switch to (USE_FALLBACK only)")

    @model_validator(mode="after")
    def _check_payload(self) -> "Decision":
        retry_payload = (self.delay_ms, self.next_attempt)
        if self.action is DecisionAction.RETRY:
            if None in retry_payload:
                raise ValueError("RETRY requires delay_ms and next_attempt")
        elif retry_payload != (None, None):
            raise ValueError("delay_ms and next_attempt are only valid for RETRY")
        if (self.action is DecisionAction.USE_FALLBACK) != (self.fallback_model is not None):
            raise ValueError("fallback_model is present iff action is USE_FALLBACK")
        return self


class DegradationStrategy(BaseModel):
    """Catalogue entry: substitute behavior for a recognized failure scenario."""
    model_config = ConfigDict(frozen=True)

    scenario: DegradationScenario
    fallback_action: FallbackAction
    message: str
    continue_workflow: bool
    flag_for_review: bool = False
    requires_manual_review: bool = False
    placeholder: Optional[str] = None


class DegradationResult(BaseModel):
    """Outcome of applying (or failing to find) a degradation strategy."""
    model_config = ConfigDict(frozen=True)

    applied: bool
    continue_workflow: bool
    scenario: Optional[DegradationScenario] = None
    strategy: Optional[FallbackAction] = None
    message: Optional[str] = None
    flag_for_review: bool = False
    requires_manual_review: bool = False
    placeholder: Optional[str] = None
    context: dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
