"""
Decision engine: one terminal decision per failure event.

This module implements the DecisionEngine that composes the classifier,
retry policy and fallback resolver into the single entry point the
pipeline caller uses.

Decision tree (no memory between calls):
    1. Classify the fault
    2. Retry indicated                          -> RETRY (delay, next attempt)
    3. Retries exhausted on a transient kind
       (RETRY_WITH_BACKOFF) and a current model
       with a configured fallback               -> USE_FALLBACK (model id)
    4. Otherwise                                -> CONTINUE_WITH_ERROR if
                                                   continue_on_error else FAIL

Usage:
    engine = DecisionEngine(settings.resilience())
    decision = engine.decide(exc, DecisionOptions(attempt_number=2, current_model_id="gpt-4o"))
"""

import random
import time
import uuid
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional, Union

import structlog

from pipeline_resilience.config import ResilienceSettings
from pipeline_resilience.models.decisions import (
    Decision,
    DecisionOptions,
    DegradationResult,
    ErrorClassification,
    ErrorContext,
    FormattedError,
    RetryDecision,
)
from pipeline_resilience.models.enums import DecisionAction, DegradationScenario, RecommendedAction
from pipeline_resilience.models.fault import Fault
from pipeline_resilience.resilience import degradation
from pipeline_resilience.resilience.classifier import classify
from pipeline_resilience.resilience.fallback import FallbackResolver
from pipeline_resilience.resilience.policy import RetryPolicy

logger = structlog.get_logger(__name__)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_error_id() -> str:
    """Unique error id: 'err_' + base36 epoch millis + random suffix."""
    return f"err_{_to_base36(int(time.time() * 1000))}{uuid.uuid4().hex[:9]}"


class DecisionEngine:
    """
    Resilience decision engine.

    Holds only immutable configuration and the jitter random source, so one
    instance can be shared across threads and requests.

    Attributes:
        settings: Immutable engine configuration
        policy: Retry policy (backoff + retry budget)
        fallbacks: Fallback chain resolver
    """

    def __init__(self, settings: ResilienceSettings, rng: Optional[random.Random] = None):
        """
        Initialize decision engine.

        Args:
            settings: Engine configuration
            rng: Random source for backoff jitter (seed it in tests)
        """
        self.settings = settings
        self.policy = RetryPolicy(settings, rng=rng)
        self.fallbacks = FallbackResolver(settings.model_fallbacks)

        cycles = self.fallbacks.find_cycles(settings.max_fallback_depth)
        if cycles:
            # Reported only; lookups are not altered
            logger.warning(
                "Fallback chains contain cycles",
                cycles=[" -> ".join(path) for path in cycles],
                max_depth=settings.max_fallback_depth,
            )

        logger.info(
            "DecisionEngine initialized",
            default_retries=settings.default_retries,
            default_retry_delay_ms=settings.default_retry_delay_ms,
            exponential_backoff=settings.use_exponential_backoff,
            max_backoff_ms=settings.max_backoff_ms,
            fallback_models=sorted(settings.model_fallbacks),
        )

    def classify(self, fault: Any) -> ErrorClassification:
        return classify(fault)

    def compute_backoff(self, attempt: int, base_delay_ms: Optional[int] = None) -> int:
        return self.policy.compute_backoff(attempt, base_delay_ms)

    def decide_retry(
        self,
        classification: ErrorClassification,
        attempt_number: int,
        max_attempts: Optional[int] = None,
    ) -> RetryDecision:
        return self.policy.decide_retry(classification, attempt_number, max_attempts)

    def next_fallback(self, model_id: str, tried_count: int = 0) -> Optional[str]:
        return self.fallbacks.next_fallback(model_id, tried_count)

    def apply_degradation(
        self,
        scenario: Union[DegradationScenario, str],
        context: Optional[Mapping[str, Any]] = None,
    ) -> DegradationResult:
        return degradation.apply_degradation(scenario, context)

    def format_error(
        self,
        fault: Any,
        context: Optional[ErrorContext] = None,
        classification: Optional[ErrorClassification] = None,
    ) -> FormattedError:
        """
        Build the enriched error record handed to the logging collaborator.

        Args:
            fault: Fault-like value
            context: Pass-through identifiers
            classification: Reuse an existing classification instead of
                classifying again

        Returns:
            FormattedError with a fresh id and UTC timestamp
        """
        normalized = Fault.coerce(fault)
        classification = classification or classify(normalized)

        message = normalized.message
        if not message:
            status = normalized.effective_status
            message = f"HTTP {status}" if status is not None else "Unknown error"

        return FormattedError(
            error_id=generate_error_id(),
            timestamp=datetime.now(timezone.utc),
            type=classification.kind,
            message=message,
            stack=normalized.stack,
            classification=classification,
            context=context or ErrorContext(),
            retryable=classification.retryable,
            suggested_action=classification.action,
        )

    def decide(
        self,
        fault: Any,
        options: Union[DecisionOptions, Mapping[str, Any], None] = None,
    ) -> Decision:
        """
        Decide what the pipeline should do after a failure.

        Args:
            fault: Fault, exception, JSON error payload or message
            options: Attempt counters, continue flag, current model and
                pass-through identifiers

        Returns:
            Decision with exactly one action
        """
        if options is None:
            options = DecisionOptions()
        elif not isinstance(options, DecisionOptions):
            options = DecisionOptions.model_validate(dict(options))

        normalized = Fault.coerce(fault)
        classification = classify(normalized)
        error = self.format_error(normalized, options.error_context(), classification)
        retry = self.policy.decide_retry(classification, options.attempt_number, options.max_attempts)

        if retry.should_retry:
            decision = Decision(
                action=DecisionAction.RETRY,
                classification=classification,
                retry=retry,
                error=error,
                delay_ms=retry.delay_ms,
                next_attempt=retry.next_attempt,
            )
            logger.info(
                "Retry recommended",
                error_id=error.error_id,
                kind=classification.kind.value,
                delay_ms=retry.delay_ms,
                next_attempt=retry.next_attempt,
                max_attempts=retry.max_attempts,
                request_id=options.request_id,
                node_name=options.node_name,
            )
            return decision

        fallback_model = None
        if classification.action is RecommendedAction.RETRY_WITH_BACKOFF and options.current_model_id:
            # Always the head of the chain; the caller tracks tiers already tried
            fallback_model = self.fallbacks.next_fallback(options.current_model_id)

        if fallback_model is not None:
            logger.info(
                "Fallback model recommended",
                error_id=error.error_id,
                kind=classification.kind.value,
                current_model=options.current_model_id,
                fallback_model=fallback_model,
                request_id=options.request_id,
                node_name=options.node_name,
            )
            return Decision(
                action=DecisionAction.USE_FALLBACK,
                classification=classification,
                retry=retry,
                error=error,
                fallback_model=fallback_model,
            )

        action = DecisionAction.CONTINUE_WITH_ERROR if options.continue_on_error else DecisionAction.FAIL
        logger.warning(
            "Step failure is terminal" if action is DecisionAction.FAIL else "Continuing with error",
            error_id=error.error_id,
            kind=classification.kind.value,
            action=action.value,
            reason=retry.reason,
            current_model=options.current_model_id,
            request_id=options.request_id,
            node_name=options.node_name,
        )
        return Decision(
            action=action,
            classification=classification,
            retry=retry,
            error=error,
        )
