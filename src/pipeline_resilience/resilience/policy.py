"""
Retry policy: whether to retry and how long to wait.

Exponential backoff with symmetric jitter, capped:

    raw   = base * multiplier ** (attempt - 1)
    delay = min(raw + raw * jitter_ratio * U, max_backoff_ms),  U ~ Uniform[-1, 1]

raw is computed without overflow: once it is large enough that no jitter draw
can bring the delay under max_backoff_ms it is held at that saturation point,
so arbitrarily large attempt numbers still yield max_backoff_ms.

The policy only recommends a delay; the caller does the waiting and owns
the attempt counter.
"""

import math
import random
from typing import Optional

import structlog

from pipeline_resilience.config import ResilienceSettings
from pipeline_resilience.models.decisions import ErrorClassification, RetryDecision

logger = structlog.get_logger(__name__)

REASON_NOT_RETRYABLE = "not retryable"
REASON_MAX_RETRIES = "max retries exceeded"

# Stand-in for 1 - jitter_ratio when jitter_ratio is 1 (no finite saturation point)
_MIN_JITTER_FLOOR = 1e-6


class RetryPolicy:
    """
    Stateless retry policy bound to an immutable configuration.

    Attributes:
        settings: Engine configuration (retries, base delay, backoff, ceiling)
        rng: Random source for jitter. Inject a seeded random.Random for
            reproducible delays in tests.
    """

    def __init__(self, settings: ResilienceSettings, rng: Optional[random.Random] = None):
        self.settings = settings
        self.rng = rng if rng is not None else random.Random()

    def compute_backoff(self, attempt: int, base_delay_ms: Optional[int] = None) -> int:
        """
        Delay in milliseconds before the attempt following `attempt`.

        Args:
            attempt: Attempts already made (1-indexed)
            base_delay_ms: Base delay (defaults to configured default delay)

        Returns:
            Delay in ms; never above max_backoff_ms when backoff is enabled
        """
        base = self.settings.default_retry_delay_ms if base_delay_ms is None else base_delay_ms

        if not self.settings.use_exponential_backoff:
            return base

        raw = self._raw_delay(base, max(attempt - 1, 0))
        jitter = raw * self.settings.jitter_ratio * self.rng.uniform(-1.0, 1.0)
        delay = min(raw + jitter, self.settings.max_backoff_ms)
        return max(int(round(delay)), 0)

    def _raw_delay(self, base: int, exponent: int) -> float:
        """base * multiplier ** exponent, held at the saturation point."""
        if base == 0:
            return 0.0

        floor = max(1.0 - self.settings.jitter_ratio, _MIN_JITTER_FLOOR)
        saturation = self.settings.max_backoff_ms / floor
        if base >= saturation:
            return saturation

        multiplier = self.settings.backoff_multiplier
        if exponent == 0 or multiplier == 1.0:
            return float(base)

        if exponent >= math.log(saturation / base) / math.log(multiplier):
            return saturation
        return base * multiplier ** exponent

    def decide_retry(
        self,
        classification: ErrorClassification,
        attempt_number: int,
        max_attempts: Optional[int] = None,
    ) -> RetryDecision:
        """
        Decide whether the failed operation should be attempted again.

        Args:
            classification: Classification of the fault
            attempt_number: Attempts already made (1-indexed, caller-owned)
            max_attempts: Attempt budget (defaults to configured retries)

        Returns:
            RetryDecision with delay and next attempt, or the reason not to retry
        """
        limit = self.settings.default_retries if max_attempts is None else max_attempts

        if not classification.retryable:
            return RetryDecision(should_retry=False, max_attempts=limit, reason=REASON_NOT_RETRYABLE)

        if attempt_number >= limit:
            logger.debug(
                "Retry budget exhausted",
                kind=classification.kind.value,
                attempt_number=attempt_number,
                max_attempts=limit,
            )
            return RetryDecision(should_retry=False, max_attempts=limit, reason=REASON_MAX_RETRIES)

        delay_ms = self.compute_backoff(attempt_number, classification.suggested_delay_ms)
        return RetryDecision(
            should_retry=True,
            delay_ms=delay_ms,
            next_attempt=attempt_number + 1,
            max_attempts=limit,
        )
