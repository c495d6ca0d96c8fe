"""
Error classifier.

Maps a fault to an ErrorClassification: kind, retryability, suggested delay
and recommended action. Pure and stateless; never raises.

Rules are evaluated in a fixed order (first match wins):

    1. 429 / "rate limit", "too many requests"          -> RATE_LIMITED
    2. 401, 403 / "unauthorized", "authentication"      -> AUTH_FAILURE
    3. 404                                               -> NOT_FOUND
    4. 500-599                                           -> UPSTREAM_SERVER_ERROR
    5. "timeout", "ETIMEDOUT", "ECONNRESET"              -> TIMEOUT
    6. "context length", "maximum context", "too long"  -> CONTEXT_TOO_LONG
    7. "content filter", "content policy", "blocked"    -> CONTENT_BLOCKED
    8. "JSON", "parsing", "unexpected token"            -> MALFORMED_RESPONSE
    9. anything else                                     -> UNCLASSIFIED

Each rule matches on status or message. The rate-limit message substrings
are ignored when the status is 401 or 403, so an auth status is never
overridden by rate-limit wording. Message matching is case-sensitive on the
literal substrings above.
"""

from dataclasses import dataclass
from typing import Any, Optional

import structlog

from pipeline_resilience.models.decisions import ErrorClassification
from pipeline_resilience.models.enums import ErrorKind, RecommendedAction
from pipeline_resilience.models.fault import Fault

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the ordered rule table."""

    kind: ErrorKind
    statuses: frozenset[int] = frozenset()
    status_range: Optional[range] = None
    substrings: tuple[str, ...] = ()
    # Statuses that disable the message match for this rule
    message_yields_to: frozenset[int] = frozenset()

    def matches_status(self, status: Optional[int]) -> bool:
        if status is None:
            return False
        if status in self.statuses:
            return True
        return self.status_range is not None and status in self.status_range

    def matches_message(self, message: str, status: Optional[int] = None) -> bool:
        if status is not None and status in self.message_yields_to:
            return False
        return any(needle in message for needle in self.substrings)


RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        ErrorKind.RATE_LIMITED,
        statuses=frozenset({429}),
        substrings=("rate limit", "too many requests"),
        message_yields_to=frozenset({401, 403}),
    ),
    ClassificationRule(
        ErrorKind.AUTH_FAILURE,
        statuses=frozenset({401, 403}),
        substrings=("unauthorized", "authentication"),
    ),
    ClassificationRule(ErrorKind.NOT_FOUND, statuses=frozenset({404})),
    ClassificationRule(ErrorKind.UPSTREAM_SERVER_ERROR, status_range=range(500, 600)),
    ClassificationRule(ErrorKind.TIMEOUT, substrings=("timeout", "ETIMEDOUT", "ECONNRESET")),
    ClassificationRule(
        ErrorKind.CONTEXT_TOO_LONG,
        substrings=("context length", "maximum context", "too long"),
    ),
    ClassificationRule(
        ErrorKind.CONTENT_BLOCKED,
        substrings=("content filter", "content policy", "blocked"),
    ),
    ClassificationRule(
        ErrorKind.MALFORMED_RESPONSE,
        substrings=("JSON", "parsing", "unexpected token"),
    ),
)

# kind -> (retryable, suggested delay ms, action)
OUTCOMES: dict[ErrorKind, tuple[bool, Optional[int], RecommendedAction]] = {
    ErrorKind.RATE_LIMITED: (True, 30000, RecommendedAction.RETRY_WITH_BACKOFF),
    ErrorKind.AUTH_FAILURE: (False, None, RecommendedAction.FAIL_IMMEDIATELY),
    ErrorKind.NOT_FOUND: (False, None, RecommendedAction.SKIP_OR_FALLBACK),
    ErrorKind.UPSTREAM_SERVER_ERROR: (True, 10000, RecommendedAction.RETRY_WITH_BACKOFF),
    ErrorKind.TIMEOUT: (True, 5000, RecommendedAction.RETRY_WITH_BACKOFF),
    ErrorKind.CONTEXT_TOO_LONG: (False, None, RecommendedAction.REDUCE_INPUT_SIZE),
    ErrorKind.CONTENT_BLOCKED: (False, None, RecommendedAction.MODIFY_INPUT),
    ErrorKind.MALFORMED_RESPONSE: (True, 1000, RecommendedAction.RETRY_OR_FALLBACK_PARSER),
    ErrorKind.UNCLASSIFIED: (True, 5000, RecommendedAction.RETRY_THEN_FAIL),
}

_missing = set(ErrorKind) - set(OUTCOMES)
if _missing:
    raise RuntimeError(f"Classifier outcome table missing kinds: {sorted(k.value for k in _missing)}")


def classification_for(kind: ErrorKind) -> ErrorClassification:
    """Canonical classification for a kind."""
    retryable, delay_ms, action = OUTCOMES[kind]
    return ErrorClassification(
        kind=kind,
        retryable=retryable,
        suggested_delay_ms=delay_ms,
        action=action,
    )


def _match_kind(fault: Fault) -> ErrorKind:
    status = fault.effective_status
    message = fault.text
    for rule in RULES:
        if rule.matches_status(status) or rule.matches_message(message, status):
            return rule.kind

    return ErrorKind.UNCLASSIFIED


def classify(fault: Any) -> ErrorClassification:
    """
    Classify a fault.

    Args:
        fault: Fault, exception, JSON error payload, string or None

    Returns:
        ErrorClassification (UNCLASSIFIED when no rule matches)
    """
    normalized = Fault.coerce(fault)
    kind = _match_kind(normalized)
    classification = classification_for(kind)

    logger.debug(
        "Fault classified",
        kind=kind.value,
        status=normalized.effective_status,
        retryable=classification.retryable,
        action=classification.action.value,
    )
    return classification
