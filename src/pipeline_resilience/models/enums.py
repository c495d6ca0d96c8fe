"""
Enumerations for the resilience decision engine.

All enums are closed taxonomies - no values outside these sets are permitted.
Lookup tables keyed by these enums are checked for exhaustiveness at import
time, so adding a member without a table entry fails immediately.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Closed taxonomy of fault kinds.

    Every classification carries exactly one kind. UNCLASSIFIED is the
    catch-all when no rule matches.
    """

    RATE_LIMITED = "rate-limited"
    AUTH_FAILURE = "auth-failure"
    NOT_FOUND = "not-found"
    UPSTREAM_SERVER_ERROR = "upstream-server-error"
    TIMEOUT = "timeout"
    CONTEXT_TOO_LONG = "context-too-long"
    CONTENT_BLOCKED = "content-blocked"
    MALFORMED_RESPONSE = "malformed-response"
    UNCLASSIFIED = "unclassified"


class RecommendedAction(str, Enum):
    """Recovery action suggested by a classification."""

    RETRY_WITH_BACKOFF = "RETRY_WITH_BACKOFF"
    FAIL_IMMEDIATELY = "FAIL_IMMEDIATELY"
    SKIP_OR_FALLBACK = "SKIP_OR_FALLBACK"
    REDUCE_INPUT_SIZE = "REDUCE_INPUT_SIZE"
    MODIFY_INPUT = "MODIFY_INPUT"
    RETRY_OR_FALLBACK_PARSER = "RETRY_OR_FALLBACK_PARSER"
    RETRY_THEN_FAIL = "RETRY_THEN_FAIL"

    @property
    def is_retry_action(self) -> bool:
        """True for actions that imply the operation may be attempted again."""
        return self in (
            RecommendedAction.RETRY_WITH_BACKOFF,
            RecommendedAction.RETRY_OR_FALLBACK_PARSER,
            RecommendedAction.RETRY_THEN_FAIL,
        )


class DecisionAction(str, Enum):
    """
    Terminal action returned to the pipeline caller.

    FAIL halts the logical unit of work; CONTINUE_WITH_ERROR lets the
    caller proceed with degraded output.
    """

    RETRY = "RETRY"
    USE_FALLBACK = "USE_FALLBACK"
    CONTINUE_WITH_ERROR = "CONTINUE_WITH_ERROR"
    FAIL = "FAIL"


class DegradationScenario(str, Enum):
    """Named failure scenarios with a pre-approved substitute behavior."""

    SEARCH_UNAVAILABLE = "search-unavailable"
    FULL_TEXT_UNAVAILABLE = "full-text-unavailable"
    CROSS_REFERENCE_SCRAPE_FAILED = "cross-reference-scrape-failed"
    PRIMARY_MODEL_UNAVAILABLE = "primary-model-unavailable"
    VALIDATION_FAILED = "validation-failed"


class FallbackAction(str, Enum):
    """Substitute behavior applied by a degradation strategy."""

    USE_CACHED_EVIDENCE = "USE_CACHED_EVIDENCE"
    PROCEED_WITH_ABSTRACT = "PROCEED_WITH_ABSTRACT"
    SKIP_CROSSREFS = "SKIP_CROSSREFS"
    USE_FALLBACK_MODEL = "USE_FALLBACK_MODEL"
    FLAG_FOR_REVIEW = "FLAG_FOR_REVIEW"
