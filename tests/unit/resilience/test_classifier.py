"""
Unit tests for the error classifier.

Covers table-order rule precedence, auth statuses over rate-limit wording,
and the
case-sensitive literal substring contract.
"""

import pytest

from pipeline_resilience.models.enums import ErrorKind, RecommendedAction
from pipeline_resilience.models.fault import Fault
from pipeline_resilience.resilience.classifier import OUTCOMES, RULES, classification_for, classify


class TestStatusRules:
    """Classification by numeric status."""

    def test_429_is_rate_limited(self):
        result = classify({"status": 429})

        assert result.kind is ErrorKind.RATE_LIMITED
        assert result.retryable is True
        assert result.suggested_delay_ms == 30000
        assert result.action is RecommendedAction.RETRY_WITH_BACKOFF

    @pytest.mark.parametrize("field", ["status_code", "statusCode", "status", "code"])
    def test_429_under_any_status_field(self, field):
        assert classify({field: 429}).kind is ErrorKind.RATE_LIMITED

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_status_is_not_retryable(self, status):
        result = classify({"status": status})

        assert result.kind is ErrorKind.AUTH_FAILURE
        assert result.retryable is False
        assert result.suggested_delay_ms is None
        assert result.action is RecommendedAction.FAIL_IMMEDIATELY

    @pytest.mark.parametrize(
        "message",
        [
            "rate limit exceeded",
            "too many requests",
            "connect ETIMEDOUT",
            "Unexpected token in JSON",
            "",
        ],
    )
    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_status_wins_over_message(self, status, message):
        result = classify({"status": status, "message": message})

        assert result.kind is ErrorKind.AUTH_FAILURE
        assert result.retryable is False

    def test_429_wins_over_auth_message(self):
        result = classify({"status": 429, "message": "authentication failed"})

        assert result.kind is ErrorKind.RATE_LIMITED

    def test_404_is_not_found(self):
        result = classify({"statusCode": 404})

        assert result.kind is ErrorKind.NOT_FOUND
        assert result.retryable is False
        assert result.action is RecommendedAction.SKIP_OR_FALLBACK

    @pytest.mark.parametrize("status", [500, 502, 503, 529, 599])
    def test_5xx_is_upstream_server_error(self, status):
        result = classify({"status": status})

        assert result.kind is ErrorKind.UPSTREAM_SERVER_ERROR
        assert result.retryable is True
        assert result.suggested_delay_ms == 10000

    def test_600_is_not_a_server_error(self):
        assert classify({"status": 600}).kind is ErrorKind.UNCLASSIFIED

    def test_string_code_is_not_a_status(self):
        result = classify({"code": "429"})

        assert result.kind is ErrorKind.UNCLASSIFIED

    def test_rate_limit_message_wins_over_5xx_status(self):
        result = classify({"status": 503, "message": "too many requests"})

        assert result.kind is ErrorKind.RATE_LIMITED
        assert result.suggested_delay_ms == 30000

    def test_auth_message_wins_over_404_status(self):
        assert classify({"status": 404, "message": "unauthorized"}).kind is ErrorKind.AUTH_FAILURE

    def test_auth_message_wins_over_5xx_status(self):
        assert classify({"status": 500, "message": "unauthorized"}).kind is ErrorKind.AUTH_FAILURE

    def test_5xx_status_wins_over_timeout_message(self):
        assert classify({"status": 503, "message": "upstream request timeout"}).kind is ErrorKind.UPSTREAM_SERVER_ERROR

    def test_non_matching_status_falls_through_to_message(self):
        result = classify({"status": 400, "message": "maximum context length exceeded"})

        assert result.kind is ErrorKind.CONTEXT_TOO_LONG


class TestMessageRules:
    """Classification by literal, case-sensitive substrings."""

    @pytest.mark.parametrize(
        "message, kind",
        [
            ("You hit the rate limit", ErrorKind.RATE_LIMITED),
            ("too many requests, slow down", ErrorKind.RATE_LIMITED),
            ("unauthorized", ErrorKind.AUTH_FAILURE),
            ("authentication required", ErrorKind.AUTH_FAILURE),
            ("request timeout", ErrorKind.TIMEOUT),
            ("connect ETIMEDOUT 10.0.0.1:443", ErrorKind.TIMEOUT),
            ("read ECONNRESET", ErrorKind.TIMEOUT),
            ("context length exceeded", ErrorKind.CONTEXT_TOO_LONG),
            ("maximum context is 8k tokens", ErrorKind.CONTEXT_TOO_LONG),
            ("input too long", ErrorKind.CONTEXT_TOO_LONG),
            ("content filter triggered", ErrorKind.CONTENT_BLOCKED),
            ("violates content policy", ErrorKind.CONTENT_BLOCKED),
            ("request blocked", ErrorKind.CONTENT_BLOCKED),
            ("invalid JSON", ErrorKind.MALFORMED_RESPONSE),
            ("error parsing output", ErrorKind.MALFORMED_RESPONSE),
            ("unexpected token } at 12", ErrorKind.MALFORMED_RESPONSE),
        ],
    )
    def test_substring_rules(self, message, kind):
        assert classify({"message": message}).kind is kind

    @pytest.mark.parametrize(
        "message",
        [
            "Rate Limit reached",
            "Too Many Requests",
            "Unauthorized",
            "Timeout while reading",
            "etimedout",
            "Context Length exceeded",
            "Blocked by policy",
            "invalid json",
            "Parsing failed",
            "Unexpected Token",
        ],
    )
    def test_matching_is_case_sensitive(self, message):
        assert classify({"message": message}).kind is ErrorKind.UNCLASSIFIED

    def test_earlier_rule_wins_on_overlap(self):
        # Both "timeout" and "JSON" present; timeout is evaluated first
        result = classify({"message": "timeout while streaming JSON"})

        assert result.kind is ErrorKind.TIMEOUT

    def test_context_rule_precedes_content_rule(self):
        result = classify({"message": "prompt too long, blocked"})

        assert result.kind is ErrorKind.CONTEXT_TOO_LONG


class TestDefaultClassification:
    """Unclassifiable input."""

    @pytest.mark.parametrize("fault", [None, "", {}, {"message": "boom"}, 42, object()])
    def test_unclassified_defaults(self, fault):
        result = classify(fault)

        assert result.kind is ErrorKind.UNCLASSIFIED
        assert result.retryable is True
        assert result.suggested_delay_ms == 5000
        assert result.action is RecommendedAction.RETRY_THEN_FAIL

    def test_invalid_message_still_uses_status(self):
        assert classify({"status": 429, "message": 123}).kind is ErrorKind.RATE_LIMITED

    def test_invalid_payload_never_raises(self):
        result = classify({"message": ["not", "a", "string"], "status": {"nested": True}})

        assert result.kind is ErrorKind.UNCLASSIFIED


class TestExceptionInput:
    """Python exceptions are adapted through Fault.from_exception."""

    def test_exception_status_attribute(self, provider_error):
        result = classify(provider_error("Slow down", status_code=429))

        assert result.kind is ErrorKind.RATE_LIMITED

    def test_exception_response_status(self, http_status_error):
        result = classify(http_status_error("Bad gateway", status_code=502))

        assert result.kind is ErrorKind.UPSTREAM_SERVER_ERROR

    def test_exception_message(self, raised_error):
        result = classify(raised_error)

        assert result.kind is ErrorKind.TIMEOUT

    def test_fault_instance_passes_through(self):
        result = classify(Fault(message="read ECONNRESET"))

        assert result.kind is ErrorKind.TIMEOUT


def test_sample_faults(sample_faults):
    """Every recorded workflow fault receives its expected kind."""
    for sample in sample_faults:
        result = classify(sample["fault"])
        assert result.kind.value == sample["expected_kind"], sample["name"]


def test_outcome_table_is_exhaustive():
    assert set(OUTCOMES) == set(ErrorKind)


def test_rule_table_order():
    assert [rule.kind for rule in RULES] == [
        ErrorKind.RATE_LIMITED,
        ErrorKind.AUTH_FAILURE,
        ErrorKind.NOT_FOUND,
        ErrorKind.UPSTREAM_SERVER_ERROR,
        ErrorKind.TIMEOUT,
        ErrorKind.CONTEXT_TOO_LONG,
        ErrorKind.CONTENT_BLOCKED,
        ErrorKind.MALFORMED_RESPONSE,
    ]


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_non_retryable_outcomes_have_no_delay(kind):
    result = classification_for(kind)

    if not result.retryable:
        assert result.suggested_delay_ms is None
        assert not result.action.is_retry_action
    else:
        assert result.suggested_delay_ms is not None
