"""Value objects and closed enumerations shared by the engine and the API."""

from pipeline_resilience.models.decisions import (
    Decision,
    DecisionOptions,
    DegradationResult,
    DegradationStrategy,
    ErrorClassification,
    ErrorContext,
    FormattedError,
    RetryDecision,
)
from pipeline_resilience.models.enums import (
    DecisionAction,
    DegradationScenario,
    ErrorKind,
    FallbackAction,
    RecommendedAction,
)
from pipeline_resilience.models.fault import Fault

__all__ = [
    "Decision",
    "DecisionAction",
    "DecisionOptions",
    "DegradationResult",
    "DegradationScenario",
    "DegradationStrategy",
    "ErrorClassification",
    "ErrorContext",
    "ErrorKind",
    "FallbackAction",
    "Fault",
    "FormattedError",
    "RecommendedAction",
    "RetryDecision",
]
