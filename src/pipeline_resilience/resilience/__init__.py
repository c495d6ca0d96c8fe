"""
Resilience decision engine.

Answers "what should the pipeline do next?" for a failed step:

1. **Classify**: Map the fault to a closed taxonomy entry
2. **Retry**: Exponential backoff with jitter, capped (up to the attempt budget)
3. **Fallback Model**: Next model in the configured chain once retries are exhausted
4. **Fail / Continue**: Terminal action, honoring continue_on_error

Graceful degradation strategies are looked up separately, when the caller
recognizes one of the named scenarios.

Main Components:
    - DecisionEngine: Single entry point composing the components below
    - classify: Error classifier
    - RetryPolicy: Retry decisions and backoff delays
    - FallbackResolver: Model fallback chains
    - apply_degradation: Degradation strategy registry

Usage:
    >>> from pipeline_resilience.resilience import DecisionEngine
    >>> engine = DecisionEngine(settings.resilience())
    >>> decision = engine.decide({"status": 429}, {"attempt_number": 1})
"""

from pipeline_resilience.resilience.classifier import classify
from pipeline_resilience.resilience.degradation import apply_degradation, get_strategy
from pipeline_resilience.resilience.engine import DecisionEngine
from pipeline_resilience.resilience.fallback import FallbackResolver
from pipeline_resilience.resilience.policy import RetryPolicy

__all__ = [
    "DecisionEngine",
    "FallbackResolver",
    "RetryPolicy",
    "apply_degradation",
    "classify",
    "get_strategy",
]
