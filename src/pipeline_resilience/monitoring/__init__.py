"""Monitoring and metrics instrumentation for the Pipeline Resilience Engine.

Exports custom Prometheus metrics for operational monitoring and alerting.
"""

from pipeline_resilience.monitoring.metrics import (
    decisions_total,
    degradations_total,
    fallbacks_total,
    retry_delay_seconds,
)

__all__ = [
    "decisions_total",
    "retry_delay_seconds",
    "fallbacks_total",
    "degradations_total",
]
