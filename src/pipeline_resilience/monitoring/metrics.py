"""Custom Prometheus metrics for the Pipeline Resilience Engine.

These metrics are exposed at /metrics endpoint and should be scraped by Prometheus.
They are recorded by the HTTP layer only; the decision engine stays free of
side effects. Alert rules should be configured for:
- decisions_total{action="FAIL"} (pipeline steps halting)
- fallbacks_total (primary models repeatedly exhausting retries)
- degradations_total{applied="false"} (workflows sending unknown scenarios)
"""

from prometheus_client import Counter, Histogram

# === Decision Metrics ===

decisions_total = Counter(
    "resilience_decisions_total",
    "Total decisions by resolved action and fault kind",
    ["action", "kind"],
)
"""
Decisions counter.

Labels:
- action: RETRY, USE_FALLBACK, CONTINUE_WITH_ERROR, FAIL
- kind: rate-limited, auth-failure, timeout, unclassified, etc.

Alert thresholds:
- WARN: FAIL rate > 5% of decisions
"""

retry_delay_seconds = Histogram(
    "resilience_retry_delay_seconds",
    "Recommended retry delay in seconds",
    ["kind"],
    buckets=[1.0, 5.0, 10.0, 15.0, 30.0, 60.0, 90.0, 120.0],
)
"""
Recommended retry delay histogram (RETRY decisions only).

Buckets follow the classifier's suggested delays up to the 120s ceiling.
"""

# === Fallback Metrics ===

fallbacks_total = Counter(
    "resilience_fallbacks_total",
    "Total fallback model recommendations",
    ["from_model", "to_model"],
)
"""
Fallback recommendations by source and target model.

A steadily increasing series for one from_model indicates a provider outage.
"""

# === Degradation Metrics ===

degradations_total = Counter(
    "resilience_degradations_total",
    "Total degradation strategy lookups by scenario and outcome",
    ["scenario", "applied"],
)
"""
Degradation lookups.

Labels:
- scenario: search-unavailable, validation-failed, ... or "unknown"
- applied: true (strategy found), false (unknown scenario)
"""
