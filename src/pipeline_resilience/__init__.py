"""
Pipeline Resilience Engine for multi-stage content generation workflows.

Answers one question for every failed pipeline step: what should happen next?
- Retry after a (jittered, exponential) delay
- Switch to a fallback model
- Continue with a degraded substitute
- Fail the step

Architecture: pure decision engine (classifier + retry policy + fallback
resolver + degradation registry) exposed to the workflow host over FastAPI.
"""

__version__ = "0.1.0"
