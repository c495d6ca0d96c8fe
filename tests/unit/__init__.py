"""
Unit tests for the Pipeline Resilience Engine.

Test individual components in isolation:
- Data models (fault normalization, presence invariants)
- Error classifier (rule precedence, case-sensitive matching)
- Retry policy (backoff bounds, retry budget)
- Fallback resolver (chain lookup, cycle reporting)
- Degradation registry (catalogue, unknown scenarios)
- Decision engine (end-to-end decision tree)
- API models and dependencies
"""
