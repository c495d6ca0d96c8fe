"""
Integration tests for the Pipeline Resilience Engine.

Test components together through the HTTP surface:
- API endpoints (FastAPI TestClient) returning the same decisions as the engine
"""
