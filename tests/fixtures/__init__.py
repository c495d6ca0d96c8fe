"""
Test fixtures for the Pipeline Resilience Engine.

Contains sample data for testing:
- sample_faults.json: Error payloads as the workflow host reports them
  (n8n node errors, provider HTTP errors, Node.js socket errors), each with
  the classification it must receive
"""
