"""API Layer — FastAPI routes, dependencies and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {success, data} / {success, message} envelopes

Design Decisions:
    - Thin routes delegate to services and repositories
"""
