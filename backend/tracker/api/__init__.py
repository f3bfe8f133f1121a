"""API Layer — FastAPI routes, error handlers, and request middleware.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON or an empty body; errors are always {"message": str}
"""
