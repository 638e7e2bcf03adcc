"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All error bodies share the envelope produced by CarRegistryError.to_response()

Design Decisions:
    - Thin routes delegate to services; services come from app.state via dependencies
"""
