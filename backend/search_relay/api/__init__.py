"""API Layer: FastAPI routes, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All person-search responses carry the {"ok": ...} JSON envelope

Design Decisions:
    - Thin routes delegate to services
"""
