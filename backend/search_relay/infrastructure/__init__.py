"""Infrastructure Layer: upstream HTTPS client and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every outbound call is bounded by a timeout and mapped to TransportFailure

Design Decisions:
    - Thin client over httpx: one attempt per call, retries live in services/
"""
