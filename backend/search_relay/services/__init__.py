"""Services Layer: retry orchestration and the person search pipeline.

Invariants:
    - Services compose core/ (pure) with infrastructure/ (IO)
    - No FastAPI imports: HTTP mapping belongs to api/
"""
