"""Pydantic Schemas: inbound request validation at the API boundary.

Invariants:
    - Schemas validate presence and type only (no format checks on names or SSN)
    - Validated requests are converted to core domain types before leaving api/
"""
