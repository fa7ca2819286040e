"""Person Search Relay: JSON-to-SOAP bridge for the upstream person-search service.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
