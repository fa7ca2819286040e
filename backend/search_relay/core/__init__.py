"""Core Layer: pure domain logic, no IO, no network, no framework imports.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic (envelope building, response classification)

Design Decisions:
    - Functional core separated from imperative shell: the relay's only real
      decisions (escaping, classification) are testable without sockets
"""
