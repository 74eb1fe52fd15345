"""Core Layer — pure domain logic, no IO, no async, no transport.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All functions are pure and deterministic given their inputs (clock passed in)

Design Decisions:
    - Functional core separated from imperative shell: the store orchestrates
      async commands around these pure computations
"""
