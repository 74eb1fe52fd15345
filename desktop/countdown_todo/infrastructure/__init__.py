"""Infrastructure Layer — logging setup and local preference persistence.

Invariants:
    - Infrastructure never imports from services/
"""
