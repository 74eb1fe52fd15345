"""Record Protocols — structural contracts the pure core reads records through.

Invariants:
    - Core NEVER imports from schemas/ or services/; dependency arrows point inward
    - Protocols are read-only views: core functions never mutate records

Design Decisions:
    - Protocol over ABC: the pydantic models in schemas/ satisfy these
      structurally, and tests can pass plain dataclasses
"""

from typing import Protocol


class TimerLike(Protocol):
    """Anything with a deadline the formatter and classifier can read."""
    id: str
    name: str
    target_at_minute: int
    created_at_minute: int


class TodoLike(Protocol):
    """Todo fields used by draft text helpers."""
    id: str
    title: str
    status: str
