"""Urgency Classification — signed remaining minutes to one of five ordered tiers.

Invariants:
    - Thresholds evaluated in order, first match wins:
      < 0 overdue, <= 10 danger, <= 30 warning, <= 120 normal, else relaxed
    - Upper bound of each band is inclusive
    - Total over all integers and monotonic: more remaining is never more urgent
"""

from countdown_todo.core.domain_types import UrgencyTier
from countdown_todo.core.record_protocols import TimerLike


DANGER_MAX_MINUTES: int = 10
WARNING_MAX_MINUTES: int = 30
NORMAL_MAX_MINUTES: int = 120


def classify_urgency(remaining: int) -> UrgencyTier:
    if remaining < 0:
        return UrgencyTier.OVERDUE
    if remaining <= DANGER_MAX_MINUTES:
        return UrgencyTier.DANGER
    if remaining <= WARNING_MAX_MINUTES:
        return UrgencyTier.WARNING
    if remaining <= NORMAL_MAX_MINUTES:
        return UrgencyTier.NORMAL
    return UrgencyTier.RELAXED


def elapsed_fraction(timer: TimerLike, now: int) -> float:
    """Share of the created->target span already elapsed, clamped to [0, 1]."""
    span = timer.target_at_minute - timer.created_at_minute
    if span <= 0:
        return 1.0
    elapsed = now - timer.created_at_minute
    return min(1.0, max(0.0, elapsed / span))
