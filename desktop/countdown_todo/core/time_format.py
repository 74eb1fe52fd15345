"""Time & Duration Formatting — integer minutes/milliseconds to display strings.

Invariants:
    - A minute is epoch milliseconds // 60000, truncated toward zero
    - Formatters emit magnitudes only; "剩余"/"已超时" prefixes are added by
      remaining_text / compact_remaining_text, never inside a formatter
    - SECOND precision is the only path that reads milliseconds directly
    - Deterministic given (now, target, precision): the clock is always a parameter

Design Decisions:
    - Pure functions over a formatter class: nothing to configure, nothing to cache
    - Local time for absolute timestamps (format_minute, parse_date_minute):
      deadlines are entered and read in the user's wall clock. Bare dates are
      the exception and parse as UTC midnight, matching the webview's Date()
"""

import time
from datetime import date, datetime, timezone

from countdown_todo.core.domain_types import (
    CountdownPrecision,
    MILLIS_PER_MINUTE,
    MINUTES_PER_DAY,
    MINUTES_PER_HOUR,
)
from countdown_todo.core.record_protocols import TimerLike


REMAINING_PREFIX = "剩余"
OVERDUE_PREFIX = "已超时"
MISSING_VALUE = "-"


# ─── Clock ───────────────────────────────────────────────────────

def now_millis() -> int:
    return time.time_ns() // 1_000_000


def to_minute(millis: int) -> int:
    """Epoch millis -> epoch minute, truncated toward zero."""
    if millis >= 0:
        return millis // MILLIS_PER_MINUTE
    return -((-millis) // MILLIS_PER_MINUTE)


def now_minute(millis: int | None = None) -> int:
    return to_minute(now_millis() if millis is None else millis)


# ─── Absolute timestamps ─────────────────────────────────────────

def parse_date_minute(value: str | None) -> int | None:
    """Parse an ISO date or datetime ("2026-02-22T18:30") into an epoch minute.

    A bare date ("2026-02-22") is UTC midnight; a naive datetime is local time.
    Returns None when blank or unparsable.
    """
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        day = date.fromisoformat(text)
    except ValueError:
        pass
    else:
        parsed = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        return to_minute(int(parsed.timestamp() * 1000))
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return to_minute(int(parsed.timestamp() * 1000))


def format_minute(minute: int | None) -> str:
    """Epoch minute -> local "YYYY-MM-DD HH:MM"; "-" for an absent value."""
    if minute is None:
        return MISSING_VALUE
    return datetime.fromtimestamp(minute * 60).strftime("%Y-%m-%d %H:%M")


def to_datetime_input(minute: int) -> str:
    """Epoch minute -> "YYYY-MM-DDTHH:MM", the format parse_date_minute reads back."""
    return datetime.fromtimestamp(minute * 60).strftime("%Y-%m-%dT%H:%M")


# ─── Countdowns ──────────────────────────────────────────────────

def remaining_minutes(timer: TimerLike, now: int) -> int:
    """Signed: >= 0 means time left, < 0 means overdue by the magnitude."""
    return timer.target_at_minute - now


def format_countdown(total_minutes: int) -> str:
    """Magnitude-tiered countdown: "1天1时", "1:30", "45分"."""
    total = abs(total_minutes)
    if total >= MINUTES_PER_DAY:
        days, rest = divmod(total, MINUTES_PER_DAY)
        hours = rest // MINUTES_PER_HOUR
        return f"{days}天{hours}时" if hours else f"{days}天"
    if total >= MINUTES_PER_HOUR:
        hours, minutes = divmod(total, MINUTES_PER_HOUR)
        return f"{hours}:{minutes:02d}"
    return f"{total}分"


def format_compact_countdown(
    target_minute: int,
    precision: CountdownPrecision | str,
    now_ms: int | None = None,
) -> str:
    """Live countdown for the compact view at hour, minute, or second granularity."""
    precision = CountdownPrecision(precision)
    now_ms = now_millis() if now_ms is None else now_ms

    if precision is CountdownPrecision.SECOND:
        delta_seconds = abs(target_minute * MILLIS_PER_MINUTE - now_ms) // 1000
        return _format_clock(delta_seconds)

    delta = abs(target_minute - to_minute(now_ms))
    days, rest = divmod(delta, MINUTES_PER_DAY)
    hours, minutes = divmod(rest, MINUTES_PER_HOUR)

    if precision is CountdownPrecision.HOUR:
        return f"{days}天{hours}时" if days else f"{hours}时"

    segments = []
    if days:
        segments.append(f"{days}天")
    if days or hours:
        segments.append(f"{hours}时")
    segments.append(f"{minutes}分")
    return "".join(segments)


def _format_clock(total_seconds: int) -> str:
    total_minutes, seconds = divmod(total_seconds, 60)
    days, rest = divmod(total_minutes, MINUTES_PER_DAY)
    hours, minutes = divmod(rest, MINUTES_PER_HOUR)
    if days:
        return f"{days}天{hours:02d}:{minutes:02d}:{seconds:02d}"
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def is_overdue_at(target_minute: int, precision: CountdownPrecision | str, now_ms: int) -> bool:
    """Overdue check in the same unit the compact countdown is rendered in."""
    if CountdownPrecision(precision) is CountdownPrecision.SECOND:
        return target_minute * MILLIS_PER_MINUTE - now_ms < 0
    return target_minute - to_minute(now_ms) < 0


def remaining_text(timer: TimerLike, now: int) -> str:
    remaining = remaining_minutes(timer, now)
    prefix = REMAINING_PREFIX if remaining >= 0 else OVERDUE_PREFIX
    return f"{prefix} {format_countdown(remaining)}"


def compact_remaining_text(
    timer: TimerLike, precision: CountdownPrecision | str, now_ms: int,
) -> str:
    prefix = (
        OVERDUE_PREFIX
        if is_overdue_at(timer.target_at_minute, precision, now_ms)
        else REMAINING_PREFIX
    )
    countdown = format_compact_countdown(timer.target_at_minute, precision, now_ms)
    return f"{prefix} {countdown}"


# ─── Durations ───────────────────────────────────────────────────

def format_duration(total_minutes: int | None) -> str:
    """Inter-mark duration: "45分钟", "2小时", "1小时30分". "-" for the first mark."""
    if total_minutes is None:
        return MISSING_VALUE
    if total_minutes < MINUTES_PER_HOUR:
        return f"{total_minutes}分钟"
    hours, minutes = divmod(total_minutes, MINUTES_PER_HOUR)
    return f"{hours}小时{minutes}分" if minutes else f"{hours}小时"
