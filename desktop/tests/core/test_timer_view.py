"""Timer View — tests for per-tick derived display values."""

from dataclasses import dataclass

from countdown_todo.core.domain_types import CountdownPrecision, UrgencyTier
from countdown_todo.core.timer_view import derive_timer_view, derive_timer_views

BASE_MINUTE = 29_000_000
BASE_MS = BASE_MINUTE * 60_000


@dataclass
class _Timer:
    id: str
    target_at_minute: int
    created_at_minute: int = BASE_MINUTE - 120
    name: str = "launch"


def test_view_for_future_timer():
    view = derive_timer_view(_Timer("timer-1", BASE_MINUTE + 120), BASE_MS)
    assert view.remaining_minutes == 120
    assert view.tier is UrgencyTier.NORMAL
    assert view.countdown_text == "剩余 2:00"
    assert view.compact_text == "剩余 2时0分"
    assert view.progress == 0.5
    assert not view.overdue


def test_view_for_overdue_timer():
    view = derive_timer_view(
        _Timer("timer-1", BASE_MINUTE - 5), BASE_MS, CountdownPrecision.HOUR,
    )
    assert view.overdue
    assert view.tier is UrgencyTier.OVERDUE
    assert view.countdown_text == "已超时 5分"
    assert view.compact_text == "已超时 0时"


def test_views_mark_selected_timer():
    timers = [_Timer("timer-1", BASE_MINUTE + 5), _Timer("timer-2", BASE_MINUTE + 500)]
    views = derive_timer_views(timers, "timer-2", CountdownPrecision.SECOND, BASE_MS)
    assert [v.selected for v in views] == [False, True]
    assert views[0].tier is UrgencyTier.DANGER
    assert views[0].compact_text == "剩余 05:00"


def test_views_do_not_touch_timers():
    timer = _Timer("timer-1", BASE_MINUTE + 5)
    derive_timer_views([timer], None, CountdownPrecision.MINUTE, BASE_MS)
    assert timer == _Timer("timer-1", BASE_MINUTE + 5)
