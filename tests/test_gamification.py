from datetime import datetime, timedelta, timezone

import pytest

from aura.core.domain.gamification import (
    LEVEL_THRESHOLDS,
    MAX_LEVEL,
    advance_streak,
    calculate_progression_score,
    calculate_weighted_xp,
    level_for,
    level_progress,
    round_half_up,
)

UTC = timezone.utc


@pytest.mark.parametrize(
    "weighted_xp, level",
    [(0, 1), (99, 1), (100, 2), (299, 2), (300, 3), (4999, 9), (5000, 10), (1_000_000, 10)],
)
def test_level_boundaries(weighted_xp: int, level: int) -> None:
    assert level_for(weighted_xp) == level


def test_level_is_monotonic() -> None:
    """Level never drops as weighted XP grows."""
    levels = [level_for(xp) for xp in range(0, 6000, 7)]
    assert levels == sorted(levels)
    assert levels[-1] == MAX_LEVEL


def test_every_threshold_starts_its_level() -> None:
    for index, threshold in enumerate(LEVEL_THRESHOLDS):
        assert level_for(threshold) == index + 1
        if threshold > 0:
            assert level_for(threshold - 1) == index


def test_level_progress_mid_level() -> None:
    progress = level_progress(200)
    assert progress.level == 2
    assert progress.current_level_xp == 100
    assert progress.next_level_xp == 300
    assert progress.xp_to_next_level == 100
    assert progress.progress_percent == 50.0


def test_level_progress_max_level() -> None:
    progress = level_progress(7000)
    assert progress.level == MAX_LEVEL
    assert progress.next_level_xp is None
    assert progress.xp_to_next_level == 0
    assert progress.progress_percent == 100.0


def test_round_half_up_differs_from_bankers_rounding() -> None:
    assert round_half_up(22.5) == 23
    assert round_half_up(7.5) == 8
    assert round_half_up(27.500000000000004) == 28
    assert round_half_up(139.99999999999997) == 140


def test_weighted_xp() -> None:
    assert calculate_weighted_xp(100, 1.4) == 140
    assert calculate_weighted_xp(15, 1.5) == 23
    assert calculate_weighted_xp(50, None) == 50
    assert calculate_weighted_xp(50, 0) == 50


def test_progression_score() -> None:
    assert calculate_progression_score(1000, 10, 80) == 1000
    assert calculate_progression_score(130, 1, 0) == 75
    assert calculate_progression_score(0, 0, 0) == 0


def test_streak_new_user() -> None:
    now = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)
    assert advance_streak(0, None, now) == (1, now)


def test_streak_continuation() -> None:
    """Yesterday 2pm -> today 9am continues the streak."""
    yesterday = datetime(2026, 3, 9, 14, 0, tzinfo=UTC)
    today = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
    assert advance_streak(5, yesterday, today) == (6, today)


def test_streak_reset_after_gap() -> None:
    now = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)
    assert advance_streak(5, now - timedelta(days=3), now) == (1, now)
    assert advance_streak(5, now - timedelta(days=2), now) == (1, now)


def test_streak_same_day_is_idempotent() -> None:
    first = datetime(2026, 3, 10, 0, 5, tzinfo=UTC)
    second = datetime(2026, 3, 10, 23, 55, tzinfo=UTC)

    streak, last_active = advance_streak(3, first - timedelta(days=1), first)
    assert (streak, last_active) == (4, first)

    streak, last_active = advance_streak(streak, last_active, second)
    assert streak == 4
    assert last_active == second


def test_streak_uses_utc_calendar_days() -> None:
    """23:30 in UTC+3 is still the previous UTC day."""
    plus_three = timezone(timedelta(hours=3))
    last = datetime(2026, 3, 10, 1, 30, tzinfo=plus_three)  # 2026-03-09 22:30 UTC
    now = datetime(2026, 3, 10, 8, 0, tzinfo=UTC)
    assert advance_streak(2, last, now)[0] == 3


def test_streak_short_gap_across_midnight_counts_as_next_day() -> None:
    """Calendar days, not 24h windows."""
    last = datetime(2026, 3, 9, 23, 59, tzinfo=UTC)
    now = datetime(2026, 3, 10, 0, 1, tzinfo=UTC)
    assert advance_streak(1, last, now)[0] == 2


def test_streak_naive_datetimes_are_utc() -> None:
    last = datetime(2026, 3, 9, 10, 0)
    now = datetime(2026, 3, 10, 10, 0, tzinfo=UTC)
    assert advance_streak(1, last, now)[0] == 2


def test_streak_last_active_in_future_keeps_streak() -> None:
    now = datetime(2026, 3, 10, 10, 0, tzinfo=UTC)
    assert advance_streak(4, now + timedelta(days=1), now) == (4, now)
