"""
Gamification Domain Rules - чистые функции для расчета level, streak, score.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД, БЕЗ side-effects.
Вызываются из use-cases, API и скриптов. Таблица уровней живёт ТОЛЬКО здесь.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone

# Порог weighted XP для каждого уровня (index 0 = Level 1)
LEVEL_THRESHOLDS: tuple[int, ...] = (0, 100, 300, 600, 1000, 1500, 2100, 2800, 3600, 5000)
MAX_LEVEL = len(LEVEL_THRESHOLDS)

# Веса progression score
SCORE_XP_WEIGHT = 0.5
SCORE_STREAK_WEIGHT = 10
SCORE_MASTERY_WEIGHT = 5


def round_half_up(value: float) -> int:
    """
    Округление .5 вверх (как Math.round), а не банковское round().

    round(22.5) == 22, round_half_up(22.5) == 23.
    """
    return math.floor(value + 0.5)


def level_for(weighted_xp: int) -> int:
    """
    Рассчитать уровень по weighted XP.

    Уровень = 1 + индекс наибольшего порога <= weighted_xp.
    Выше последнего порога уровень не растёт (MAX_LEVEL).
    """
    for index in range(MAX_LEVEL - 1, -1, -1):
        if weighted_xp >= LEVEL_THRESHOLDS[index]:
            return index + 1
    return 1


@dataclass(frozen=True)
class LevelProgress:
    """Прогресс внутри текущего уровня."""

    level: int
    weighted_xp: int
    current_level_xp: int
    next_level_xp: int | None
    xp_to_next_level: int
    progress_percent: float


def level_progress(weighted_xp: int) -> LevelProgress:
    """Сколько осталось до следующего уровня (по той же таблице порогов)."""
    level = level_for(weighted_xp)
    floor_xp = LEVEL_THRESHOLDS[level - 1]

    if level >= MAX_LEVEL:
        return LevelProgress(
            level=level,
            weighted_xp=weighted_xp,
            current_level_xp=floor_xp,
            next_level_xp=None,
            xp_to_next_level=0,
            progress_percent=100.0,
        )

    next_xp = LEVEL_THRESHOLDS[level]
    span = next_xp - floor_xp
    return LevelProgress(
        level=level,
        weighted_xp=weighted_xp,
        current_level_xp=floor_xp,
        next_level_xp=next_xp,
        xp_to_next_level=max(0, next_xp - weighted_xp),
        progress_percent=round(min(100.0, (weighted_xp - floor_xp) / span * 100), 1),
    )


def _utc_date(moment: datetime) -> date:
    """Календарная дата в UTC. Naive datetime считается уже UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def advance_streak(
    current_streak: int, last_active: datetime | None, now: datetime
) -> tuple[int, datetime]:
    """
    Рассчитать streak после активности в момент now.

    Возвращает:
    - новый streak (int)
    - новый last_active (всегда now)

    Логика (календарные дни UTC):
    - Сегодня уже была активность → streak не меняется
    - Вчера была активность → streak + 1
    - Пропущен день или первая активность → streak = 1
    """
    if last_active is None:
        return 1, now

    last_date = _utc_date(last_active)
    today = _utc_date(now)

    # AICODE-NOTE: last_active из будущего (рассинхрон часов) считаем "сегодня"
    if last_date >= today:
        return current_streak, now

    if last_date == today - timedelta(days=1):
        return current_streak + 1, now

    return 1, now


def calculate_weighted_xp(raw_xp: int, multiplier: float | None) -> int:
    """WeightedXP = round(RawXP * DifficultyMultiplier). Пустой множитель = 1.0."""
    return round_half_up(raw_xp * (multiplier or 1.0))


def calculate_progression_score(
    weighted_xp: int, streak: int, average_mastery: float
) -> int:
    """
    "True skill" метрика.

    Формула: (WeightedXP * 0.5) + (Streak * 10) + (AvgMastery * 5)
    """
    return round_half_up(
        weighted_xp * SCORE_XP_WEIGHT
        + streak * SCORE_STREAK_WEIGHT
        + (average_mastery or 0) * SCORE_MASTERY_WEIGHT
    )
