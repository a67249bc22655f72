"""
Lesson Rules Domain - чистые правила завершения урока и учёта квизов.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД, БЕЗ side-effects.
Дедупликация и ограничение XP - ответственность вызывающего кода, НЕ движка начисления.
"""

from aura.database.models import Lesson

MIN_MULTIPLIER = 1.0
MAX_MULTIPLIER = 1.5
DEFAULT_MASTERY = 100


def can_complete_lesson(lesson: Lesson) -> bool:
    """Урок начисляет XP максимум один раз."""
    return not lesson.is_completed


def clamp_xp(requested_xp: int | None, xp_reward: int) -> int:
    """
    XP за урок: не больше награды урока.

    Не передали (или 0) -> полная награда.
    """
    return min(requested_xp or xp_reward, xp_reward)


def clamp_multiplier(value: float | None) -> float:
    """Множитель сложности в диапазоне [1.0, 1.5]."""
    if value is None:
        return MIN_MULTIPLIER
    return max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, float(value)))


def running_average(current_average: float, samples: int, new_value: float) -> float:
    """Скользящее среднее после добавления ещё одного значения."""
    if samples <= 0:
        return float(new_value)
    return (current_average * samples + new_value) / (samples + 1)
