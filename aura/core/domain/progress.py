"""
Progress Domain - неизменяемый снимок прогресса и правило начисления XP.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД, БЕЗ side-effects.
Use-case читает снимок, apply_award строит НОВЫЙ снимок, use-case пишет его целиком.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from aura.core.domain.domains import Domain, DomainStats
from aura.core.domain.gamification import (
    advance_streak,
    calculate_progression_score,
    calculate_weighted_xp,
    level_for,
)
from aura.core.exceptions import InvalidInputError


@dataclass(frozen=True)
class Progress:
    """Поля геймификации пользователя, которые пишет движок начисления."""

    xp: int = 0
    weighted_xp: int = 0
    level: int = 1
    streak: int = 0
    last_active: datetime | None = None
    domain_stats: DomainStats = field(default_factory=DomainStats)
    average_mastery: float = 0.0
    progression_score: int = 0


@dataclass(frozen=True)
class LessonMeta:
    """Метаданные урока, нужные для начисления."""

    domain: Domain
    difficulty_multiplier: float
    xp_reward: int


@dataclass(frozen=True)
class AwardOutcome:
    """Результат применения одного начисления."""

    progress: Progress
    xp_awarded: int
    weighted_awarded: int
    domain: Domain | None
    level_up: bool


def apply_award(
    progress: Progress,
    raw_xp: int,
    lesson: LessonMeta | None,
    now: datetime,
) -> AwardOutcome:
    """
    Применить одно начисление XP к снимку прогресса.

    - С уроком: weighted = round(raw * multiplier), бакет домена += weighted
    - Без урока: weighted = raw, домены не трогаем
    - level никогда не уменьшается
    - streak обновляется ровно один раз
    - progression score считается по НОВЫМ weighted_xp/streak и текущему mastery
    """
    if isinstance(raw_xp, bool) or not isinstance(raw_xp, int) or raw_xp <= 0:
        raise InvalidInputError(
            "XP amount must be a positive integer", details={"raw_xp": raw_xp}
        )

    domain_stats = progress.domain_stats
    domain: Domain | None = None

    if lesson is not None:
        weighted = calculate_weighted_xp(raw_xp, lesson.difficulty_multiplier)
        domain = lesson.domain
        domain_stats = domain_stats.with_award(domain, weighted)
    else:
        weighted = raw_xp

    xp = progress.xp + raw_xp
    weighted_xp = progress.weighted_xp + weighted
    level = max(progress.level, level_for(weighted_xp))
    streak, last_active = advance_streak(progress.streak, progress.last_active, now)

    new_progress = replace(
        progress,
        xp=xp,
        weighted_xp=weighted_xp,
        level=level,
        streak=streak,
        last_active=last_active,
        domain_stats=domain_stats,
        progression_score=calculate_progression_score(
            weighted_xp, streak, progress.average_mastery
        ),
    )

    return AwardOutcome(
        progress=new_progress,
        xp_awarded=raw_xp,
        weighted_awarded=weighted,
        domain=domain,
        level_up=level > progress.level,
    )
