"""
Lesson Repository - тупые CRUD операции для Lesson модели.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
Бизнес-логика находится в core/domain и core/use_cases.
"""

from datetime import datetime

from aura.core.domain.domains import Domain, lesson_domain
from aura.core.domain.progress import LessonMeta
from aura.database.models import Lesson


async def get_lesson(lesson_id: int) -> Lesson | None:
    """Получить урок по ID."""
    return await Lesson.get_or_none(id=lesson_id)


async def get_lessons_by_user(user_id: int) -> list[Lesson]:
    """Уроки пользователя, новые первыми."""
    return await Lesson.filter(user_id=user_id).order_by("-created_at", "-id")


def to_meta(lesson: Lesson) -> LessonMeta:
    """Метаданные урока для движка начисления."""
    return LessonMeta(
        domain=lesson_domain(lesson.domain),
        difficulty_multiplier=lesson.difficulty_multiplier or 1.0,
        xp_reward=lesson.xp_reward,
    )


async def create_lesson(
    user_id: int,
    title: str,
    topic: str,
    content: str | None,
    domain: Domain,
    difficulty_multiplier: float,
    xp_reward: int,
) -> Lesson:
    """
    Создать урок.

    Args:
        user_id: Владелец урока
        title: Название
        topic: Тема
        content: Исходный материал
        domain: Домен от классификатора
        difficulty_multiplier: Множитель сложности (1.0 - 1.5)
        xp_reward: Награда XP (потолок начисления)

    Returns:
        Созданный Lesson
    """
    return await Lesson.create(
        user_id=user_id,
        title=title,
        topic=topic,
        content=content,
        domain=domain,
        difficulty_multiplier=difficulty_multiplier,
        xp_reward=xp_reward,
    )


async def mark_completed(
    lesson: Lesson, mastery_score: int, completed_at: datetime
) -> bool:
    """
    Отметить урок выполненным.

    AICODE-NOTE: условный UPDATE по is_completed=False - повторная отметка
    (двойной submit) вернёт False и XP не начислится второй раз.
    """
    updated = await Lesson.filter(id=lesson.id, is_completed=False).update(
        is_completed=True,
        mastery_score=mastery_score,
        completed_at=completed_at,
    )
    if not updated:
        return False

    lesson.is_completed = True
    lesson.mastery_score = mastery_score
    lesson.completed_at = completed_at
    return True
