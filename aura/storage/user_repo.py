"""
User Repository - тупые CRUD операции для User модели.

AICODE-NOTE: Репозиторий содержит только доступ к данным, БЕЗ бизнес-логики.
Бизнес-логика (weighted XP, level, streak) находится в core/domain.
"""

from typing import Any, Optional

from aura.core.domain.domains import DOMAIN_FIELDS, DomainStats
from aura.core.domain.progress import Progress
from aura.database.models import User


async def get_user(user_id: int) -> Optional[User]:
    """Получить пользователя по id."""
    return await User.get_or_none(id=user_id)


async def get_by_username(username: str) -> Optional[User]:
    """Получить пользователя по username."""
    return await User.get_or_none(username=username.lower())


async def create_user(username: str, name: str, country: str, school: str) -> User:
    """Создать пользователя с нулевым прогрессом."""
    return await User.create(
        username=username.lower(),
        name=name,
        country=country,
        school=school,
    )


def domain_stats_of(user: User) -> DomainStats:
    """Собрать DomainStats из колонок пользователя."""
    return DomainStats(
        **{field_name: getattr(user, field_name) or 0 for field_name in DOMAIN_FIELDS.values()}
    )


def to_progress(user: User) -> Progress:
    """Снимок прогресса из модели."""
    return Progress(
        xp=user.xp,
        weighted_xp=user.weighted_xp,
        level=user.level,
        streak=user.streak,
        last_active=user.last_active,
        domain_stats=domain_stats_of(user),
        average_mastery=user.average_mastery,
        progression_score=user.progression_score,
    )


def _progress_fields(progress: Progress) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "xp": progress.xp,
        "weighted_xp": progress.weighted_xp,
        "level": progress.level,
        "streak": progress.streak,
        "last_active": progress.last_active,
        "progression_score": progress.progression_score,
    }
    for field_name in DOMAIN_FIELDS.values():
        fields[field_name] = getattr(progress.domain_stats, field_name)
    return fields


async def _compare_and_set(user: User, values: dict[str, Any]) -> bool:
    """
    Записать поля одним UPDATE, если version не изменилась с момента чтения.

    Возвращает False, если строку успел изменить кто-то другой.
    """
    new_version = user.version + 1
    updated = await User.filter(id=user.id, version=user.version).update(
        **values, version=new_version
    )
    if not updated:
        return False

    for key, value in values.items():
        setattr(user, key, value)
    user.version = new_version
    return True


async def save_progress(user: User, progress: Progress) -> bool:
    """Записать снимок прогресса целиком (compare-and-set по version)."""
    return await _compare_and_set(user, _progress_fields(progress))


async def save_quiz_stats(user: User, average_mastery: float, quizzes_taken: int) -> bool:
    """Записать статистику квизов (compare-and-set по version)."""
    return await _compare_and_set(
        user, {"average_mastery": average_mastery, "quizzes_taken": quizzes_taken}
    )


async def increment_lessons_started(user: User) -> User:
    """Увеличить счётчик начатых уроков."""
    user.lessons_started += 1
    await user.save(update_fields=["lessons_started"])
    return user


async def list_top(
    order_field: str,
    limit: int,
    school: str | None = None,
    only_positive: bool = False,
) -> list[User]:
    """
    Пользователи по убыванию order_field, при равенстве - по id.

    Args:
        order_field: Колонка сортировки (weighted_xp или *_xp домена)
        limit: Максимум записей
        school: Фильтр по школе
        only_positive: Только order_field > 0
    """
    query = User.all()
    if school is not None:
        query = query.filter(school=school)
    if only_positive:
        query = query.filter(**{f"{order_field}__gt": 0})
    return await query.order_by(f"-{order_field}", "id").limit(limit)


async def count_ahead(weighted_xp: int, school: str | None = None) -> int:
    """Количество пользователей со строго большим weighted XP."""
    query = User.filter(weighted_xp__gt=weighted_xp)
    if school is not None:
        query = query.filter(school=school)
    return await query.count()


async def list_all() -> list[User]:
    """Все пользователи (для сервисных скриптов)."""
    return await User.all().order_by("id")
