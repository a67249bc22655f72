"""
Тесты для проверки синхронизации схемы БД с моделями Tortoise ORM.

AICODE-NOTE: Эти тесты помогают обнаружить проблемы с миграциями и несоответствия
между моделями и реальной схемой БД. Критично для предотвращения OperationalError.
"""

import pytest
from tortoise.exceptions import IntegrityError, OperationalError

from aura.core.domain.domains import DOMAIN_FIELDS, Domain
from aura.database.models import Lesson, User


@pytest.mark.asyncio
async def test_all_models_have_tables(db):
    """Проверяем, что все модели создали таблицы в БД."""
    tables = {
        "users": User,
        "lessons": Lesson,
    }

    for table_name, model in tables.items():
        try:
            await model.all().limit(1)
        except OperationalError as e:
            pytest.fail(f"Table '{table_name}' does not exist or has schema issues: {e}")


@pytest.mark.asyncio
async def test_every_domain_has_a_user_column(user):
    """Каждому домену соответствует колонка users.*_xp с нулём по умолчанию."""
    for domain in Domain:
        assert getattr(user, DOMAIN_FIELDS[domain]) == 0


@pytest.mark.asyncio
async def test_new_user_defaults(user):
    stored = await User.get(id=user.id)

    assert stored.xp == 0
    assert stored.weighted_xp == 0
    assert stored.level == 1
    assert stored.streak == 0
    assert stored.last_active is None
    assert stored.version == 0


@pytest.mark.asyncio
async def test_lesson_defaults(user):
    lesson = await Lesson.create(user=user, title="Intro", topic="Intro")
    stored = await Lesson.get(id=lesson.id)

    assert stored.domain == Domain.GENERAL
    assert stored.difficulty_multiplier == 1.0
    assert stored.xp_reward == 100
    assert stored.is_completed is False


@pytest.mark.asyncio
async def test_username_is_unique(user):
    with pytest.raises(IntegrityError):
        await User.create(username="test_user", name="Dup", country="Kenya", school="X")
