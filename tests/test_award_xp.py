"""
Тесты движка начисления XP (AwardXpUseCase) на in-memory SQLite.
"""

from datetime import datetime, timedelta, timezone

import pytest

from aura.core.domain.domains import Domain
from aura.core.exceptions import ConcurrentUpdateError, InvalidInputError, NotFoundError
from aura.core.use_cases.award_xp import AwardXpUseCase
from aura.database.models import Lesson, User
from aura.storage import user_repo

DAY_1 = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


async def make_lesson(user: User, domain: Domain, multiplier: float, xp_reward: int = 100) -> Lesson:
    return await Lesson.create(
        user=user,
        title="Lesson",
        topic="Topic",
        domain=domain,
        difficulty_multiplier=multiplier,
        xp_reward=xp_reward,
    )


@pytest.mark.asyncio
async def test_weighted_award_credits_domain(user):
    lesson = await make_lesson(user, Domain.STEM, 1.4)

    summary = await AwardXpUseCase().execute(user.id, 100, lesson_id=lesson.id, now=DAY_1)

    assert summary.xp == 100
    assert summary.weighted_xp == 140
    assert summary.weighted_awarded == 140
    assert summary.domain is Domain.STEM
    assert summary.level == 2
    assert summary.level_up is True

    stored = await User.get(id=user.id)
    assert stored.xp == 100
    assert stored.weighted_xp == 140
    assert stored.stem_xp == 140
    assert stored.humanities_xp == 0
    assert stored.level == 2
    assert stored.streak == 1
    assert stored.last_active == DAY_1
    assert stored.version == user.version + 1


@pytest.mark.asyncio
async def test_award_without_lesson_is_unweighted(user):
    summary = await AwardXpUseCase().execute(user.id, 50, now=DAY_1)

    assert summary.weighted_xp == 50
    assert summary.domain is None

    stored = await User.get(id=user.id)
    assert user_repo.domain_stats_of(stored).total() == 0


@pytest.mark.asyncio
async def test_missing_lesson_awards_unweighted(user):
    summary = await AwardXpUseCase().execute(user.id, 50, lesson_id=9999, now=DAY_1)

    assert summary.weighted_xp == 50
    assert summary.domain is None


@pytest.mark.asyncio
async def test_unknown_user_raises_not_found(db):
    with pytest.raises(NotFoundError):
        await AwardXpUseCase().execute(424242, 10, now=DAY_1)


@pytest.mark.asyncio
async def test_non_positive_xp_is_rejected_without_write(user):
    with pytest.raises(InvalidInputError):
        await AwardXpUseCase().execute(user.id, 0, now=DAY_1)

    stored = await User.get(id=user.id)
    assert stored.xp == 0
    assert stored.version == user.version


@pytest.mark.asyncio
async def test_three_completions_across_two_days(user):
    """Два STEM урока в первый день, урок без множителя на следующий."""
    use_case = AwardXpUseCase()
    first = await make_lesson(user, Domain.STEM, 1.3)
    second = await make_lesson(user, Domain.STEM, 1.3, xp_reward=200)

    summary = await use_case.execute(user.id, 100, lesson_id=first.id, now=DAY_1)
    assert (summary.xp, summary.weighted_xp, summary.level, summary.streak) == (100, 130, 2, 1)

    later = DAY_1 + timedelta(hours=5)
    summary = await use_case.execute(user.id, 200, lesson_id=second.id, now=later)
    assert (summary.xp, summary.weighted_xp, summary.level, summary.streak) == (300, 390, 3, 1)

    next_day = DAY_1 + timedelta(days=1)
    summary = await use_case.execute(user.id, 50, now=next_day)
    assert (summary.xp, summary.weighted_xp, summary.level, summary.streak) == (350, 440, 3, 2)

    stored = await User.get(id=user.id)
    assert stored.stem_xp == 390
    # 440 * 0.5 + 2 * 10 + 0 * 5
    assert stored.progression_score == 240


@pytest.mark.asyncio
async def test_concurrent_write_is_retried(user, monkeypatch):
    """Параллельная запись между чтением и CAS -> повтор на свежих данных."""
    original_save = user_repo.save_progress
    calls = {"count": 0}

    async def racing_save(target, progress):
        calls["count"] += 1
        if calls["count"] == 1:
            # Другой процесс успел начислить 20 XP
            await User.filter(id=target.id).update(
                xp=20, weighted_xp=20, version=target.version + 1
            )
        return await original_save(target, progress)

    monkeypatch.setattr(user_repo, "save_progress", racing_save)

    summary = await AwardXpUseCase().execute(user.id, 30, now=DAY_1)

    assert calls["count"] == 2
    assert summary.xp == 50
    assert summary.weighted_xp == 50

    stored = await User.get(id=user.id)
    assert stored.xp == 50
    assert stored.version == user.version + 2


@pytest.mark.asyncio
async def test_retries_exhausted_raise_conflict(user, monkeypatch):
    async def always_conflict(target, progress):
        return False

    monkeypatch.setattr(user_repo, "save_progress", always_conflict)

    with pytest.raises(ConcurrentUpdateError) as exc_info:
        await AwardXpUseCase(max_attempts=2).execute(user.id, 30, now=DAY_1)

    assert exc_info.value.details["attempts"] == 2
    stored = await User.get(id=user.id)
    assert stored.xp == 0


def test_zero_attempts_is_rejected():
    with pytest.raises(ValueError):
        AwardXpUseCase(max_attempts=0)


def test_default_attempts_come_from_config():
    from aura.config import config

    assert AwardXpUseCase().max_attempts == config.AWARD_MAX_ATTEMPTS
    assert AwardXpUseCase(max_attempts=1).max_attempts == 1
