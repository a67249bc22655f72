"""
Скрипт для пересчёта уровней и progression score всех пользователей.
Запуск: python -m aura.scripts.recalc_levels

Также показывает пользователей, у которых сумма доменов != weighted XP
(начисления без урока не попадают ни в один домен).
"""

import asyncio
from dataclasses import replace

from tortoise import Tortoise

from aura.core.domain.gamification import calculate_progression_score, level_for
from aura.core.domain.progress import Progress
from aura.database.config import TORTOISE_ORM
from aura.storage import user_repo


def recalculate(progress: Progress) -> Progress:
    """Уровень (не ниже текущего) и score по текущей таблице порогов."""
    return replace(
        progress,
        level=max(progress.level, level_for(progress.weighted_xp)),
        progression_score=calculate_progression_score(
            progress.weighted_xp, progress.streak, progress.average_mastery
        ),
    )


def unattributed_xp(progress: Progress) -> int:
    """Weighted XP, не отнесённый ни к одному домену."""
    return progress.weighted_xp - progress.domain_stats.total()


async def recalculate_all_users():
    """Пересчитывает уровни и score для всех пользователей."""
    await Tortoise.init(config=TORTOISE_ORM)

    users = await user_repo.list_all()
    print(f"Found {len(users)} users to recalculate")

    for user in users:
        old = user_repo.to_progress(user)
        new = recalculate(old)

        gap = unattributed_xp(new)
        if gap:
            print(f"  User {user.id} '{user.username}': {gap} weighted XP without domain")

        if new == old:
            continue

        if not await user_repo.save_progress(user, new):
            print(f"  User {user.id} '{user.username}': changed concurrently, skipping")
            continue

        print(
            f"  User {user.id} '{user.username}': level {old.level} -> {new.level}, "
            f"score {old.progression_score} -> {new.progression_score}"
        )

    await Tortoise.close_connections()
    print("\nDone!")


if __name__ == "__main__":
    asyncio.run(recalculate_all_users())
