"""
Award XP Use Case - начисление XP за одно событие завершения.

AICODE-NOTE: Use-case объединяет репозитории + домейн-правила.
Ровно одно чтение пользователя, одно чтение урока, одна запись агрегата.
Запись - compare-and-set по version: при гонке весь цикл читается заново.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from aura.config import config
from aura.core.domain.domains import Domain
from aura.core.domain.progress import apply_award
from aura.core.exceptions import ConcurrentUpdateError, NotFoundError
from aura.storage import lesson_repo, user_repo

logger = logging.getLogger(__name__)


@dataclass
class AwardSummary:
    """Итог начисления."""

    xp: int
    weighted_xp: int
    level: int
    streak: int
    progression_score: int
    xp_awarded: int = 0
    weighted_awarded: int = 0
    domain: Domain | None = None
    level_up: bool = False


class AwardXpUseCase:
    """Use-case для начисления XP."""

    def __init__(self, max_attempts: int | None = None):
        if max_attempts is None:
            max_attempts = config.AWARD_MAX_ATTEMPTS
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.max_attempts = max_attempts

    async def execute(
        self,
        user_id: int,
        raw_xp: int,
        lesson_id: int | None = None,
        now: datetime | None = None,
    ) -> AwardSummary:
        """
        Начислить XP.

        Args:
            user_id: ID пользователя
            raw_xp: Raw XP (уже ограничен вызывающим кодом)
            lesson_id: ID урока (домен и множитель сложности)
            now: Текущее время (для тестов, по умолчанию UTC now)

        Returns:
            AwardSummary с новым состоянием

        Raises:
            NotFoundError: пользователь не найден
            InvalidInputError: raw_xp не положительный
            ConcurrentUpdateError: агрегат менялся параллельно все попытки
        """
        if now is None:
            now = datetime.now(timezone.utc)

        # 1. Метаданные урока (не найден -> начисление без домена)
        lesson_meta = None
        if lesson_id is not None:
            lesson = await lesson_repo.get_lesson(lesson_id)
            if lesson:
                lesson_meta = lesson_repo.to_meta(lesson)
            else:
                logger.warning(f"Lesson {lesson_id} not found, awarding unweighted XP")

        for attempt in range(1, self.max_attempts + 1):
            # 2. Получить пользователя
            user = await user_repo.get_user(user_id)
            if not user:
                raise NotFoundError("User", user_id)

            # 3. Рассчитать новый снимок (домен)
            outcome = apply_award(user_repo.to_progress(user), raw_xp, lesson_meta, now)

            # 4. Записать снимок целиком (репозиторий)
            if await user_repo.save_progress(user, outcome.progress):
                break

            logger.warning(
                f"Concurrent update of user {user_id}, retrying award "
                f"({attempt}/{self.max_attempts})"
            )
        else:
            raise ConcurrentUpdateError(
                f"User {user_id} was modified concurrently",
                details={"user_id": user_id, "attempts": self.max_attempts},
            )

        progress = outcome.progress
        logger.info(
            f"User {user_id}: +{outcome.xp_awarded} XP "
            f"(weighted +{outcome.weighted_awarded}, "
            f"domain {outcome.domain.value if outcome.domain else '-'}), "
            f"level {progress.level}, streak {progress.streak}"
        )
        if outcome.level_up:
            logger.info(f"User {user_id} reached level {progress.level}")

        return AwardSummary(
            xp=progress.xp,
            weighted_xp=progress.weighted_xp,
            level=progress.level,
            streak=progress.streak,
            progression_score=progress.progression_score,
            xp_awarded=outcome.xp_awarded,
            weighted_awarded=outcome.weighted_awarded,
            domain=outcome.domain,
            level_up=outcome.level_up,
        )
