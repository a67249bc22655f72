"""
Complete Lesson Use Case - сценарий завершения урока.

AICODE-NOTE: Здесь живёт политика дедупликации и ограничения XP:
урок начисляет XP один раз и не больше своей награды xp_reward.
Сам AwardXpUseCase эти проверки НЕ делает.
"""

import logging
from datetime import datetime, timezone

from tortoise.transactions import in_transaction

from aura.core.domain.lesson_rules import DEFAULT_MASTERY, can_complete_lesson, clamp_xp
from aura.core.exceptions import (
    InvalidInputError,
    LessonAlreadyCompletedError,
    NotFoundError,
    PermissionDeniedError,
)
from aura.core.use_cases.award_xp import AwardSummary, AwardXpUseCase
from aura.core.use_cases.record_quiz import RecordQuizUseCase
from aura.storage import lesson_repo

logger = logging.getLogger(__name__)


class CompleteLessonUseCase:
    """Use-case для завершения урока."""

    def __init__(
        self,
        award_xp: AwardXpUseCase | None = None,
        record_quiz: RecordQuizUseCase | None = None,
    ):
        self.award_xp = award_xp or AwardXpUseCase()
        self.record_quiz = record_quiz or RecordQuizUseCase()

    async def execute(
        self,
        user_id: int,
        lesson_id: int,
        xp_requested: int | None = None,
        mastery_score: int | None = None,
        now: datetime | None = None,
    ) -> AwardSummary:
        """
        Завершить урок и начислить XP.

        Args:
            user_id: ID пользователя
            lesson_id: ID урока
            xp_requested: Запрошенный XP (ограничивается lesson.xp_reward)
            mastery_score: Результат квиза урока (0-100); не передан -> 100 только на уроке
            now: Текущее время (для тестов)

        Returns:
            AwardSummary после начисления
        """
        if now is None:
            now = datetime.now(timezone.utc)

        # 1. Получить урок
        lesson = await lesson_repo.get_lesson(lesson_id)
        if not lesson:
            raise NotFoundError("Lesson", lesson_id)

        # 2. Проверить владельца и правила (домейн)
        if lesson.user_id != user_id:
            raise PermissionDeniedError(
                "Lesson does not belong to user",
                details={"lesson_id": lesson_id, "user_id": user_id},
            )
        if not can_complete_lesson(lesson):
            raise LessonAlreadyCompletedError(
                "Lesson already completed", details={"lesson_id": lesson_id}
            )

        # 3. Ограничить XP наградой урока (домейн)
        if xp_requested is not None and xp_requested < 0:
            raise InvalidInputError(
                "Requested XP must not be negative",
                details={"xp_requested": xp_requested},
            )
        safe_xp = clamp_xp(xp_requested, lesson.xp_reward)
        mastery = mastery_score if mastery_score is not None else DEFAULT_MASTERY
        if not 0 <= mastery <= 100:
            raise InvalidInputError(
                "Mastery score must be between 0 and 100",
                details={"mastery_score": mastery},
            )

        # 4-6 одной транзакцией: если начисление упало, урок остаётся незавершённым
        async with in_transaction():
            # 4. Отметить урок (репозиторий); проигравший гонку двойной submit - отказ
            if not await lesson_repo.mark_completed(lesson, mastery, now):
                raise LessonAlreadyCompletedError(
                    "Lesson already completed", details={"lesson_id": lesson_id}
                )

            # 5. Mastery до начисления, чтобы progression score его учёл.
            # Без присланного результата квиза среднее не трогаем (100 - только на уроке)
            if mastery_score is not None:
                await self.record_quiz.execute(user_id, mastery_score)

            # 6. Начислить XP ровно один раз
            summary = await self.award_xp.execute(
                user_id=user_id, raw_xp=safe_xp, lesson_id=lesson.id, now=now
            )

        logger.info(
            f"Lesson {lesson_id} completed by user {user_id}: "
            f"+{summary.xp_awarded} XP (requested {xp_requested})"
        )
        return summary
