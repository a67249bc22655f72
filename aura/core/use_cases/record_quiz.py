"""
Record Quiz Use Case - учёт результата квиза в среднем mastery.

AICODE-NOTE: progression score здесь НЕ пересчитывается - его считает
только начисление XP (AwardXpUseCase) по текущему average_mastery.
"""

import logging
from dataclasses import dataclass

from aura.config import config
from aura.core.domain.lesson_rules import running_average
from aura.core.exceptions import ConcurrentUpdateError, InvalidInputError, NotFoundError
from aura.storage import user_repo

logger = logging.getLogger(__name__)


@dataclass
class QuizRecordResult:
    """Результат учёта квиза."""

    average_mastery: float
    quizzes_taken: int


class RecordQuizUseCase:
    """Use-case для учёта mastery score квиза."""

    async def execute(self, user_id: int, mastery_score: float) -> QuizRecordResult:
        """
        Добавить mastery score (0-100) в скользящее среднее пользователя.

        Raises:
            InvalidInputError: score вне 0-100
            NotFoundError: пользователь не найден
        """
        if not 0 <= mastery_score <= 100:
            raise InvalidInputError(
                "Mastery score must be between 0 and 100",
                details={"mastery_score": mastery_score},
            )

        for _ in range(config.AWARD_MAX_ATTEMPTS):
            user = await user_repo.get_user(user_id)
            if not user:
                raise NotFoundError("User", user_id)

            average = running_average(
                user.average_mastery, user.quizzes_taken, mastery_score
            )
            quizzes_taken = user.quizzes_taken + 1

            if await user_repo.save_quiz_stats(user, average, quizzes_taken):
                logger.info(
                    f"User {user_id} quiz recorded: {mastery_score} "
                    f"(average {average:.1f} over {quizzes_taken})"
                )
                return QuizRecordResult(
                    average_mastery=average, quizzes_taken=quizzes_taken
                )

            logger.warning(f"Concurrent update of user {user_id}, retrying quiz record")

        raise ConcurrentUpdateError(
            f"User {user_id} was modified concurrently", details={"user_id": user_id}
        )
