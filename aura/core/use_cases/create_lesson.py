"""
Create Lesson Use Case - регистрация урока из материала пользователя.

AICODE-NOTE: Домен и множитель ставит классификатор; движок начисления
потом только читает их из сохранённого урока.
"""

import logging

from aura.core.exceptions import InvalidInputError, NotFoundError
from aura.database.models import Lesson
from aura.services.classifier import LessonClassifier, get_classifier
from aura.storage import lesson_repo, user_repo

logger = logging.getLogger(__name__)

DEFAULT_XP_REWARD = 100


class CreateLessonUseCase:
    """Use-case для создания урока."""

    def __init__(self, classifier: LessonClassifier | None = None):
        self._classifier = classifier

    @property
    def classifier(self) -> LessonClassifier:
        if self._classifier is None:
            self._classifier = get_classifier()
        return self._classifier

    async def execute(
        self,
        user_id: int,
        title: str,
        content: str,
        topic: str | None = None,
        xp_reward: int | None = None,
    ) -> Lesson:
        """
        Классифицировать материал и сохранить урок.

        Raises:
            InvalidInputError: пустые title/content или xp_reward < 1
            NotFoundError: пользователь не найден
        """
        if not title.strip() or not content.strip():
            raise InvalidInputError("Title and content are required")
        if xp_reward is not None and xp_reward < 1:
            raise InvalidInputError(
                "XP reward must be positive", details={"xp_reward": xp_reward}
            )

        user = await user_repo.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        classification = await self.classifier.classify(title, content)

        lesson = await lesson_repo.create_lesson(
            user_id=user.id,
            title=title,
            topic=topic or title,
            content=content,
            domain=classification.domain,
            difficulty_multiplier=classification.difficulty_multiplier,
            xp_reward=xp_reward or DEFAULT_XP_REWARD,
        )
        await user_repo.increment_lessons_started(user)

        logger.info(
            f"Lesson {lesson.id} created for user {user_id}: "
            f"{classification.domain.value} x{classification.difficulty_multiplier}"
        )
        return lesson
