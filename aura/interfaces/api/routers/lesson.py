"""
Lesson API router.

Endpoints:
- GET /api/lessons - List current user's lessons
- POST /api/lessons - Register a lesson from study material
- POST /api/lessons/{id}/complete - Complete lesson and award XP
"""

import logging

from fastapi import APIRouter, Depends, status

from aura.core.use_cases.complete_lesson import CompleteLessonUseCase
from aura.core.use_cases.create_lesson import CreateLessonUseCase
from aura.interfaces.api.auth import AuthUser, get_current_user
from aura.interfaces.api.schemas import (
    AwardResponse,
    CompleteLessonRequest,
    CreateLessonRequest,
    LessonResponse,
)
from aura.storage import lesson_repo

router = APIRouter(prefix="/api", tags=["lessons"])
logger = logging.getLogger(__name__)


@router.get("/lessons", response_model=list[LessonResponse])
async def get_lessons(
    auth: AuthUser = Depends(get_current_user),
) -> list[LessonResponse]:
    """Get the user's lessons, newest first."""
    lessons = await lesson_repo.get_lessons_by_user(auth.id)
    return [LessonResponse.model_validate(lesson) for lesson in lessons]


@router.post(
    "/lessons", response_model=LessonResponse, status_code=status.HTTP_201_CREATED
)
async def create_lesson(
    request: CreateLessonRequest,
    auth: AuthUser = Depends(get_current_user),
) -> LessonResponse:
    """
    Register a lesson.

    The classifier assigns domain and difficulty multiplier.
    """
    lesson = await CreateLessonUseCase().execute(
        user_id=auth.id,
        title=request.title,
        content=request.content,
        topic=request.topic,
        xp_reward=request.xp_reward,
    )
    return LessonResponse.model_validate(lesson)


@router.post("/lessons/{lesson_id}/complete", response_model=AwardResponse)
async def complete_lesson(
    lesson_id: int,
    request: CompleteLessonRequest | None = None,
    auth: AuthUser = Depends(get_current_user),
) -> AwardResponse:
    """
    Mark lesson as completed.

    Awards weighted XP once per lesson, capped by the lesson's XP reward.
    """
    request = request or CompleteLessonRequest()
    summary = await CompleteLessonUseCase().execute(
        user_id=auth.id,
        lesson_id=lesson_id,
        xp_requested=request.xp_earned,
        mastery_score=request.mastery_score,
    )

    logger.info(
        f"Lesson {lesson_id} completed via API by user {auth.id}: "
        f"+{summary.weighted_awarded} weighted XP"
    )

    return AwardResponse.model_validate(summary)
