"""
User API router.

Endpoints:
- GET /api/me - Get current user profile with ranks
- GET /api/me/progress - Get level progress
- POST /api/me/quiz - Record a quiz mastery score
"""

from fastapi import APIRouter, Depends

from aura.core.domain.gamification import level_progress
from aura.core.exceptions import NotFoundError
from aura.core.use_cases.record_quiz import RecordQuizUseCase
from aura.database.models import User
from aura.interfaces.api.auth import AuthUser, get_current_user
from aura.interfaces.api.schemas import (
    LevelProgressResponse,
    QuizRequest,
    QuizResponse,
    UserResponse,
)
from aura.services.ranking import RankingService
from aura.storage import user_repo

router = APIRouter(prefix="/api", tags=["user"])


async def _load_user(auth: AuthUser) -> User:
    user = await user_repo.get_user(auth.id)
    if not user:
        raise NotFoundError("User", auth.id)
    return user


@router.get("/me", response_model=UserResponse)
async def get_me(auth: AuthUser = Depends(get_current_user)) -> UserResponse:
    """
    Get current user profile.

    Ranks are computed on every call, never read from storage.
    """
    user = await _load_user(auth)
    ranks = await RankingService().rank_of(user.id)

    return UserResponse(
        id=user.id,
        username=user.username,
        name=user.name,
        country=user.country,
        school=user.school,
        xp=user.xp,
        weighted_xp=user.weighted_xp,
        level=user.level,
        streak=user.streak,
        last_active=user.last_active,
        progression_score=user.progression_score,
        average_mastery=user.average_mastery,
        quizzes_taken=user.quizzes_taken,
        lessons_started=user.lessons_started,
        domain_stats=user_repo.domain_stats_of(user).as_dict(),
        global_rank=ranks.global_rank,
        school_rank=ranks.school_rank,
    )


@router.get("/me/progress", response_model=LevelProgressResponse)
async def get_progress(
    auth: AuthUser = Depends(get_current_user),
) -> LevelProgressResponse:
    """Get XP needed for the next level."""
    user = await _load_user(auth)
    return LevelProgressResponse.model_validate(level_progress(user.weighted_xp))


@router.post("/me/quiz", response_model=QuizResponse)
async def record_quiz(
    request: QuizRequest,
    auth: AuthUser = Depends(get_current_user),
) -> QuizResponse:
    """Fold a quiz mastery score into the running average."""
    result = await RecordQuizUseCase().execute(auth.id, request.mastery_score)
    return QuizResponse.model_validate(result)
