"""
Pydantic schemas for API requests and responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from aura.core.domain.domains import Domain

# ============ User Schemas ============


class UserResponse(BaseModel):
    """User profile response with computed ranks."""

    id: int
    username: str
    name: str
    country: str
    school: str

    # Gamification
    xp: int
    weighted_xp: int
    level: int
    streak: int
    last_active: datetime | None = None
    progression_score: int
    average_mastery: float
    quizzes_taken: int
    lessons_started: int
    domain_stats: dict[str, int]

    # Computed at read time
    global_rank: int
    school_rank: int


class LevelProgressResponse(BaseModel):
    """Progress within the current level."""

    model_config = ConfigDict(from_attributes=True)

    level: int
    weighted_xp: int
    current_level_xp: int
    next_level_xp: int | None = None
    xp_to_next_level: int
    progress_percent: float


class QuizRequest(BaseModel):
    """Quiz result to fold into average mastery."""

    mastery_score: float = Field(ge=0, le=100)


class QuizResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    average_mastery: float
    quizzes_taken: int


# ============ Lesson Schemas ============


class LessonResponse(BaseModel):
    """Lesson item response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    topic: str
    domain: Domain
    difficulty_multiplier: float
    xp_reward: int
    is_completed: bool
    mastery_score: int
    completed_at: datetime | None = None
    created_at: datetime


class CreateLessonRequest(BaseModel):
    """Request to register a lesson from study material."""

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    topic: str | None = Field(default=None, max_length=255)
    xp_reward: int | None = Field(default=None, ge=1)


class CompleteLessonRequest(BaseModel):
    """Request to complete a lesson."""

    xp_earned: int | None = Field(default=None, ge=0)
    mastery_score: int | None = Field(default=None, ge=0, le=100)


class AwardResponse(BaseModel):
    """Response after an XP award."""

    model_config = ConfigDict(from_attributes=True)

    xp: int
    weighted_xp: int
    level: int
    streak: int
    progression_score: int
    xp_awarded: int
    weighted_awarded: int
    domain: Domain | None = None
    level_up: bool


# ============ Leaderboard Schemas ============


class LeaderboardEntryResponse(BaseModel):
    """Leaderboard row."""

    model_config = ConfigDict(from_attributes=True)

    rank: int
    user_id: int
    username: str
    name: str
    country: str
    school: str
    xp: int
    weighted_xp: int
    level: int
    progression_score: int
    domain_stats: dict[str, int]
    score: int


class LeaderboardResponse(BaseModel):
    """Leaderboard response."""

    type: str
    school: str | None = None
    domain: str
    entries: list[LeaderboardEntryResponse]
