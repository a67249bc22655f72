"""
Leaderboard API router.

Endpoints:
- GET /api/leaderboard - Global or school leaderboard, optionally per domain
"""

from typing import Literal

from fastapi import APIRouter, Query

from aura.config import config
from aura.core.domain.domains import ALL_DOMAINS
from aura.core.exceptions import InvalidInputError
from aura.interfaces.api.schemas import LeaderboardEntryResponse, LeaderboardResponse
from aura.services.ranking import RankingService

router = APIRouter(prefix="/api", tags=["leaderboard"])


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    type: Literal["global", "school"] = "global",
    school: str | None = None,
    domain: str = ALL_DOMAINS,
    limit: int = Query(
        default=config.LEADERBOARD_DEFAULT_LIMIT,
        ge=1,
        le=config.LEADERBOARD_MAX_LIMIT,
    ),
) -> LeaderboardResponse:
    """
    Get a leaderboard (public).

    - type=school requires school (400 otherwise)
    - domain=all sorts by weighted XP, a domain name sorts by that domain's XP
    """
    service = RankingService()

    if type == "school":
        if not school or not school.strip():
            raise InvalidInputError(
                "School is required for a school leaderboard",
                details={"type": type},
            )
        entries = await service.top_for_school(school, limit, domain)
    else:
        school = None
        entries = await service.top_global(limit, domain)

    return LeaderboardResponse(
        type=type,
        school=school,
        domain=domain,
        entries=[LeaderboardEntryResponse.model_validate(e) for e in entries],
    )
