"""
Ranking Service - глобальные, школьные и доменные лидерборды.

AICODE-NOTE: Только чтение. Ранги всегда пересчитываются из текущего
состояния, ничего не кешируется и не пишется обратно в users.
Ранг пользователя - count-based: 1 + число пользователей с большим weighted XP,
поэтому корректен и далеко за пределами top-N (O(n) count на вызов).
"""

from dataclasses import dataclass

from aura.core.domain.domains import ALL_DOMAINS, DOMAIN_FIELDS, Domain, parse_domain
from aura.core.exceptions import InvalidInputError, NotFoundError
from aura.database.models import User
from aura.storage import user_repo


@dataclass
class LeaderboardEntry:
    """Строка лидерборда."""

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
    score: int  # значение, по которому отсортирован борд


@dataclass
class UserRank:
    """Ранг пользователя."""

    global_rank: int
    school_rank: int


def _resolve_domain(domain: "str | Domain | None") -> Domain | None:
    if domain is None or domain == ALL_DOMAINS:
        return None
    return parse_domain(domain)


def _to_entry(rank: int, user: User, order_field: str) -> LeaderboardEntry:
    return LeaderboardEntry(
        rank=rank,
        user_id=user.id,
        username=user.username,
        name=user.name,
        country=user.country,
        school=user.school,
        xp=user.xp,
        weighted_xp=user.weighted_xp,
        level=user.level,
        progression_score=user.progression_score,
        domain_stats=user_repo.domain_stats_of(user).as_dict(),
        score=getattr(user, order_field),
    )


class RankingService:
    """Сервис для лидербордов и рангов."""

    async def _top(
        self, limit: int, domain: "str | Domain | None", school: str | None
    ) -> list[LeaderboardEntry]:
        if limit < 1:
            raise InvalidInputError("Limit must be positive", details={"limit": limit})

        resolved = _resolve_domain(domain)
        order_field = DOMAIN_FIELDS[resolved] if resolved else "weighted_xp"

        users = await user_repo.list_top(
            order_field,
            limit,
            school=school,
            # Без активности в домене пользователь в доменный борд не попадает
            only_positive=resolved is not None,
        )
        return [
            _to_entry(position, user, order_field)
            for position, user in enumerate(users, start=1)
        ]

    async def top_global(
        self, limit: int, domain: "str | Domain | None" = None
    ) -> list[LeaderboardEntry]:
        """
        Глобальный лидерборд.

        Args:
            limit: Максимум записей
            domain: None/"all" - по weighted XP, иначе по XP домена (только > 0)
        """
        return await self._top(limit, domain, school=None)

    async def top_for_school(
        self, school: str, limit: int, domain: "str | Domain | None" = None
    ) -> list[LeaderboardEntry]:
        """Лидерборд одной школы (те же правила, что у глобального)."""
        return await self._top(limit, domain, school=school)

    async def rank_of(self, user_id: int) -> UserRank:
        """
        Глобальный и школьный ранг по weighted XP.

        Одинаковый weighted XP -> одинаковый ранг.
        """
        user = await user_repo.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        global_ahead = await user_repo.count_ahead(user.weighted_xp)
        school_ahead = await user_repo.count_ahead(user.weighted_xp, school=user.school)

        return UserRank(global_rank=global_ahead + 1, school_rank=school_ahead + 1)
