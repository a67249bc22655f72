"""Storage layer - тупые CRUD репозитории без бизнес-логики."""

from . import lesson_repo, user_repo

__all__ = ["lesson_repo", "user_repo"]
