"""
Доменные исключения Aura Rank.

Use-cases и сервисы бросают их при нарушении бизнес-правил.
API слой переводит их в HTTP статусы (см. interfaces/api/main.py).
"""

from typing import Any


class AuraError(Exception):
    """
    Базовое доменное исключение.

    Args:
        message: Человекочитаемое описание
        details: Дополнительный контекст для логов
        error_code: Стабильный код для программной обработки
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)


class NotFoundError(AuraError):
    """Пользователь или урок не найден."""

    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(
            f"{resource} {identifier} not found",
            details={"resource": resource, "id": identifier},
        )
        self.resource = resource
        self.identifier = identifier


class InvalidInputError(AuraError):
    """Некорректные входные данные (отрицательный XP, неизвестный домен...)."""


class LessonAlreadyCompletedError(InvalidInputError):
    """Урок уже завершён, повторно XP не начисляется."""


class PermissionDeniedError(AuraError):
    """Ресурс принадлежит другому пользователю."""


class ConcurrentUpdateError(AuraError):
    """Не удалось записать прогресс: документ параллельно изменён."""
