"""
Academic Domains - закрытый набор доменов и weighted XP по доменам.

AICODE-NOTE: Чистые функции БЕЗ доступа к БД, БЕЗ side-effects.
Набор доменов фиксирован: новые "бакеты" по произвольной строке не создаются.
"""

from dataclasses import dataclass, replace
from enum import Enum

from aura.core.exceptions import InvalidInputError


class Domain(str, Enum):
    STEM = "STEM"
    HUMANITIES = "Humanities"
    ARTS = "Arts"
    BUSINESS = "Business"
    LANGUAGE = "Language"
    GENERAL = "General"


# Domain -> поле DomainStats (и колонка users.*_xp)
DOMAIN_FIELDS: dict[Domain, str] = {
    Domain.STEM: "stem_xp",
    Domain.HUMANITIES: "humanities_xp",
    Domain.ARTS: "arts_xp",
    Domain.BUSINESS: "business_xp",
    Domain.LANGUAGE: "language_xp",
    Domain.GENERAL: "general_xp",
}

# Значение фильтра лидерборда "без домена"
ALL_DOMAINS = "all"


def parse_domain(value: "str | Domain") -> Domain:
    """
    Строгий разбор домена, пришедшего от вызывающего кода.

    Неизвестное имя -> InvalidInputError (никогда не создаём новый бакет).
    """
    if isinstance(value, Domain):
        return value
    try:
        return Domain(value)
    except ValueError:
        raise InvalidInputError(
            f"Unknown domain: {value!r}",
            details={"allowed": [d.value for d in Domain]},
        ) from None


def lesson_domain(value: "str | Domain | None") -> Domain:
    """
    Мягкий разбор домена из метаданных урока.

    Пустое или неизвестное значение -> General (так урок сохраняется по умолчанию).
    """
    if not value:
        return Domain.GENERAL
    try:
        return Domain(value)
    except ValueError:
        return Domain.GENERAL


@dataclass(frozen=True)
class DomainStats:
    """Weighted XP по каждому домену."""

    stem_xp: int = 0
    humanities_xp: int = 0
    arts_xp: int = 0
    business_xp: int = 0
    language_xp: int = 0
    general_xp: int = 0

    def get(self, domain: Domain) -> int:
        return getattr(self, DOMAIN_FIELDS[domain])

    def with_award(self, domain: Domain, amount: int) -> "DomainStats":
        """Новый экземпляр с увеличенным бакетом домена."""
        field_name = DOMAIN_FIELDS[domain]
        return replace(self, **{field_name: getattr(self, field_name) + amount})

    def total(self) -> int:
        return sum(self.get(domain) for domain in Domain)

    def as_dict(self) -> dict[str, int]:
        """{"STEM": 140, "Humanities": 0, ...}"""
        return {domain.value: self.get(domain) for domain in Domain}
