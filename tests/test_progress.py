from datetime import datetime, timedelta, timezone

import pytest

from aura.core.domain.domains import Domain, DomainStats
from aura.core.domain.lesson_rules import clamp_multiplier, clamp_xp, running_average
from aura.core.domain.progress import LessonMeta, Progress, apply_award
from aura.core.exceptions import InvalidInputError

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)
STEM_LESSON = LessonMeta(domain=Domain.STEM, difficulty_multiplier=1.4, xp_reward=100)


def test_award_with_lesson_weights_xp_and_credits_domain() -> None:
    outcome = apply_award(Progress(), 100, STEM_LESSON, NOW)

    assert outcome.xp_awarded == 100
    assert outcome.weighted_awarded == 140
    assert outcome.domain is Domain.STEM
    assert outcome.level_up is True

    progress = outcome.progress
    assert progress.xp == 100
    assert progress.weighted_xp == 140
    assert progress.level == 2
    assert progress.streak == 1
    assert progress.last_active == NOW
    assert progress.domain_stats.stem_xp == 140
    assert progress.progression_score == 80  # 140 * 0.5 + 1 * 10


def test_award_without_lesson_touches_no_domain() -> None:
    outcome = apply_award(Progress(), 50, None, NOW)

    assert outcome.weighted_awarded == 50
    assert outcome.domain is None
    assert outcome.progress.domain_stats == DomainStats()
    assert outcome.progress.weighted_xp == 50


def test_award_does_not_mutate_input() -> None:
    before = Progress(xp=10, weighted_xp=10, streak=2, last_active=NOW - timedelta(days=1))
    apply_award(before, 100, STEM_LESSON, NOW)
    assert before.xp == 10
    assert before.domain_stats.stem_xp == 0


@pytest.mark.parametrize("raw_xp", [0, -5, 2.5, True, None])
def test_award_rejects_non_positive_or_non_integer_xp(raw_xp) -> None:
    with pytest.raises(InvalidInputError):
        apply_award(Progress(), raw_xp, None, NOW)


def test_level_never_decreases() -> None:
    """Уровень, выставленный ранее, не понижается текущей таблицей порогов."""
    progress = Progress(xp=50, weighted_xp=50, level=4)
    outcome = apply_award(progress, 10, None, NOW)
    assert outcome.progress.level == 4
    assert outcome.level_up is False


def test_score_uses_current_mastery() -> None:
    progress = Progress(weighted_xp=900, streak=9, average_mastery=80.0,
                        last_active=NOW - timedelta(days=1))
    outcome = apply_award(progress, 100, None, NOW)
    # 1000 * 0.5 + 10 * 10 + 80 * 5
    assert outcome.progress.progression_score == 1000


def test_clamp_xp() -> None:
    assert clamp_xp(None, 100) == 100
    assert clamp_xp(0, 100) == 100
    assert clamp_xp(40, 100) == 40
    assert clamp_xp(10_000, 100) == 100


def test_clamp_multiplier() -> None:
    assert clamp_multiplier(None) == 1.0
    assert clamp_multiplier(0.5) == 1.0
    assert clamp_multiplier(1.3) == 1.3
    assert clamp_multiplier(3) == 1.5


def test_running_average() -> None:
    assert running_average(0.0, 0, 80) == 80.0
    assert running_average(80.0, 1, 60) == 70.0
