"""
Модели базы данных для Aura Rank.

Структура:
- User: ученик со статистикой геймификации (XP, уровень, streak, домены)
- Lesson: урок с метаданными классификатора (домен, множитель сложности)
"""

from tortoise import fields, models

from aura.core.domain.domains import Domain


class User(models.Model):
    """Ученик."""

    id = fields.IntField(primary_key=True)
    username = fields.CharField(max_length=64, unique=True, db_index=True)
    name = fields.CharField(max_length=255)

    country = fields.CharField(max_length=100, db_index=True)
    school = fields.CharField(max_length=255, db_index=True)

    # Статистика
    xp = fields.IntField(default=0)  # Raw XP
    weighted_xp = fields.IntField(default=0, db_index=True)  # Fairness XP
    level = fields.IntField(default=1)
    streak = fields.IntField(default=0)
    last_active = fields.DatetimeField(null=True)
    progression_score = fields.IntField(default=0, db_index=True)

    # Weighted XP по доменам (фиксированный набор, см. Domain)
    stem_xp = fields.IntField(default=0)
    humanities_xp = fields.IntField(default=0)
    arts_xp = fields.IntField(default=0)
    business_xp = fields.IntField(default=0)
    language_xp = fields.IntField(default=0)
    general_xp = fields.IntField(default=0)

    # Квизы (пишет только RecordQuizUseCase)
    average_mastery = fields.FloatField(default=0.0)  # 0-100
    quizzes_taken = fields.IntField(default=0)
    lessons_started = fields.IntField(default=0)

    # Optimistic concurrency: увеличивается при каждой записи прогресса
    version = fields.IntField(default=0)

    created_at = fields.DatetimeField(auto_now_add=True)

    lessons: fields.ReverseRelation["Lesson"]

    class Meta:
        table = "users"


class Lesson(models.Model):
    """Урок, сгенерированный из материалов ученика."""

    id = fields.IntField(primary_key=True)
    user: fields.ForeignKeyRelation[User] = fields.ForeignKeyField(
        "models.User", related_name="lessons", on_delete=fields.CASCADE
    )
    user_id: int  # AICODE-NOTE: MyPy hint for FK (Tortoise auto-creates this)

    title = fields.CharField(max_length=255)
    topic = fields.CharField(max_length=255)
    content = fields.TextField(null=True)

    # Метаданные классификатора
    domain = fields.CharEnumField(Domain, max_length=20, default=Domain.GENERAL)
    difficulty_multiplier = fields.FloatField(default=1.0)  # 1.0 - 1.5

    # Потолок XP за урок
    xp_reward = fields.IntField(default=100)

    # Статус
    is_completed = fields.BooleanField(default=False)
    mastery_score = fields.IntField(default=0)
    completed_at = fields.DatetimeField(null=True)

    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "lessons"
