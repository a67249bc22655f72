"""
Конфигурация базы данных (Tortoise ORM).
Поддерживает SQLite (dev) и PostgreSQL (production).
"""

import logging

from tortoise import Tortoise

from aura.config import config

logger = logging.getLogger(__name__)


def get_tortoise_db_url() -> str:
    """
    Get database URL with proper scheme for Tortoise ORM.

    Tortoise ORM requires 'postgres://' scheme, but Railway/Render
    provide 'postgresql://' URLs. This function ensures conversion.
    """
    url = config.database_url

    # postgresql:// -> postgres://
    if url.startswith("postgresql://"):
        url = "postgres://" + url[len("postgresql://"):]
        logger.info("Converted postgresql:// to postgres:// for Tortoise ORM")

    logger.info(
        f"Database URL scheme: {url.split('://')[0] if '://' in url else 'unknown'}"
    )

    return url


TORTOISE_ORM = {
    "connections": {"default": get_tortoise_db_url()},
    "apps": {
        "models": {
            "models": ["aura.database.models", "aerich.models"],
            "default_connection": "default",
        },
    },
    # AICODE-NOTE: streak считается по календарным дням UTC, храним aware datetime
    "use_tz": True,
    "timezone": "UTC",
}


async def init_db() -> None:
    """Инициализация соединения с БД."""
    await Tortoise.init(config=TORTOISE_ORM)
    if config.ENVIRONMENT != "production":
        # В production схема управляется миграциями aerich
        await Tortoise.generate_schemas()
    logger.info("Database initialized")


async def close_db() -> None:
    """Закрытие соединений с БД."""
    await Tortoise.close_connections()
    logger.info("Database connections closed")
