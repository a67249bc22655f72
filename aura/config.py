"""
Конфигурация Aura Rank.
Загружает переменные из .env файла.
"""

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Environment (development | production)
    ENVIRONMENT: str = "development"

    # Signing key for API bearer tokens
    AUTH_SECRET: SecretStr = SecretStr("dev-secret-change-me")

    # Frontend origin allowed by CORS (production)
    FRONTEND_URL: str | None = None

    # Lesson classifier: "anthropic" (default) | "openai"
    AI_PROVIDER: str = "anthropic"
    ANTHROPIC_KEY: SecretStr | None = None
    ANTHROPIC_MODEL: str = "claude-sonnet-4-5"
    OPENAI_KEY: SecretStr | None = None
    OPENAI_MODEL: str = "gpt-4.1"

    # Database URL (Railway/Render format)
    # If set, overrides PostgreSQL individual vars
    DATABASE_URL: str | None = None

    # PostgreSQL (individual vars, fallback if DATABASE_URL not set)
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "aura"
    POSTGRES_USER: str = "aura"
    POSTGRES_PASSWORD: SecretStr | None = None

    # Gamification
    AWARD_MAX_ATTEMPTS: int = 3
    LEADERBOARD_DEFAULT_LIMIT: int = 50
    LEADERBOARD_MAX_LIMIT: int = 100

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    @field_validator("AWARD_MAX_ATTEMPTS", "LEADERBOARD_DEFAULT_LIMIT", "LEADERBOARD_MAX_LIMIT")
    @classmethod
    def positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @property
    def database_url(self) -> str:
        """
        Get database URL based on environment.

        Priority:
        1. DATABASE_URL env var (Railway/Render format)
        2. PostgreSQL individual vars (production)
        3. SQLite (development)
        """
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            # Railway uses postgres://, but asyncpg needs postgresql://
            if url.startswith("postgres://"):
                url = url.replace("postgres://", "postgresql://", 1)
            return url

        if self.ENVIRONMENT == "production":
            if not self.POSTGRES_PASSWORD:
                raise ValueError("POSTGRES_PASSWORD required for production")
            return (
                f"postgresql://{self.POSTGRES_USER}:"
                f"{self.POSTGRES_PASSWORD.get_secret_value()}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )

        return "sqlite://db.sqlite3"


config = Settings()
