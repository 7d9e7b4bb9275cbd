from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Storage ---
    # sqlite:///... for the embedded store, postgresql+psycopg2://... for a server
    DATABASE_URL: str = "sqlite:///./hobby_planner.db"
    REDIS_URL: str = "redis://localhost:6379/0"

    # --- Links sent in emails ---
    FRONTEND_URL: str = "http://localhost:5173"

    # --- Outbound mail ---
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT: float = 10.0
    EMAIL_USER: str | None = None
    EMAIL_PASS: str | None = None
    EMAIL_FROM: str | None = None

    # --- Session suggestions ---
    ANTHROPIC_API_KEY: str | None = None
    SUGGESTION_MODEL: str = "claude-3-5-haiku-latest"
    SUGGESTION_MAX_TOKENS: int = 512
    SUGGESTION_TIMEOUT: float = 30.0

    # --- Behaviour ---
    ATTENDEE_EMAIL_REQUIRED: bool = True
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000

    @property
    def mail_sender(self) -> str | None:
        return self.EMAIL_FROM or self.EMAIL_USER


@lru_cache
def get_settings() -> Settings:
    return Settings()
