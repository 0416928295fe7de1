# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "fallback-secret"


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Built once per process (see get_settings) and frozen afterwards;
    components receive this object instead of reading os.environ.

    Env vars (.env):
      - DATABASE_URL (Postgres in production, SQLite by default)
      - JWT_SECRET (HS256 signing secret for session tokens)
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (object storage)
      - STORAGE_BUCKET / STORAGE_PUBLIC_URL

    JWT_SECRET falls back to an insecure constant when unset; startup
    logs a warning in that case.
    """

    PROJECT_NAME: str = "AfterHour API"
    API_PREFIX: str = "/api"

    DATABASE_URL: str = "sqlite:///./afterhour.db"

    # Session tokens
    JWT_SECRET: str = DEFAULT_JWT_SECRET
    JWT_ALG: str = "HS256"
    ACCESS_TOKEN_EXPIRE_DAYS: int = 7

    # Object storage (Supabase Storage)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "afterhour-media"
    STORAGE_PUBLIC_URL: str | None = None
    MAX_UPLOAD_BYTES: int = 50 * 1024 * 1024

    # Club portal credentials
    CLUB_EMAIL_DOMAIN: str = "afterhour.club"

    CORS_ORIGINS: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    @property
    def uses_default_jwt_secret(self) -> bool:
        return self.JWT_SECRET == DEFAULT_JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
