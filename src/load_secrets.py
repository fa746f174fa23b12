import logging
import os
import secrets
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

DEFAULT_CORS_ORIGINS = "http://127.0.0.1:5501,http://localhost:5501,https://qurandle.com"


class Settings(BaseModel):
    """Process wide configuration. Built once at start up and passed to each component."""

    model_config = ConfigDict(frozen=True)

    database_url: str = "sqlite+aiosqlite:///./qurandle.sqlite3"
    jwt_secret_key: str
    pepper_data: str = ""
    token_expire_minutes: int = 60
    corpus_base_url: str = "https://api.alquran.cloud/v1"
    corpus_timeout_seconds: float = 10.0
    challenge_timezone: str = "America/Toronto"
    redis_url: Optional[str] = None
    corpus_cache_ttl: int = 86400
    corpus_cache_timeout_seconds: float = 1.0
    store_timeout_seconds: float = 5.0
    leaderboard_max_attempts: int = 5
    leaderboard_size: int = 10
    cors_origins: List[str] = DEFAULT_CORS_ORIGINS.split(",")
    log_level: str = "INFO"


def _database_url() -> str:
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    user = os.getenv("DB_USER")
    password = os.getenv("DB_PASSWORD")
    host = os.getenv("DB_HOST")
    port = os.getenv("DB_PORT")
    db_name = os.getenv("DB_NAME")
    if user and host and db_name:
        return f"postgresql+asyncpg://{user}:{password}@{host}:{port or 5432}/{db_name}"
    return Settings.model_fields["database_url"].default


def load_settings() -> Settings:
    """Read .env and the process environment into a Settings instance."""
    load_dotenv()

    jwt_secret_key = os.getenv("JWT_SECRET_KEY")
    if not jwt_secret_key:
        logging.warning("JWT_SECRET_KEY is not set, tokens will not survive a restart")
        jwt_secret_key = secrets.token_urlsafe(32)

    return Settings(
        database_url=_database_url(),
        jwt_secret_key=jwt_secret_key,
        pepper_data=os.getenv("PEPPER_DATA", ""),
        token_expire_minutes=int(os.getenv("TOKEN_EXPIRE_MINUTES", "60")),
        corpus_base_url=os.getenv("CORPUS_BASE_URL", "https://api.alquran.cloud/v1"),
        corpus_timeout_seconds=float(os.getenv("CORPUS_TIMEOUT_SECONDS", "10")),
        challenge_timezone=os.getenv("CHALLENGE_TIMEZONE", "America/Toronto"),
        redis_url=os.getenv("REDIS_URL") or None,
        corpus_cache_ttl=int(os.getenv("CORPUS_CACHE_TTL", "86400")),
        corpus_cache_timeout_seconds=float(os.getenv("CORPUS_CACHE_TIMEOUT_SECONDS", "1")),
        store_timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "5")),
        leaderboard_max_attempts=int(os.getenv("LEADERBOARD_MAX_ATTEMPTS", "5")),
        leaderboard_size=int(os.getenv("LEADERBOARD_SIZE", "10")),
        cors_origins=[
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS).split(",")
            if origin.strip()
        ],
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


if __name__ == "__main__":
    print(load_settings().model_dump(exclude={"jwt_secret_key", "pepper_data"}))
