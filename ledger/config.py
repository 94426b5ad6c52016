"""
Application configuration using Pydantic Settings.

All configuration is loaded from environment variables, with an optional .env
file as a fallback. Secrets stay out of source code: the .env file is
gitignored and only the defaults below live in the repository.

Precedence (highest first):
  1. Environment variables
  2. .env file values
  3. Defaults defined here

Usage:
    from ledger.config import settings
    print(settings.DATABASE_URL)
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Central configuration for the Ledger API.

    Required fields (no defaults) MUST be set in .env or environment:
      - SECRET_KEY: Used to sign JWT tokens
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Application ---
    APP_NAME: str = "Ledger API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    # SQLite for local use; point at postgresql+asyncpg://... in production
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/ledger.db"

    # How long a SQLite transaction waits for the write lock held by another
    # transfer before giving up with "database is locked".
    SQLITE_BUSY_TIMEOUT_SECONDS: float = 5.0

    # --- Authentication ---
    # REQUIRED: No default, forces the operator to set a real secret
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Signup ---
    # New accounts are opened with a random balance in this range (cents).
    INITIAL_BALANCE_MIN_CENTS: int = 100
    INITIAL_BALANCE_MAX_CENTS: int = 1_000_000

    # --- CORS ---
    ALLOWED_ORIGINS: list[str] = ["http://localhost:3000"]


# Singleton: import this instance everywhere instead of creating new Settings()
settings = Settings()
