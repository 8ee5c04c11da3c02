"""Environment-backed settings.

Values come from BOXOFFICE_* environment variables or a .env file. Django
settings are derived from `env` in config/settings.py.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="BOXOFFICE_", env_file=".env", extra="ignore")

    DEBUG: bool = False
    SECRET_KEY: str = "insecure-dev-key-change-me"
    ALLOWED_HOSTS: str = "localhost,127.0.0.1"

    DB_ENGINE: str = "sqlite"  # sqlite|postgresql
    DB_NAME: str = "boxoffice.sqlite3"
    DB_USER: str = ""
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_TIMEOUT_MS: int = 5000
    DB_BUSY_TIMEOUT_SECONDS: float = 20.0
    DB_TEST_NAME: str = "test_boxoffice.sqlite3"

    REDIS_URL: str = "redis://localhost:6379/0"

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    MAX_TICKETS_PER_PURCHASE: int = 5
    RESERVATION_WINDOW_MINUTES: int = 15
    SWEEP_INTERVAL_SECONDS: float = 600.0
    RELEASE_CAPACITY_ON_EXPIRY: bool = True

    @field_validator("DB_ENGINE", mode="after")
    @classmethod
    def known_engine(cls, v: str) -> str:
        v = v.lower()
        if v not in {"sqlite", "postgresql"}:
            raise ValueError("DB_ENGINE must be sqlite or postgresql")
        return v

    @field_validator(
        "MAX_TICKETS_PER_PURCHASE", "RESERVATION_WINDOW_MINUTES", "SWEEP_INTERVAL_SECONDS"
    )
    @classmethod
    def positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def upper_level(cls, v: str) -> str:
        return v.upper()


env = EnvSettings()
