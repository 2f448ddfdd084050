from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator
from pathlib import Path
from typing import Literal
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment.
    """

    # Environment
    ENV: Literal["development", "testing", "staging", "production"] = "development"

    # Database configuration: either a full URL or the individual parts
    DATABASE_URL: str | None = None
    POSTGRES_DRIVER: str = "psycopg"
    POSTGRES_USERNAME: str | None = None
    POSTGRES_PASSWORD: str | None = None
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str | None = None

    # SQLAlchemy / connection pool
    SQLALCHEMY_ECHO: bool = False
    DB_POOL_SIZE: int = 20
    DB_POOL_TIMEOUT: float = 2.0     # seconds to wait for a free connection
    DB_POOL_RECYCLE: int = 30        # seconds before a pooled connection is replaced
    AUTO_CREATE_SCHEMA: bool = False

    # HTTP
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]
    MAX_REQUEST_BODY_BYTES: int = 10 * 1024 * 1024

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    LOG_FORMAT: Literal["json", "text"] = "json"
    LOG_TO_STDOUT: bool = True
    LOG_DIR: Path = Path("/var/log/postboard")
    LOG_MAX_BYTES: int = 10_000_000  # 10 MB
    LOG_BACKUP_COUNT: int = 5
    ENABLE_SQL_LOGGING: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Derived settings ---
    @property
    def SQLALCHEMY_DATABASE_URI(self) -> str:
        """
        Return the async SQLAlchemy URL.

        `DATABASE_URL` wins when it is set. A plain `postgres://` or `postgresql://`
        URL (as handed out by most hosting providers) is upgraded to the async
        driver named by `POSTGRES_DRIVER`. Otherwise the URL is assembled from the
        POSTGRES_* parts.
        """
        if self.DATABASE_URL:
            url = self.DATABASE_URL.strip()
            for prefix in ("postgres://", "postgresql://"):
                if url.startswith(prefix):
                    return f"postgresql+{self.POSTGRES_DRIVER}://" + url[len(prefix):]
            return url

        return (
            f"postgresql+{self.POSTGRES_DRIVER}://"
            f"{self.POSTGRES_USERNAME}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/"
            f"{self.POSTGRES_DB}"
        )

    @property
    def is_development(self) -> bool:
        return self.ENV == "development"

    # --- Validators ---
    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str | None) -> str | None:
        """
        Upper-case LOG_LEVEL before the Literal check, so `LOG_LEVEL=debug` works.
        """
        return v.upper() if isinstance(v, str) else v

    @field_validator("LOG_FORMAT", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str | None) -> str | None:
        return v.lower() if isinstance(v, str) else v

    @field_validator("API_PREFIX")
    @classmethod
    def normalize_api_prefix(cls, v: str) -> str:
        # "/api/" and "api" both become "/api"; an empty prefix mounts at the root
        v = v.strip().strip("/")
        return f"/{v}" if v else ""

    @model_validator(mode="after")
    def require_database(self) -> "Settings":
        if not self.DATABASE_URL and not (self.POSTGRES_USERNAME and self.POSTGRES_DB):
            raise ValueError(
                "DATABASE_URL is not set (or provide POSTGRES_USERNAME, POSTGRES_PASSWORD and POSTGRES_DB)"
            )
        return self


# get_settings() takes no arguments and always returns the same settings from the environment,
# so caching it with @lru_cache() avoids re-reading the environment on every call.
@lru_cache()
def get_settings() -> Settings:
    return Settings()
