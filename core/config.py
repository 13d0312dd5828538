"""
Application configuration using Pydantic settings.

Usage:
    from core.config import get_settings
    settings = get_settings()

Plan tiers and limits live in core.plans, not here.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Values that must never reach production as a signing secret
FORBIDDEN_SECRETS = [
    "CHANGE_ME", "changeme", "secret", "your-secret-key",
    "jwt-secret", "supersecret", "development", "test",
]


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Required for production:
        - JWT_SECRET_KEY (min 32 chars)
        - APP_URL (public origin used for CORS)
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    env: str = Field(default="development", validation_alias="ENV")
    app_name: str = Field(default="Remedi", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    api_prefix: str = Field(default="/api", validation_alias="API_PREFIX")
    debug: bool = Field(default=False, validation_alias="DEBUG")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    maintenance_mode: bool = Field(default=False, validation_alias="MAINTENANCE_MODE")
    max_request_size: int = Field(default=1024 * 1024, validation_alias="MAX_REQUEST_SIZE")

    # Database
    database_url: str = Field(default="sqlite:///remedi.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")

    # JWT / Authentication
    jwt_secret_key: str = Field(default="CHANGE_ME", validation_alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24, validation_alias="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    # Rate limiting
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")

    # CORS
    app_url: Optional[str] = Field(default=None, validation_alias="APP_URL")
    base_url: Optional[str] = Field(default=None, validation_alias="BASE_URL")
    cors_allowed_origins: str = Field(default="", validation_alias="CORS_ALLOWED_ORIGINS")

    # Redis
    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")
    redis_password: Optional[str] = Field(default=None, validation_alias="REDIS_PASSWORD")
    redis_enabled: bool = Field(default=True, validation_alias="REDIS_ENABLED")

    @property
    def redis_url(self) -> str:
        """Construct Redis URL from components."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    # Scheduler
    enable_scheduler: bool = Field(default=False, validation_alias="ENABLE_SCHEDULER")
    scheduler_trial_cron: str = Field(default="0 * * * *", validation_alias="SCHEDULER_TRIAL_CRON")
    scheduler_cleanup_cron: str = Field(default="30 3 * * *", validation_alias="SCHEDULER_CLEANUP_CRON")

    @field_validator("env")
    @classmethod
    def normalize_env(cls, v: str) -> str:
        v = v.strip().lower()
        if v == "prod":
            return "production"
        return v

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Warn about weak secrets; production is enforced in validate_production_config."""
        import warnings

        if v.lower() in [fv.lower() for fv in FORBIDDEN_SECRETS]:
            warnings.warn(
                f"JWT_SECRET_KEY is set to a default value ('{v}'). "
                "This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        elif len(v) < 32:
            warnings.warn(
                f"JWT_SECRET_KEY should be at least 32 characters (got {len(v)})",
                UserWarning,
                stacklevel=2,
            )
        return v

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def cors_origins_list(self) -> List[str]:
        """Origins allowed to make credentialed cross-origin API calls."""
        origins = [self.app_url, self.base_url, "http://localhost:3000", "http://localhost:3001"]
        origins.extend(o.strip() for o in self.cors_allowed_origins.split(","))
        seen: list[str] = []
        for origin in origins:
            if origin and origin.rstrip("/") not in seen:
                seen.append(origin.rstrip("/"))
        return seen

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings = []

        if self.jwt_secret_key.lower() in [fv.lower() for fv in FORBIDDEN_SECRETS]:
            errors.append("JWT_SECRET_KEY must be set for production")
        elif len(self.jwt_secret_key) < 32:
            errors.append("JWT_SECRET_KEY must be at least 32 characters")

        if not self.app_url:
            warnings.append("APP_URL not set - only localhost origins will pass CORS checks")

        if self.database_url.startswith("sqlite"):
            warnings.append("DATABASE_URL points at SQLite; use PostgreSQL in production")

        if self.maintenance_mode:
            warnings.append("MAINTENANCE_MODE is enabled - API requests will receive 503")

        return errors, warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
