# python
# app/core/config.py
"""Configuration settings for the Studio Pipeline application.

Uses Pydantic BaseSettings for environment variable management.
"""
import secrets
from enum import Enum

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class InvalidationBackendEnum(str, Enum):
    log = "log"
    celery = "celery"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Studio Pipeline API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Security Settings =====
    secret_key: str = Field(
        default_factory=lambda: secrets.token_urlsafe(32),
        description="Secret key for JWT encoding",
    )
    algorithm: str = Field(default="HS256", description="JWT algorithm")
    access_token_expire_minutes: int = Field(default=30, description="JWT token expiration time")

    # ===== Database Settings =====
    database_url: str | None = Field(default=None, description="Database connection URL")
    db_pool_size: int = Field(default=20, description="Database connection pool size")
    db_max_overflow: int = Field(default=0, description="Database max overflow connections")

    # Test database URL
    test_database_url: str | None = Field(default=None, description="Test database URL")

    # ===== Scoring Policy =====
    scoring_delivery: int = Field(default=10, description="Points for delivering a project")
    scoring_on_time: int = Field(default=5, description="Bonus for completing on time")
    scoring_qa_first_pass: int = Field(default=2, description="Bonus for passing QA first time")
    scoring_early_per_day: int = Field(default=1, description="Bonus per day delivered early")
    scoring_qa_rejection: int = Field(default=-5, description="Penalty for a QA rejection")
    scoring_deadline_missed: int = Field(default=-10, description="Penalty for a missed deadline")
    scoring_delay_per_day: int = Field(default=-2, description="Penalty per day delivered late")

    # ===== Lifecycle Limits =====
    min_deadline_justification_length: int = Field(
        default=15, description="Minimum characters in a deadline change justification"
    )
    max_batch_size: int = Field(default=100, description="Maximum projects per batch request")

    # ===== Invalidation Delivery =====
    invalidation_backend: InvalidationBackendEnum = Field(
        default=InvalidationBackendEnum.log, description="How invalidation events are delivered"
    )
    invalidation_channel_prefix: str = Field(
        default="pipeline", description="Redis pub/sub channel prefix for invalidation events"
    )

    # ===== Redis Configuration =====
    redis_url: str = Field(default="redis://localhost:6379/0", description="Redis connection URL")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        if isinstance(self.allowed_origins, str):
            return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]
        return self.allowed_origins if isinstance(self.allowed_origins, list) else []

    # ===== Background Tasks (Celery) =====
    celery_broker_url: str = Field(
        default="redis://localhost:6379/1", description="Celery broker URL"
    )
    celery_result_backend: str = Field(
        default="redis://localhost:6379/2", description="Celery result backend"
    )

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def database_url_sync(self) -> str:
        if not self.database_url:
            return ""
        return self.database_url.replace("postgresql+asyncpg://", "postgresql://")

    @property
    def uses_celery_invalidation(self) -> bool:
        return self.invalidation_backend == InvalidationBackendEnum.celery

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator(
        "scoring_delivery", "scoring_on_time", "scoring_qa_first_pass", "scoring_early_per_day"
    )
    @classmethod
    def validate_rewards(cls, v):
        if v < 0:
            raise ValueError("Reward points cannot be negative")
        return v

    @field_validator(
        "scoring_qa_rejection", "scoring_deadline_missed", "scoring_delay_per_day"
    )
    @classmethod
    def validate_penalties(cls, v):
        if v > 0:
            raise ValueError("Penalty points cannot be positive")
        return v

    @field_validator("max_batch_size")
    @classmethod
    def validate_batch_size(cls, v):
        if v < 1:
            raise ValueError("Maximum batch size must be at least 1")
        if v > 500:
            raise ValueError("Maximum batch size cannot exceed 500")
        return v

    @model_validator(mode="after")
    def set_computed_fields(self):
        if not self.test_database_url and self.database_url and "neondb" in self.database_url:
            self.test_database_url = self.database_url.replace("neondb", "neondb_test")
        return self


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings():
        errors = []
        if not settings.database_url:
            errors.append("DATABASE_URL is required")
        if settings.is_production and settings.invalidation_backend == InvalidationBackendEnum.log:
            errors.append("INVALIDATION_BACKEND=celery is required in production")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status() -> dict:
        return {
            "invalidation_backend": settings.invalidation_backend.value,
            "max_batch_size": settings.max_batch_size,
            "environment": settings.environment,
        }


def get_config_summary() -> dict:
    return {
        "app_name": settings.app_name,
        "version": settings.version,
        "environment": settings.environment,
        "debug": settings.debug,
        "features": ConfigValidator.get_feature_status(),
        "database_configured": bool(settings.database_url),
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
    "InvalidationBackendEnum",
]
