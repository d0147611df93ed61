"""API configuration via environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class ApiSettings(BaseSettings):
    """Application settings loaded from environment / .env file."""

    database_url: str = "postgresql+asyncpg://localhost:5432/agms"
    redis_url: str = "redis://localhost:6379/0"
    jwt_secret: str = "change-me-in-production"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_days: int = 7
    cors_origins: list[str] = ["http://localhost:3000"]
    rate_limit_per_minute: int = 60  # 0 disables rate limiting
    log_level: str = "INFO"

    # Cache TTLs in seconds
    gate_cache_ttl: int = 300  # 5 min
    statistics_cache_ttl: int = 60

    # Authorization codes seeded for privileged self-registration
    admin_auth_code: str = "ADMIN2025"
    operations_auth_code: str = "OPS2025"

    model_config = SettingsConfigDict(
        env_prefix="API_", env_file=".env", extra="ignore"
    )


settings = ApiSettings()
