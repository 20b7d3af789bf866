"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (DATABASE_URL, SECRET_KEY) have no
default value and are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    database_url and secret_key must come from the environment; there is no
    fallback value for either (validated in validate_required).
    """

    # App
    app_name: str = "practicedesk"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (postgresql+asyncpg://... in production)
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours

    # CORS
    allowed_origins: str = "http://localhost:3000"

    # Tenant
    tenant_header_name: str = "X-Tenant-ID"

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"

    # Listing defaults
    default_page_size: int = 50
    max_page_size: int = 200
    recent_audit_log_count: int = 100

    # Redis Cache
    redis_enabled: bool = True
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    cache_ttl_permissions: int = 300

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env: DATABASE_URL and SECRET_KEY."""
        if not self.database_url:
            raise ValueError(
                "DATABASE_URL is required. Set in environment or .env file "
                "(e.g. postgresql+asyncpg://<user>:<password>@<host>:5432/<db>)."
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.default_page_size > self.max_page_size:
            raise ValueError("DEFAULT_PAGE_SIZE must not exceed MAX_PAGE_SIZE")
        origins = [o.strip() for o in self.allowed_origins.split(",")]
        if "*" in origins:
            raise ValueError(
                "allowed_origins must list explicit origins; '*' is not allowed with credentials"
            )
        if self.debug and self.telemetry_environment.lower() == "production":
            raise ValueError("debug must be false when TELEMETRY_ENVIRONMENT is production")
        return self

    @property
    def is_postgres(self) -> bool:
        return self.database_url.startswith("postgresql")


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
