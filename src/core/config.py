"""Runtime settings, read from the environment (and ``.env``)."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """SkillSwap settings. Every field maps to the upper-cased env var."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "SkillSwap API"
    app_env: str = Field(default="development", description="development | production")
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/skillswap",
        description="Postgres URL; a plain postgresql:// scheme is upgraded to asyncpg",
    )

    # Supabase project
    supabase_url: str = Field(default="", description="https://<ref>.supabase.co")
    supabase_anon_key: str = Field(default="", description="Public key for Auth REST calls")
    supabase_service_role_key: str = Field(
        default="", description="Server-side key for Storage uploads"
    )

    # Tokens
    jwt_secret_key: str = Field(
        default="CHANGE-ME-IN-PRODUCTION",
        description="Shared secret for HS256 tokens",
    )
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 30
    admin_emails: str = Field(
        default="admin@skillswap.com",
        description="Comma-separated addresses that hold the admin capability",
    )

    # Directory freshness
    realtime_listen_enabled: bool = Field(
        default=True,
        description="LISTEN for profile change notifications from Postgres",
    )
    realtime_listen_url: str = Field(
        default="",
        description="Direct (session mode) connection for LISTEN; defaults to DATABASE_URL",
    )
    directory_cache_ttl_seconds: float = 30.0
    directory_cache_max_actors: int = 1000

    # Profile pictures
    storage_bucket: str = "profile-pictures"
    max_upload_bytes: int = 5 * 1024 * 1024

    # Email notifications
    notification_endpoint_url: str = Field(
        default="",
        description="Where rendered emails are POSTed; empty means log only",
    )
    site_url: str = Field(default="http://localhost:8080", description="Used in email links")

    # HTTP surface
    rate_limit_enabled: bool = True
    cors_origins: str = "http://localhost:8080,http://localhost:5173"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """``database_url`` with the driver the async engine needs."""
        scheme, sep, rest = self.database_url.partition("://")
        if scheme in ("postgres", "postgresql"):
            return f"postgresql+asyncpg{sep}{rest}"
        return self.database_url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def listen_dsn(self) -> str:
        """libpq-style URL for the asyncpg LISTEN connection."""
        url = self.realtime_listen_url or self.database_url
        scheme, sep, rest = url.partition("://")
        return f"postgresql{sep}{rest}" if scheme.startswith("postgres") else url

    @computed_field  # type: ignore[prop-decorator]
    @property
    def supabase_jwks_url(self) -> str:
        """Public signing keys for ES256 access tokens."""
        if not self.supabase_url:
            return ""
        return self.supabase_url.rstrip("/") + "/auth/v1/.well-known/jwks.json"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def admin_emails_list(self) -> list[str]:
        return [email.lower() for email in _split_csv(self.admin_emails)]

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        return _split_csv(self.cors_origins)


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings()


settings = get_settings()
