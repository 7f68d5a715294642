"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, PostgresDsn
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ============== Environment ==============
    environment: Literal["development", "staging", "production"] = "development"

    # ============== Database ==============
    postgres_user: str = "medexplain"
    postgres_password: str = "medexplain_dev_password"
    postgres_db: str = "medexplain"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    database_url: PostgresDsn | None = None

    @property
    def db_url(self) -> str:
        """Construct database URL from components or use explicit URL."""
        if self.database_url:
            return str(self.database_url)
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def db_url_sync(self) -> str:
        """Synchronous database URL for Alembic migrations."""
        return self.db_url.replace("postgresql+asyncpg://", "postgresql://")

    # ============== API ==============
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_debug: bool = False
    api_reload: bool = False
    cors_origins_str: str = Field(default="http://localhost:5173,http://localhost:3000", alias="cors_origins")

    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    # ============== Auth (external provider) ==============
    # Tokens are issued by the hosted auth provider; we only verify them.
    auth_jwt_secret: str = "medexplain-dev-jwt-secret"
    auth_jwt_algorithm: str = "HS256"
    auth_jwt_audience: str | None = "authenticated"

    # ============== Usage Metering ==============
    monthly_query_quota: int = Field(default=50, ge=1, le=100000)

    # ============== Admin ==============
    ingestion_jobs_list_limit: int = Field(default=50, ge=1, le=1000)
    audit_log_list_limit: int = Field(default=100, ge=1, le=1000)

    # ============== Ingestion Webhooks ==============
    fda_ingestion_webhook_url: str | None = None
    gene_ingestion_webhook_url: str | None = None
    webhook_timeout_seconds: float = Field(default=10.0, gt=0, le=120)

    @property
    def ingestion_webhooks(self) -> dict[str, str | None]:
        """Webhook URL per ingestion job type."""
        return {
            "FDA Ingestion": self.fda_ingestion_webhook_url,
            "Gene/Variant Ingestion": self.gene_ingestion_webhook_url,
        }

    # ============== Logging ==============
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"

    # ============== Computed Properties ==============
    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
