"""Application settings using Pydantic for environment-based configuration."""
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MONGODB_URI = "mongodb://localhost:27017/rbs-grocery"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Stripe Configuration
    stripe_secret_key: Optional[str] = Field(
        default=None, description="Stripe secret API key (sk_test_... or sk_live_...)"
    )

    # Database Configuration
    mongodb_uri: Optional[str] = Field(default=None, description="MongoDB connection URI")
    mongodb_server_selection_timeout_ms: int = Field(
        default=5000, description="How long to try selecting a server (ms)"
    )
    mongodb_socket_timeout_ms: int = Field(
        default=45000, description="How long an idle socket stays open (ms)"
    )

    # Application Configuration
    app_name: str = Field(default="bringit-grocery", description="Application name")
    app_env: str = Field(default="development", description="Environment (development/production)")
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log renderer (json/console)")

    # Server Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    port: int = Field(default=5000, description="Main API port")
    test_server_port: int = Field(default=5002, description="Minimal test server port")
    allowed_origins: str = Field(
        default="http://localhost:3000,http://127.0.0.1:3000",
        description="CORS allowed origins (comma-separated)",
    )

    # Rate Limiting
    rate_limit_max_requests: int = Field(
        default=100, description="Requests allowed per client IP per window on /api"
    )
    rate_limit_window_seconds: int = Field(default=600, description="Rate limit window (seconds)")

    # Frontend
    frontend_build_dir: str = Field(
        default="frontend/build", description="Built frontend bundle served in production"
    )
    frontend_dev_url: Optional[str] = Field(
        default=None, description="Frontend dev server passed through in development"
    )

    # Admin info page
    admin_emails: str = Field(
        default=(
            "admin@rbsgrocery.com,rbsadmin@gmail.com,manager@rbsgrocery.com,"
            "boss@rbsgrocery.com,owner@rbsgrocery.com"
        ),
        description="Admin email options shown on the admin info page (comma-separated)",
    )
    admin_demo_password: str = Field(default="admin123", description="Demo admin password")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log renderer name."""
        if v.lower() not in ("json", "console"):
            raise ValueError("Invalid log format. Must be 'json' or 'console'")
        return v.lower()

    def get_allowed_origins_list(self) -> List[str]:
        """Parse allowed origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    def get_admin_emails_list(self) -> List[str]:
        """Parse admin emails from comma-separated string."""
        return [email.strip() for email in self.admin_emails.split(",") if email.strip()]

    @property
    def effective_mongodb_uri(self) -> str:
        """Configured MongoDB URI, or the local default."""
        return self.mongodb_uri or DEFAULT_MONGODB_URI

    @property
    def stripe_key_present(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
