"""
Centralized configuration management using pydantic-settings.
This module provides a single source of truth for all application configuration.
"""


import os

from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.utils.logger import setup_logger

load_dotenv()


logger = setup_logger("core_config")

DEFAULT_JWT_SECRET = "your-secret-key-change-this-in-production"


class Settings(BaseSettings):
    """
    Application settings managed by pydantic-settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
        env_prefix="",
    )

    # ===== Database Configuration =====
    project_hub_schema: str = Field(
        default="project_hub",
        alias="PROJECT_HUB_SCHEMA",
        description="Database schema name (PostgreSQL only)",
    )

    app_database_url: str | None = Field(
        default=None,
        alias="PROJECT_HUB_DATABASE_URL",
        description="Application database URL (postgresql:// or sqlite://)",
    )

    # ===== Authentication Configuration =====
    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        alias="JWT_SECRET",
        description="Secret used to sign access tokens",
    )

    jwt_algorithm: str = Field(
        default="HS256", alias="JWT_ALGORITHM", description="JWT signing algorithm"
    )

    access_token_expire_minutes: int = Field(
        default=60,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
        description="Lifetime of issued access tokens in minutes",
    )

    # ===== Upload Configuration =====
    upload_dir: str = Field(
        default="uploads",
        alias="UPLOAD_DIR",
        description="Directory where uploaded user and project images are stored",
    )

    # ===== Server Configuration =====
    api_prefix: str = Field(
        default="/api", alias="API_PREFIX", description="Prefix for all API routes"
    )

    server_host: str = Field(
        default="0.0.0.0", alias="SERVER_HOST", description="Server host address"
    )

    server_port: int = Field(
        default=5000, alias="SERVER_PORT", description="Server port number"
    )

    server_workers: int = Field(
        default=1, alias="SERVER_WORKERS", description="Number of uvicorn workers"
    )

    # ===== CORS Configuration =====
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",  # React dev server
            "http://127.0.0.1:3000",
        ],
        alias="CORS_ALLOW_ORIGINS",
        description="CORS allowed origins",
    )

    cors_allow_credentials: bool = Field(
        default=True,
        alias="CORS_ALLOW_CREDENTIALS",
        description="Whether to allow credentials in CORS requests",
    )

    cors_allow_methods: list[str] = Field(
        default_factory=lambda: ["GET", "POST", "PATCH", "DELETE"],
        alias="CORS_ALLOW_METHODS",
        description="CORS allowed methods",
    )

    cors_allow_headers: list[str] = Field(
        default_factory=lambda: [
            "Origin",
            "X-Requested-With",
            "Content-Type",
            "Accept",
            "Authorization",
        ],
        alias="CORS_ALLOW_HEADERS",
        description="CORS allowed headers",
    )

    # User-facing hint for database connection errors
    db_unavailable_hint: str = os.getenv(
        "DB_UNAVAILABLE_HINT",
        "Database connection failed. The server may be offline or network connectivity is down.",
    )

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Validate settings and log warnings for missing critical configurations."""
        if not self.app_database_url:
            logger.warning("PROJECT_HUB_DATABASE_URL environment variable not set.")

        if self.jwt_secret == DEFAULT_JWT_SECRET:
            logger.warning("JWT_SECRET not set, using the insecure development default.")

        logger.debug(f"Using database schema: {self.project_hub_schema}")
        return self

    @property
    def schema_name(self) -> str:
        return self.project_hub_schema


# Global settings instance
settings = Settings()
