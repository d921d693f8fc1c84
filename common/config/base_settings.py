"""
Environment-driven settings shared by the API and the maintenance jobs.

Values come from process environment first, then ``.env``. Names are
case-sensitive. Subclass to add service-specific settings.
"""

from typing import List, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_AUTH_PROVIDERS = ("jwt",)


class BaseAppSettings(BaseSettings):
    """Connection, identity and HTTP server settings."""

    # --- MongoDB ---------------------------------------------------------
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "skillshare"

    # --- Identity --------------------------------------------------------
    AUTH_PROVIDER: str = "jwt"
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- HTTP server -----------------------------------------------------
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # "*" or a comma-separated list
    CORS_ORIGINS: str = "*"
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def get_cors_origins(self) -> List[str]:
        if self.CORS_ORIGINS.strip() == "*":
            return ["*"]
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    def validate_required(self) -> None:
        """
        Check settings the API cannot start without.

        Raises:
            ValueError: Listing every problem found
        """
        problems = []
        if self.AUTH_PROVIDER not in SUPPORTED_AUTH_PROVIDERS:
            problems.append(
                f"AUTH_PROVIDER must be one of {', '.join(SUPPORTED_AUTH_PROVIDERS)}, "
                f"got {self.AUTH_PROVIDER!r}"
            )
        elif not self.JWT_SECRET:
            problems.append("JWT_SECRET must be set for jwt authentication")

        if problems:
            raise ValueError("Invalid configuration: " + "; ".join(problems))
