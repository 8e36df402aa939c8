"""Library configuration using pydantic-settings."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PLACEHOLDER_SECRET = "CHANGE-ME-IN-PRODUCTION"


class Settings(BaseSettings):
    """Settings loaded from ``REVOCATION_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="REVOCATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "staging", "production"] = "development"

    # Redis
    redis_url: str = Field(default="redis://localhost:6379/0")

    # JWT
    jwt_secret_key: str = Field(
        default=PLACEHOLDER_SECRET,
        description="JWT signing secret. MUST be overridden in production.",
    )
    jwt_algorithm: str = "HS256"

    # Invalidation keys and token metadata
    metadata_header: str = "revocation"
    user_key_prefix: str = "user::"
    client_key_prefix: str = "client::"

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    @model_validator(mode="after")
    def enforce_jwt_secret_strength(self) -> "Settings":
        """Enforce JWT secret requirements based on environment.

        - Non-dev: reject the placeholder secret AND require >= 32 characters.
        - Dev: emit a warning for short secrets so local runs aren't blocked.
        """
        if not self.is_development:
            if self.jwt_secret_key == PLACEHOLDER_SECRET:
                raise ValueError(
                    "jwt_secret_key must be changed from its default value "
                    "in staging/production environments"
                )
            if len(self.jwt_secret_key) < 32:
                raise ValueError(
                    "jwt_secret_key must be at least 32 characters "
                    "in staging/production environments"
                )
        elif len(self.jwt_secret_key) < 32:
            import warnings

            warnings.warn(
                "jwt_secret_key is shorter than 32 characters; "
                "use a strong, randomly-generated secret in production",
                UserWarning,
                stacklevel=2,
            )
        return self

    @model_validator(mode="after")
    def check_key_prefixes(self) -> "Settings":
        """User and client prefixes must be set and must not collide."""
        if not self.user_key_prefix or not self.client_key_prefix:
            raise ValueError("user_key_prefix and client_key_prefix must be non-empty")
        if self.user_key_prefix == self.client_key_prefix:
            raise ValueError("user_key_prefix and client_key_prefix must differ")
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
