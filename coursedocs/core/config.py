"""
Configuration management for the coursedocs service.

This module centralizes environment-driven configuration using Pydantic's
`BaseSettings`. All services consume the shared `settings` instance to ensure
consistent configuration across the stack.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, List, Optional

from pydantic import AnyUrl, Field, PositiveInt, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    # General application settings
    API_TITLE: str = "Coursedocs API"
    API_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = Field("development", pattern=r"^(development|staging|production)$")
    LOG_LEVEL: str = "INFO"

    # Security / auth
    SECRET_KEY: str = "changeme"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["*"])
    ADMIN_ROLES: Annotated[List[str], NoDecode] = Field(default_factory=lambda: ["admin", "superadmin"])

    # Database connections
    MONGODB_URL: AnyUrl = Field("mongodb://localhost:27017")
    MONGODB_DATABASE: str = "coursedocs"
    REDIS_URL: Optional[AnyUrl] = None
    CACHE_BACKEND: str = Field("memory", pattern=r"^(memory|redis)$")

    # External media store
    MEDIA_CLOUD_NAME: str = "demo"
    MEDIA_API_KEY: Optional[str] = None
    MEDIA_API_SECRET: Optional[str] = None
    MEDIA_API_BASE_URL: str = "https://api.cloudinary.com/v1_1"
    MEDIA_HOST: str = "res.cloudinary.com"
    MEDIA_ROOT_FOLDER: str = "coursedocs"
    MEDIA_TIMEOUT_SECONDS: float = 30.0

    # Size limits
    MAX_DOCUMENT_BYTES: PositiveInt = 5 * 1024 * 1024
    MAX_IMAGE_BYTES: PositiveInt = 500 * 1024
    ALLOWED_IMAGE_TYPES: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
    )

    # Per-kind policies
    COURSE_DELETE_POLICY: str = Field("cascade", pattern=r"^(cascade|refuse)$")
    COURSE_MEDIA_TRACKING: str = Field("explicit", pattern=r"^(explicit|content)$")
    INTERVIEW_DELETE_POLICY: str = Field("refuse", pattern=r"^(cascade|refuse)$")
    INTERVIEW_MEDIA_TRACKING: str = Field("content", pattern=r"^(explicit|content)$")
    DEFAULT_PAGE_SIZE: PositiveInt = 20

    # Monitoring / tracing
    ENABLE_TRACING: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: Optional[AnyUrl] = None

    @field_validator("ALLOWED_ORIGINS", "ADMIN_ROLES", "ALLOWED_IMAGE_TYPES", mode="before")
    def _split_list(cls, value: str | List[str]) -> List[str]:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value or []


@lru_cache()
def get_settings() -> Settings:
    """Return a cached `Settings` instance."""

    return Settings()


# Singleton-style settings instance for modules that prefer direct access.
settings = get_settings()
