# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for Quizroom.
Settings are loaded from environment variables with sensible defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from quizroom.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.quiz_api.base_url)
    'https://kotlin-khaos-api.maximoguk.com'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QuizApiSettings(BaseSettings):
    """Quiz API configuration.

    The quiz API generates questions, scores attempts and runs practice
    quizzes. Every call is authenticated with the user's identity token.

    Attributes:
        base_url: Base URL of the quiz API.
        timeout: Request timeout in seconds.
    """

    model_config = SettingsConfigDict(
        env_prefix="QUIZ_API_",
        extra="ignore",
    )

    base_url: str = "https://kotlin-khaos-api.maximoguk.com"
    timeout: float = 30.0


class FirebaseSettings(BaseSettings):
    """Identity and record backend configuration.

    Attributes:
        api_key: Web API key of the Firebase project.
        auth_url: Identity Toolkit REST base URL.
        token_url: Secure Token endpoint used to refresh id tokens.
        database_url: Realtime Database root URL.
        timeout: Request timeout in seconds.
        token_refresh_margin_seconds: Refresh id tokens this long before expiry.
        write_retries: Attempts per record write before giving up.
    """

    model_config = SettingsConfigDict(
        env_prefix="FIREBASE_",
        extra="ignore",
    )

    api_key: SecretStr = SecretStr("")
    auth_url: str = "https://identitytoolkit.googleapis.com/v1"
    token_url: str = "https://securetoken.googleapis.com/v1/token"
    database_url: str = "https://kotlin-khaos-default-rtdb.firebaseio.com"
    timeout: float = 15.0
    token_refresh_margin_seconds: int = 300
    write_retries: int = Field(default=3, ge=1)


class RedisSettings(BaseSettings):
    """Redis configuration for the last-known session cache.

    Attributes:
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
        session_key: Key holding the cached session.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    database: int = 0
    max_connections: int = 10
    session_key: str = "quizroom:session"

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        if self.password is not None and self.password.get_secret_value():
            pwd = self.password.get_secret_value()
            return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"
        return f"redis://{self.host}:{self.port}/{self.database}"


class ProfileSettings(BaseSettings):
    """Profile picture hosting configuration.

    Attributes:
        picture_base_url: Templated host that serves uploaded pictures.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROFILE_",
        extra="ignore",
    )

    picture_base_url: str = "https://images.maximoguk.com/kotlin-khaos/profile/picture"


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        session_sink: Where the last-known session is cached.
        quiz_api: Quiz API settings.
        firebase: Identity backend settings.
        redis: Redis settings.
        profile: Profile picture settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"
    session_sink: Literal["memory", "redis"] = "memory"

    # Subsettings - loaded with their own env prefixes
    quiz_api: QuizApiSettings = Field(default_factory=QuizApiSettings)
    firebase: FirebaseSettings = Field(default_factory=FirebaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    profile: ProfileSettings = Field(default_factory=ProfileSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production without a Firebase API key.
        """
        if self.environment == "production":
            if not self.firebase.api_key.get_secret_value():
                raise ValueError(
                    "Firebase API key must be set in production. "
                    "Set FIREBASE_API_KEY environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
