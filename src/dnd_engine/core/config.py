"""Configuration management for the dnd-engine server.

This module provides centralized configuration management using
pydantic-settings, supporting environment variables, .env files, and
runtime configuration overrides.

Example:
    >>> from dnd_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.server.port)
    3000

Environment Variables:
    DND_ENGINE_RULES_PATH: Directory holding classes/spells/monsters/items JSON
    DND_ENGINE_CAMPAIGNS_PATH: Directory of campaign JSON files
    DND_ENGINE_DIALOGUES_PATH: Directory of dialogue JSON files
    DND_ENGINE_GAME_MONSTER_ATTACK_INTERVAL_SECONDS: Monster AI tick interval
    DND_ENGINE_SERVER_PORT: HTTP port
    DND_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dnd_engine.core.exceptions import ConfigurationError


class ContentSettings(BaseSettings):
    """Locations of the read-only content directories.

    Attributes:
        rules_path: Directory containing classes.json, spells.json,
            monsters.json and items.json.
        campaigns_path: Directory of campaign files.
        dialogues_path: Directory of dialogue files.
        maps_path: Directory of map files.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    rules_path: Path = Field(default=Path("rules"), description="Rule tables directory")
    campaigns_path: Path = Field(default=Path("campaigns"), description="Campaigns directory")
    dialogues_path: Path = Field(default=Path("dialogues"), description="Dialogues directory")
    maps_path: Path = Field(default=Path("maps"), description="Maps directory")


class GameSettings(BaseSettings):
    """Configuration for game engine behavior.

    Attributes:
        monster_attack_interval_seconds: Seconds between monster AI attacks.
        monster_ai_enabled: Start an attack task for every spawned monster.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_ENGINE_GAME_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    monster_attack_interval_seconds: float = Field(
        default=15.0,
        gt=0,
        le=3600,
        description="Seconds between monster AI attacks",
    )
    monster_ai_enabled: bool = Field(
        default=True,
        description="Run periodic monster attacks",
    )


class ServerSettings(BaseSettings):
    """Configuration for the HTTP/WebSocket gateway.

    Attributes:
        host: Interface to bind.
        port: TCP port to listen on.
        cors_origins: Origins allowed to call the API.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_ENGINE_SERVER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP port")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"], description="CORS origins")


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        json_logs: Render logs as JSON instead of console output.
        content: Content directory settings.
        game: Game engine settings.
        server: Gateway settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="DND_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(default="dnd-engine", description="Application name")
    app_version: str = Field(default="0.1.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(default=False, description="Emit JSON logs")

    content: ContentSettings = Field(default_factory=ContentSettings)
    game: GameSettings = Field(default_factory=GameSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    @model_validator(mode="after")
    def validate_debug_logging(self) -> "Settings":
        """Reject JSON logging in debug mode.

        Returns:
            Self if validation passes.

        Raises:
            ConfigurationError: If debug and json_logs are both enabled.
        """
        if self.debug and self.json_logs:
            raise ConfigurationError(
                "json_logs cannot be combined with debug mode",
                config_key="json_logs",
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return not self.debug


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "ContentSettings",
    "GameSettings",
    "ServerSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
