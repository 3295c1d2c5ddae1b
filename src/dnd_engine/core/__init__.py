"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        DndEngineError: Base exception for all application errors.
        NotFoundError: Unknown game, player, monster, spell, item or dialogue.
        InvalidGameStateError: Request not valid in the current state.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from dnd_engine.core.config import (
    ContentSettings,
    GameSettings,
    ServerSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from dnd_engine.core.exceptions import (
    ConfigurationError,
    ContentError,
    DiceRollError,
    DndEngineError,
    GameEngineError,
    InvalidGameStateError,
    NotFoundError,
    ValidationError,
)
from dnd_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "DndEngineError",
    "GameEngineError",
    "NotFoundError",
    "InvalidGameStateError",
    "DiceRollError",
    "ContentError",
    "ConfigurationError",
    "ValidationError",
    # Configuration
    "Settings",
    "ContentSettings",
    "GameSettings",
    "ServerSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
