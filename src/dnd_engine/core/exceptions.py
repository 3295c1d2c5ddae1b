"""Exception hierarchy for the dnd-engine game server.

Every failure the engine reports is a DndEngineError. The session gateway
catches the base class, sends ``exc.message`` to the socket that caused
it and keeps serving; nothing here should ever take the process down.

Keyword arguments on the subclasses are folded into ``details`` so that
structured log lines can carry them.

Example:
    >>> from dnd_engine.core.exceptions import NotFoundError
    >>> raise NotFoundError("Unknown monster type: dragon", resource="monster_type")
"""

from __future__ import annotations

from typing import Any


def _with_context(details: dict[str, Any] | None, **context: Any) -> dict[str, Any]:
    merged = dict(details or {})
    merged.update({key: value for key, value in context.items() if value is not None})
    return merged


class DndEngineError(Exception):
    """Base exception for all dnd-engine errors.

    Attributes:
        message: Text shown to the player whose request failed.
        details: Extra context for logs; never sent to clients.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(str(self))

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} [{context}]"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Resolution
# =============================================================================


class GameEngineError(DndEngineError):
    """A game operation could not be resolved."""


class NotFoundError(GameEngineError):
    """An id did not resolve.

    Raised for games, players, monsters, campaigns, dialogue files,
    conversations, nodes, spells, items and inventory entries.

    Attributes:
        resource: What was being looked up, e.g. ``"player"``.
        identifier: The id that was not found.
    """

    def __init__(
        self,
        message: str,
        *,
        resource: str | None = None,
        identifier: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            message,
            details=_with_context(details, resource=resource, identifier=identifier),
        )


class InvalidGameStateError(GameEngineError):
    """The request is well-formed but not allowed right now.

    An out-of-range dialogue option and a healing spell aimed at a monster
    both end up here.
    """

    def __init__(
        self,
        message: str,
        *,
        current_state: str | None = None,
        expected_states: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(
                details,
                current_state=current_state,
                expected_states=expected_states,
            ),
        )


class DiceRollError(GameEngineError):
    """A die with no sides, or a free-form expression d20 rejects."""

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, expression=expression))


# =============================================================================
# Content, configuration and input
# =============================================================================


class ContentError(DndEngineError):
    """A rule, campaign, dialogue or map file could not be read."""

    def __init__(
        self,
        message: str,
        *,
        source_file: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, source_file=source_file))


class ConfigurationError(DndEngineError):
    """Settings failed to load or contradict each other."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=_with_context(details, config_key=config_key))


class ValidationError(DndEngineError):
    """A client payload is malformed.

    Used for a recognised action kind with missing or mistyped fields, and
    for values the engine refuses outright such as negative experience.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message,
            details=_with_context(details, field_name=field_name, invalid_value=invalid_value),
        )


__all__ = [
    "DndEngineError",
    "GameEngineError",
    "NotFoundError",
    "InvalidGameStateError",
    "DiceRollError",
    "ContentError",
    "ConfigurationError",
    "ValidationError",
]
