"""Player action dispatch.

Action payloads arrive from clients as loose JSON objects tagged by a
``type`` field. Recognised kinds are validated into pydantic models; any
other payload (including one with no ``type``) becomes an UnknownAction,
which is logged rather than rejected.

Example:
    >>> parse_action({"type": "roll", "sides": 8})
    RollAction(type='roll', sides=8, expression=None)
    >>> parse_action({"type": "dance"})
    UnknownAction(payload={'type': 'dance'})
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal, Union

from pydantic import Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from dnd_engine.core.constants import ATTACK_DIE
from dnd_engine.core.exceptions import ValidationError
from dnd_engine.core.logging import get_logger
from dnd_engine.engine.combat import (
    attack,
    attack_monster,
    describe_attack,
    describe_monster_attack,
)
from dnd_engine.engine.dice import DiceRoller
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.engine.spells import cast_spell
from dnd_engine.models.base import WireModel
from dnd_engine.models.rules import RuleTables


logger = get_logger(__name__)


# =============================================================================
# Action kinds
# =============================================================================


class RollAction(WireModel):
    """Roll a single die, or a d20 expression such as ``"2d6+1"``."""

    type: Literal["roll"] = "roll"
    sides: int = Field(default=ATTACK_DIE, ge=1)
    expression: str | None = None


class AttackAction(WireModel):
    """Attack another player, or a monster when ``targetType`` is "monster"."""

    type: Literal["attack"] = "attack"
    target_id: str
    target_type: str = "player"


class CastSpellAction(WireModel):
    """Cast a spell by name; ``spellId`` is accepted from older clients."""

    type: Literal["castSpell"] = "castSpell"
    spell_name: str | None = None
    spell_id: str | None = None
    target_type: str = "player"
    target_id: str = ""

    @property
    def resolved_name(self) -> str | None:
        return self.spell_name or self.spell_id


@dataclass
class UnknownAction:
    """Any payload whose ``type`` is missing or unrecognised."""

    payload: dict[str, Any] = field(default_factory=dict)


KnownAction = Annotated[
    Union[RollAction, AttackAction, CastSpellAction],
    Field(discriminator="type"),
]
Action = Union[RollAction, AttackAction, CastSpellAction, UnknownAction]

_known_action_adapter: TypeAdapter[Any] = TypeAdapter(KnownAction)
_KNOWN_TYPES = frozenset({"roll", "attack", "castSpell"})


@dataclass
class ActionOutcome:
    """The log line produced by an action and any structured result."""

    message: str
    result: Any = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"message": self.message}
        if self.result is not None:
            wire["result"] = self.result
        return wire


# =============================================================================
# Parsing and dispatch
# =============================================================================


def parse_action(payload: dict[str, Any]) -> Action:
    """Turn a raw payload into an action.

    Raises:
        ValidationError: If a recognised action kind has malformed fields,
            for example an attack without ``targetId``.
    """
    if not isinstance(payload, dict) or payload.get("type") not in _KNOWN_TYPES:
        return UnknownAction(payload=dict(payload) if isinstance(payload, dict) else {})
    try:
        return _known_action_adapter.validate_python(payload)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        raise ValidationError(
            f"Invalid {payload['type']} action: {error['msg']}",
            field_name=".".join(str(part) for part in error["loc"]),
        ) from exc


def _describe_payload(payload: dict[str, Any]) -> str:
    return json.dumps(payload, separators=(",", ":"), default=str)


def handle_action(
    registry: GameRegistry,
    rules: RuleTables,
    roller: DiceRoller,
    game_id: str,
    player_id: str,
    payload: dict[str, Any],
) -> ActionOutcome:
    """Resolve one player action and append its log line.

    Args:
        registry: Game registry.
        rules: Rule tables.
        roller: Dice roller.
        game_id: Game the action happens in.
        player_id: Acting player.
        payload: Raw action object from the client.

    Returns:
        ActionOutcome with the logged message and, for rolls, attacks and
        spells, a structured result.

    Raises:
        NotFoundError: Unknown game or player, or an unknown target.
        ValidationError: Malformed fields on a recognised action.
        DiceRollError: A roll ``expression`` the d20 library rejects.
    """
    registry.require_game(game_id)
    player = registry.require_player(game_id, player_id)
    action = parse_action(payload)

    match action:
        case RollAction(expression=expression) if expression and expression.strip():
            rolled = roller.roll(expression)
            outcome = ActionOutcome(
                message=f"{player.name} rolled {rolled.total} ({rolled.expression}).",
                result={"total": rolled.total, "dice": rolled.dice, "modifier": rolled.modifier},
            )
            registry.append_log(game_id, outcome.message)
        case RollAction(sides=sides):
            value = roller.roll_die(sides)
            outcome = ActionOutcome(
                message=f"{player.name} rolled a {value} (d{sides}).",
                result=value,
            )
            registry.append_log(game_id, outcome.message)
        case AttackAction(target_type="monster"):
            monster_result = attack_monster(registry, roller, game_id, player_id, action.target_id)
            outcome = ActionOutcome(
                message=describe_monster_attack(monster_result),
                result=monster_result.to_wire(),
            )
            registry.append_log(game_id, outcome.message)
        case AttackAction():
            player_result = attack(registry, roller, game_id, player_id, action.target_id)
            outcome = ActionOutcome(
                message=describe_attack(player_result),
                result=player_result.to_wire(),
            )
            registry.append_log(game_id, outcome.message)
        case CastSpellAction():
            name = action.resolved_name
            if not name:
                outcome = ActionOutcome(
                    message=f"{player.name} tried to cast a spell, but no spell name was provided.",
                )
                registry.append_log(game_id, outcome.message)
            else:
                # cast_spell writes its own log line
                spell = cast_spell(
                    registry,
                    rules,
                    roller,
                    game_id,
                    player_id,
                    name,
                    action.target_type,
                    action.target_id,
                )
                outcome = ActionOutcome(message=spell.message, result=spell.result)
        case UnknownAction(payload=raw):
            outcome = ActionOutcome(
                message=f"{player.name} performed an unknown action: {_describe_payload(raw)}.",
            )
            registry.append_log(game_id, outcome.message)

    logger.info(
        "Action handled",
        game_id=game_id,
        player_id=player_id,
        action_type=type(action).__name__,
    )
    return outcome


__all__ = [
    "RollAction",
    "AttackAction",
    "CastSpellAction",
    "UnknownAction",
    "Action",
    "ActionOutcome",
    "parse_action",
    "handle_action",
]
