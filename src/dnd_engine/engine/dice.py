"""Dice rolling for the resolution engine.

Every random number the engine draws comes from a DiceRoller, rolled
through the d20 library. Engine functions receive the roller explicitly
so tests can substitute a scripted one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

import d20

from dnd_engine.core.constants import ATTACK_DIE, MAX_NOTATION_DICE
from dnd_engine.core.exceptions import DiceRollError
from dnd_engine.core.logging import get_logger


logger = get_logger(__name__)

# <count>d<sides>[+<bonus>], found anywhere in the string
NOTATION_PATTERN = re.compile(r"(\d+)d(\d+)(\+(\d+))?")


@dataclass(frozen=True)
class DiceExpression:
    """A rolled free-form dice expression.

    Attributes:
        expression: The original dice expression string.
        total: The total result of the roll.
        dice: Individual kept dice results.
        modifier: Static modifier applied (total minus dice).
    """

    expression: str
    total: int
    dice: list[int]
    modifier: int


@dataclass(frozen=True)
class Notation:
    """A parsed ``NdS+B`` notation."""

    count: int
    sides: int
    bonus: int = 0


def parse_notation(notation: str | None) -> Notation | None:
    """Parse the first ``NdS[+B]`` group in a string.

    Args:
        notation: Dice notation such as ``"2d4+1"``.

    Returns:
        The parsed notation, or None if nothing usable was found.
    """
    if not notation:
        return None
    match = NOTATION_PATTERN.search(notation)
    if not match:
        return None
    count = int(match.group(1))
    sides = int(match.group(2))
    if sides < 1:
        return None
    bonus = int(match.group(4)) if match.group(4) else 0
    return Notation(count=count, sides=sides, bonus=bonus)


class DiceRoller:
    """Dice rolling backed by the d20 library.

    Example:
        >>> roller = DiceRoller()
        >>> 1 <= roller.roll_die(20) <= 20
        True
        >>> roller.roll_notation("not dice")
        0
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.
        """
        self._seed = seed
        if seed is not None:
            import random

            random.seed(seed)
        logger.debug("DiceRoller initialized", seed=seed)

    def roll_die(self, sides: int = ATTACK_DIE) -> int:
        """Roll one die.

        Args:
            sides: Number of faces; must be at least 1.

        Returns:
            A uniform integer in ``[1, sides]``.

        Raises:
            DiceRollError: If ``sides`` is not a positive integer.
        """
        if sides < 1:
            raise DiceRollError(f"A die needs at least one side, got {sides}")
        return d20.roll(f"1d{sides}").total

    def roll_notation(self, notation: str | None) -> int:
        """Roll a ``NdS[+B]`` notation.

        Malformed notation, or one asking for more than
        ``MAX_NOTATION_DICE`` dice, never raises: it is logged and rolls 0.

        Args:
            notation: Dice notation such as ``"1d8"`` or ``"2d4+2"``.

        Returns:
            ``B`` plus the sum of ``N`` rolls of a ``S``-sided die.
        """
        parsed = parse_notation(notation)
        if parsed is None:
            logger.warning("Unparsable dice notation", notation=notation)
            return 0
        if parsed.count > MAX_NOTATION_DICE:
            logger.warning("Too many dice in notation", notation=notation, count=parsed.count)
            return 0
        return parsed.bonus + sum(self.roll_die(parsed.sides) for _ in range(parsed.count))

    def roll(self, expression: str) -> DiceExpression:
        """Roll an arbitrary d20-library expression.

        Args:
            expression: Dice expression (e.g., '1d20+5', '4d6kh3').

        Returns:
            DiceExpression containing roll results.

        Raises:
            DiceRollError: If the expression is invalid.
        """
        if not expression or not expression.strip():
            raise DiceRollError("Empty dice expression", expression=expression)

        try:
            result = d20.roll(expression)
        except d20.RollError as exc:
            raise DiceRollError(
                f"Invalid dice expression: {exc}",
                expression=expression,
            ) from exc

        dice_values = self._extract_dice_values(result.expr)
        logger.debug("Dice rolled", expression=expression, total=result.total)
        return DiceExpression(
            expression=expression,
            total=result.total,
            dice=dice_values,
            modifier=result.total - sum(dice_values),
        )

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract kept dice values from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values


__all__ = [
    "NOTATION_PATTERN",
    "DiceExpression",
    "Notation",
    "parse_notation",
    "DiceRoller",
]
