"""Tests for spell casting."""

from __future__ import annotations

from typing import Any

import pytest

from dnd_engine.core.exceptions import InvalidGameStateError, NotFoundError
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.engine.spells import cast_spell, find_spell
from dnd_engine.models.rules import RuleTables


class TestFindSpell:
    """Tests for spell lookup."""

    def test_case_insensitive(self, rules: RuleTables) -> None:
        spell = find_spell(rules, "magic MISSILE")

        assert spell is not None
        assert spell.name == "Magic Missile"

    def test_first_definition_wins(self, rules: RuleTables) -> None:
        """Two classes define "Light"; the one defined first is used."""
        spell = find_spell(rules, "light")

        assert spell is not None
        assert spell.effect is not None
        assert spell.effect.damage is None

    def test_unknown(self, rules: RuleTables) -> None:
        assert find_spell(rules, "Wish") is None


class TestHealingSpells:
    """Tests for healing."""

    def test_heal_player(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        roller.queue(5)

        outcome = cast_spell(party, rules, roller, "g1", "p2", "Cure Light Wounds", "player", "p1")

        assert outcome.message == "Mira casts Cure Light Wounds on Rowan, healing 5 HP."
        assert outcome.result["heal"] == 5
        character = party.require_player("g1", "p1").character
        assert character is not None
        assert character.hp == 15
        assert party.require_game("g1").log[-1] == outcome.message

    def test_heal_does_not_clear_unconscious(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        """Healing raises hp but leaves the unconscious status in place."""
        party.set_character("g1", "p1", {"hp": 0, "status": "unconscious"})
        roller.queue(8)

        cast_spell(party, rules, roller, "g1", "p2", "Cure Light Wounds", "player", "p1")

        character = party.require_player("g1", "p1").character
        assert character is not None
        assert character.hp == 8
        assert character.status == "unconscious"
        assert character.is_conscious is False

    def test_heal_monster_rejected(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        log_size = len(party.require_game("g1").log)

        with pytest.raises(InvalidGameStateError):
            cast_spell(party, rules, roller, "g1", "p2", "Cure Light Wounds", "monster", orc.instance_id)

        assert orc.hp == 4
        assert len(party.require_game("g1").log) == log_size


class TestDamageSpells:
    """Tests for damaging spells."""

    def test_hit_player(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        roller.queue(14, 3)

        outcome = cast_spell(party, rules, roller, "g1", "p2", "Magic Missile", "player", "p1")

        assert outcome.message == "Mira casts Magic Missile and hits Rowan for 4 damage."
        assert outcome.result["hit"] is True
        character = party.require_player("g1", "p1").character
        assert character is not None
        assert character.hp == 6

    def test_miss_rolls_no_damage(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        roller.queue(3)

        outcome = cast_spell(party, rules, roller, "g1", "p2", "Magic Missile", "player", "p1")

        assert outcome.message == "Mira casts Magic Missile but misses Rowan."
        assert roller.requested == [20]

    def test_kills_monster(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        roller.queue(18, 6)

        outcome = cast_spell(
            party, rules, roller, "g1", "p2", "Magic Missile", "monster", orc.instance_id
        )

        assert outcome.message == "Mira casts Magic Missile and hits orc for 7 damage."
        assert party.get_monster("g1", orc.instance_id) is None


class TestOtherCasts:
    """Tests for inert spells and failures."""

    def test_no_effect(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        outcome = cast_spell(party, rules, roller, "g1", "p2", "Light", "player", "p1")

        assert outcome.message == "Mira casts Light, but nothing happens."
        assert party.require_game("g1").log[-1] == outcome.message

    def test_unknown_spell(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            cast_spell(party, rules, roller, "g1", "p2", "Wish", "player", "p1")
        assert exc_info.value.resource == "spell"

    def test_unknown_target(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        with pytest.raises(NotFoundError):
            cast_spell(party, rules, roller, "g1", "p2", "Magic Missile", "monster", "m_missing")
