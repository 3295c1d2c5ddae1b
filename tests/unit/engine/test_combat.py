"""Tests for attack resolution."""

from __future__ import annotations

from typing import Any

import pytest

from dnd_engine.core.exceptions import NotFoundError
from dnd_engine.engine.combat import (
    attack,
    attack_monster,
    describe_attack,
    describe_monster_attack,
    describe_monster_strike,
    monster_attack,
    monster_damage_notation,
)
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.rules import RuleTables


class TestPlayerAttack:
    """Tests for player-versus-player attacks."""

    def test_hit_when_roll_meets_ac(self, party: GameRegistry, roller: Any) -> None:
        """A roll equal to the armour class hits."""
        roller.queue(12, 4)

        result = attack(party, roller, "g1", "p2", "p1")

        assert result.hit is True
        assert result.damage == 4
        assert result.target_remaining_hp == 6
        assert roller.requested == [20, 6]

    def test_miss_deals_no_damage(self, party: GameRegistry, roller: Any) -> None:
        roller.queue(11)

        result = attack(party, roller, "g1", "p2", "p1")

        assert result.hit is False
        assert result.damage == 0
        assert result.target_remaining_hp == 10

    def test_knockout_sets_unconscious(self, party: GameRegistry, roller: Any) -> None:
        roller.queue(20, 6)

        result = attack(party, roller, "g1", "p1", "p2")

        character = party.require_player("g1", "p2").character
        assert character is not None
        assert result.target_remaining_hp == 0
        assert character.status == "unconscious"

    def test_target_without_character(self, party: GameRegistry, roller: Any) -> None:
        """A characterless target has ac 10 and ends with negative hp."""
        party.add_player("g1", "p3", "Bystander")
        roller.queue(10, 3)

        result = attack(party, roller, "g1", "p1", "p3")

        assert result.hit is True
        assert result.target_remaining_hp == -3
        character = party.require_player("g1", "p3").character
        assert character is not None
        assert character.status == "unconscious"

    def test_unknown_target(self, party: GameRegistry, roller: Any) -> None:
        with pytest.raises(NotFoundError):
            attack(party, roller, "g1", "p1", "ghost")

    def test_does_not_write_log(self, party: GameRegistry, roller: Any) -> None:
        roller.queue(1)
        before = list(party.require_game("g1").log)

        attack(party, roller, "g1", "p1", "p2")

        assert party.require_game("g1").log == before


class TestAttackMonster:
    """Tests for players attacking monsters."""

    def test_monster_removed_when_killed(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        roller.queue(13, 4)

        result = attack_monster(party, roller, "g1", "p1", orc.instance_id)

        assert result.hit is True
        assert result.monster_remaining_hp == 0
        assert result.monster_status == "dead"
        assert party.get_monster("g1", orc.instance_id) is None

    def test_wounded_monster_stays(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        roller.queue(15, 1)

        result = attack_monster(party, roller, "g1", "p1", orc.instance_id)

        assert result.monster_remaining_hp == 3
        assert result.monster_status == "alive"
        assert party.get_monster("g1", orc.instance_id) is orc

    def test_miss(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        roller.queue(12)

        result = attack_monster(party, roller, "g1", "p1", orc.instance_id)

        assert result.hit is False
        assert orc.hp == 4

    def test_unknown_monster(self, party: GameRegistry, roller: Any) -> None:
        with pytest.raises(NotFoundError):
            attack_monster(party, roller, "g1", "p1", "m_missing")


class TestMonsterAttack:
    """Tests for monsters attacking players."""

    def test_uses_first_attack_notation(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        roller.queue(12, 7)

        result = monster_attack(party, rules, roller, "g1", orc.instance_id, "p1")

        assert result.attacker == "orc"
        assert result.damage == 7
        assert result.target_remaining_hp == 3
        assert roller.requested == [20, 8]

    def test_no_attacks_defaults_to_d6(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        troll = party.spawn_monster("g1", "troll", rules.monsters["troll"])
        roller.queue(20, 5)

        result = monster_attack(party, rules, roller, "g1", troll.instance_id, "p1")

        assert result.damage == 5
        assert roller.requested == [20, 6]

    def test_unparsable_notation_falls_back_to_d6(
        self, party: GameRegistry, rules: RuleTables, roller: Any
    ) -> None:
        slime = party.spawn_monster("g1", "slime", rules.monsters["slime"])
        roller.queue(19, 2)

        result = monster_attack(party, rules, roller, "g1", slime.instance_id, "p1")

        assert result.damage == 2
        assert roller.requested == [20, 6]

    def test_damage_notation_lookup(self, rules: RuleTables) -> None:
        assert monster_damage_notation(rules, "orc") == "1d8"
        assert monster_damage_notation(rules, "troll") == "1d6"
        assert monster_damage_notation(rules, "dragon") == "1d6"


class TestDescriptions:
    """Tests for the log lines of each attack kind."""

    def test_player_lines(self, party: GameRegistry, roller: Any) -> None:
        roller.queue(15, 3, 2)

        hit = attack(party, roller, "g1", "p1", "p2")
        miss = attack(party, roller, "g1", "p1", "p2")

        assert describe_attack(hit) == "Rowan hit Mira for 3 damage (roll 15)."
        assert describe_attack(miss) == "Rowan missed Mira (roll 2)."

    def test_monster_lines(self, party: GameRegistry, rules: RuleTables, roller: Any) -> None:
        orc = party.spawn_monster("g1", "orc", rules.monsters["orc"])
        roller.queue(5, 1)

        struck = attack_monster(party, roller, "g1", "p1", orc.instance_id)
        strike = monster_attack(party, rules, roller, "g1", orc.instance_id, "p2")

        assert describe_monster_attack(struck) == "Rowan missed the orc (roll 5)."
        assert describe_monster_strike(strike) == "The orc misses Mira (roll 1)."
