"""Rule table loading.

The rules directory holds ``classes.json``, ``spells.json``,
``monsters.json`` and ``items.json``. A missing or broken file yields an
empty table and a warning; the server still starts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from dnd_engine.content.loader import read_json
from dnd_engine.core.exceptions import ContentError
from dnd_engine.core.logging import get_logger
from dnd_engine.models.rules import (
    ClassRule,
    ItemRule,
    MonsterRule,
    RuleTables,
    SpellBook,
    SpellRule,
)


logger = get_logger(__name__)

RULE_FILES = {
    "classes": "classes.json",
    "spells": "spells.json",
    "monsters": "monsters.json",
    "items": "items.json",
}

M = TypeVar("M", bound=BaseModel)


def _load_raw(path: Path) -> dict[str, Any]:
    try:
        data = read_json(path)
    except ContentError as exc:
        logger.warning("Rule file unavailable, using empty table", error=str(exc))
        return {}
    if not isinstance(data, dict):
        logger.warning("Rule file is not an object, using empty table", source_file=str(path))
        return {}
    return data


def _parse_table(path: Path, model: type[M]) -> dict[str, M]:
    table: dict[str, M] = {}
    for key, raw in _load_raw(path).items():
        try:
            table[key] = model.model_validate(raw)
        except PydanticValidationError as exc:
            logger.warning(
                "Skipping invalid rule entry",
                source_file=str(path),
                key=key,
                errors=exc.error_count(),
            )
    return table


def _parse_spells(path: Path) -> SpellBook:
    book: SpellBook = {}
    for caster_class, levels in _load_raw(path).items():
        if not isinstance(levels, dict):
            logger.warning("Skipping invalid spell class", source_file=str(path), key=caster_class)
            continue
        by_level: dict[str, list[SpellRule]] = {}
        for level, entries in levels.items():
            if not isinstance(entries, list):
                logger.warning(
                    "Skipping invalid spell level",
                    source_file=str(path),
                    key=f"{caster_class}.{level}",
                )
                continue
            spells: list[SpellRule] = []
            for index, raw in enumerate(entries):
                try:
                    spells.append(SpellRule.model_validate(raw))
                except PydanticValidationError as exc:
                    logger.warning(
                        "Skipping invalid rule entry",
                        source_file=str(path),
                        key=f"{caster_class}.{level}.{index}",
                        errors=exc.error_count(),
                    )
            by_level[str(level)] = spells
        book[caster_class] = by_level
    return book


def load_rule_tables(rules_path: Path) -> RuleTables:
    """Load the four rule tables from a directory.

    Args:
        rules_path: Directory containing the rule JSON files.

    Returns:
        RuleTables; any table whose file is missing or invalid is empty.
    """
    tables = RuleTables(
        classes=_parse_table(rules_path / RULE_FILES["classes"], ClassRule),
        spells=_parse_spells(rules_path / RULE_FILES["spells"]),
        monsters=_parse_table(rules_path / RULE_FILES["monsters"], MonsterRule),
        items=_parse_table(rules_path / RULE_FILES["items"], ItemRule),
    )
    logger.info(
        "Rule tables loaded",
        rules_path=str(rules_path),
        classes=len(tables.classes),
        spells=sum(1 for _ in tables.iter_spells()),
        monsters=len(tables.monsters),
        items=len(tables.items),
    )
    return tables


__all__ = ["RULE_FILES", "load_rule_tables"]
