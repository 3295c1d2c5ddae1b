"""Shared pydantic base for models exchanged with clients and content files."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model serialised with camelCase keys.

    Both ``hitDie`` and ``hit_die`` are accepted on input; output always
    uses the camelCase alias.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump a detached, JSON-compatible dict with client field names."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = ["WireModel"]
