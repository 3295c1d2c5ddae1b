"""Campaign metadata attached to a game on selection."""

from __future__ import annotations

from pydantic import ConfigDict, Field

from dnd_engine.models.base import WireModel


class Campaign(WireModel):
    """A campaign document.

    Only ``id``, ``name`` and ``description`` are interpreted; any other
    keys in the file are carried along untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    name: str = ""
    description: str = ""

    def summary(self) -> dict[str, str]:
        """Return the ``{id, name, description}`` summary sent to clients."""
        return {"id": self.id, "name": self.name, "description": self.description}


__all__ = ["Campaign"]
