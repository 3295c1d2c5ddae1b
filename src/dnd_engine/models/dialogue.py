"""Dialogue tree schemas.

A dialogue file holds one or more conversations. Each conversation names
its start node and maps node ids to nodes; each node has text and ordered
options that may grant a reward and may point to a next node.
"""

from __future__ import annotations

from pydantic import ConfigDict, Field

from dnd_engine.models.base import WireModel


class DialogueModel(WireModel):
    """Base for dialogue content; unknown keys are preserved."""

    model_config = ConfigDict(extra="allow", frozen=True, validate_assignment=False)


class Reward(DialogueModel):
    """Experience and items granted by choosing an option."""

    xp: int | None = Field(default=None, ge=0)
    items: list[str] = Field(default_factory=list)


class DialogueOption(DialogueModel):
    """A choice offered at a node. No ``next`` means the conversation ends."""

    text: str
    next: str | None = None
    reward: Reward | None = None


class DialogueNodeDef(DialogueModel):
    """A node of a conversation."""

    text: str = ""
    options: list[DialogueOption] = Field(default_factory=list)

    def option_texts(self) -> list[str]:
        """Display text of each option, in order."""
        return [option.text for option in self.options]


class Conversation(DialogueModel):
    """A single conversation tree."""

    id: str
    name: str = ""
    start: str
    nodes: dict[str, DialogueNodeDef] = Field(default_factory=dict)


class DialogueFile(DialogueModel):
    """A dialogue document, associated with a campaign."""

    id: str
    campaign_id: str | None = None
    dialogues: list[Conversation] = Field(default_factory=list)

    def get_conversation(self, conversation_id: str) -> Conversation | None:
        """Find a conversation by id."""
        for conversation in self.dialogues:
            if conversation.id == conversation_id:
                return conversation
        return None


__all__ = [
    "Reward",
    "DialogueOption",
    "DialogueNodeDef",
    "Conversation",
    "DialogueFile",
]
