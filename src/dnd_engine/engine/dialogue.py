"""Dialogue traversal.

The engine holds no conversation state: the caller remembers the current
node id and passes it back with each choice. Choosing an option applies
its reward, then either returns the next node or signals the end of the
conversation when ``next`` is absent or does not name a real node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

from dnd_engine.core.exceptions import InvalidGameStateError, NotFoundError
from dnd_engine.core.logging import get_logger
from dnd_engine.engine.progression import add_experience
from dnd_engine.engine.registry import GameRegistry
from dnd_engine.models.dialogue import Conversation, DialogueFile, DialogueNodeDef, Reward


logger = get_logger(__name__)


class DialogueSource(Protocol):
    """Anything that can look up dialogue files by id."""

    def get_dialogue(self, dialogue_id: str) -> DialogueFile | None: ...


@dataclass
class DialogueNode:
    """A node presented to the player."""

    dialogue_id: str
    conversation_id: str
    node_id: str
    text: str
    options: list[str] = field(default_factory=list)
    end: bool = False

    def to_wire(self) -> dict[str, Any]:
        return {
            "dialogueId": self.dialogue_id,
            "conversationId": self.conversation_id,
            "nodeId": self.node_id,
            "text": self.text,
            "options": list(self.options),
        }


@dataclass
class DialogueEnd:
    """Marker returned when a choice ends the conversation."""

    end: bool = True

    def to_wire(self) -> dict[str, Any]:
        return {"end": True}


def _load_conversation(
    source: DialogueSource,
    dialogue_id: str,
    conversation_id: str,
) -> Conversation:
    dialogue = source.get_dialogue(dialogue_id)
    if dialogue is None:
        raise NotFoundError(
            f"Dialogue file {dialogue_id} not found",
            resource="dialogue",
            identifier=dialogue_id,
        )
    conversation = dialogue.get_conversation(conversation_id)
    if conversation is None:
        raise NotFoundError(
            f"Dialogue {conversation_id} not found in file {dialogue_id}",
            resource="conversation",
            identifier=conversation_id,
        )
    return conversation


def _present(
    dialogue_id: str,
    conversation_id: str,
    node_id: str,
    node: DialogueNodeDef,
) -> DialogueNode:
    return DialogueNode(
        dialogue_id=dialogue_id,
        conversation_id=conversation_id,
        node_id=node_id,
        text=node.text,
        options=node.option_texts(),
    )


def start_dialogue(
    source: DialogueSource,
    dialogue_id: str,
    conversation_id: str,
) -> DialogueNode:
    """Return the start node of a conversation.

    Raises:
        NotFoundError: If the file, conversation or start node is missing.
    """
    conversation = _load_conversation(source, dialogue_id, conversation_id)
    node = conversation.nodes.get(conversation.start)
    if node is None:
        raise NotFoundError(
            f"Start node {conversation.start} not found in dialogue {conversation_id}",
            resource="dialogue_node",
            identifier=conversation.start,
        )
    return _present(dialogue_id, conversation_id, conversation.start, node)


def _apply_reward(
    registry: GameRegistry,
    game_id: str,
    player_id: str,
    reward: Reward,
) -> None:
    player = registry.require_player(game_id, player_id)
    if player.character is None:
        registry.set_character(game_id, player_id, {})
    if reward.xp:
        add_experience(registry, game_id, player_id, reward.xp)
    for item_id in reward.items:
        registry.add_item_to_player(game_id, player_id, item_id)
        registry.append_log(game_id, f"{player.name} received item {item_id}.")


def choose_dialogue_option(
    registry: GameRegistry,
    source: DialogueSource,
    game_id: str,
    player_id: str,
    dialogue_id: str,
    conversation_id: str,
    node_id: str,
    option_index: int,
) -> DialogueNode | DialogueEnd:
    """Apply a player's choice and move to the next node.

    Args:
        registry: Game registry receiving rewards.
        source: Dialogue lookup.
        game_id: Game identifier.
        player_id: Choosing player.
        dialogue_id: Dialogue file id.
        conversation_id: Conversation id within the file.
        node_id: Node the player is currently at.
        option_index: Zero-based option index.

    Returns:
        The next node, or DialogueEnd when the conversation is over.

    Raises:
        NotFoundError: Unknown file, conversation, node or player.
        InvalidGameStateError: No option at ``option_index``.
    """
    conversation = _load_conversation(source, dialogue_id, conversation_id)
    node = conversation.nodes.get(node_id)
    if node is None:
        raise NotFoundError(
            f"Node {node_id} not found in dialogue {conversation_id}",
            resource="dialogue_node",
            identifier=node_id,
        )
    if not 0 <= option_index < len(node.options):
        raise InvalidGameStateError(
            f"Option index {option_index} is invalid for node {node_id}",
            current_state=node_id,
        )
    registry.require_player(game_id, player_id)
    option = node.options[option_index]

    if option.reward is not None:
        _apply_reward(registry, game_id, player_id, option.reward)

    logger.info(
        "Dialogue option chosen",
        game_id=game_id,
        player_id=player_id,
        dialogue_id=dialogue_id,
        conversation_id=conversation_id,
        node_id=node_id,
        option_index=option_index,
    )

    next_id = option.next
    if not next_id or next_id not in conversation.nodes:
        return DialogueEnd()
    return _present(dialogue_id, conversation_id, next_id, conversation.nodes[next_id])


__all__ = [
    "DialogueSource",
    "DialogueNode",
    "DialogueEnd",
    "start_dialogue",
    "choose_dialogue_option",
]
