from __future__ import annotations

from vkbot.application.ports.conversation_store import ConversationStorePort
from vkbot.domain.entities.conversation_state import ConversationState


class MemoryConversationStore(ConversationStorePort):
    def __init__(self) -> None:
        self._states: dict[int, ConversationState] = {}

    def get_state(self, user_id: int) -> ConversationState:
        return self._states.get(user_id, ConversationState())

    def set_state(self, user_id: int, state: ConversationState) -> None:
        self._states[user_id] = state

    def clear(self, user_id: int) -> None:
        self._states.pop(user_id, None)
