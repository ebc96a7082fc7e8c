from abc import ABC, abstractmethod

from vkbot.domain.entities.conversation_state import ConversationState


class ConversationStorePort(ABC):
    @abstractmethod
    def get_state(self, user_id: int) -> ConversationState:
        """Return the stored conversation, or a default (idle, empty selection) one."""
        raise NotImplementedError

    @abstractmethod
    def set_state(self, user_id: int, state: ConversationState) -> None:
        raise NotImplementedError

    @abstractmethod
    def clear(self, user_id: int) -> None:
        """Drop everything stored for the user."""
        raise NotImplementedError
