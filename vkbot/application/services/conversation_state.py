from __future__ import annotations

import time
from dataclasses import replace

from vkbot.application.ports.conversation_store import ConversationStorePort
from vkbot.domain.entities.conversation_state import ConversationState, DialogState
from vkbot.domain.entities.ticket_selection import SELECTION_KEYS, TicketSelection


class ConversationStateService:
    """
    Per-user dialog state and ticket selection.

    The dialog engine reads through this service on every message and never
    keeps a copy between calls. Unseen users are idle with an empty selection.
    """

    def __init__(self, store: ConversationStorePort) -> None:
        self._store = store

    def get(self, user_id: int) -> ConversationState:
        return self._store.get_state(user_id)

    def get_state(self, user_id: int) -> DialogState:
        return self._store.get_state(user_id).dialog_state

    def set_state(self, user_id: int, dialog_state: DialogState) -> None:
        current = self._store.get_state(user_id)
        self._store.set_state(
            user_id, replace(current, dialog_state=dialog_state, updated_at=time.time())
        )

    def get_data(self, user_id: int, key: str) -> str | None:
        """None when the key is unset or not a selection field."""
        if key not in SELECTION_KEYS:
            return None
        return getattr(self._store.get_state(user_id).selection, key)

    def set_data(self, user_id: int, key: str, value: str) -> None:
        _check_key(key)
        current = self._store.get_state(user_id)
        selection = replace(current.selection, **{key: value})
        self._store.set_state(user_id, replace(current, selection=selection, updated_at=time.time()))

    def get_selection(self, user_id: int) -> TicketSelection:
        """Selection fields valid for the user's current dialog state."""
        return self._store.get_state(user_id).scoped_selection()

    def transition(self, user_id: int, dialog_state: DialogState, **selection_updates: str) -> ConversationState:
        """
        Move to dialog_state, applying selection_updates first.
        Fields that carry no meaning in the new state are dropped.
        """
        current = self._store.get_state(user_id)
        for key in selection_updates:
            _check_key(key)
        moved = ConversationState(
            dialog_state=dialog_state,
            selection=replace(current.selection, **selection_updates),
            updated_at=time.time(),
        )
        new_state = replace(moved, selection=moved.scoped_selection())
        self._store.set_state(user_id, new_state)
        return new_state

    def clear_user_data(self, user_id: int) -> None:
        self._store.clear(user_id)


def _check_key(key: str) -> None:
    if key not in SELECTION_KEYS:
        raise KeyError(f"Unknown selection key: {key}")
