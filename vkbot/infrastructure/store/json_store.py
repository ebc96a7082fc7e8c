from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

from vkbot.application.ports.conversation_store import ConversationStorePort
from vkbot.domain.entities.conversation_state import ConversationState, DialogState
from vkbot.domain.entities.ticket_selection import TicketSelection


class JsonConversationStore(ConversationStorePort):
    """One JSON file per user under data_dir; survives bot restarts in dev."""

    def __init__(self, data_dir: str = "./data/conversations") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[int, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict
        self._logger = logging.getLogger(__name__)

    def _get_lock(self, user_id: int) -> threading.Lock:
        with self._lock_lock:
            if user_id not in self._locks:
                self._locks[user_id] = threading.Lock()
            return self._locks[user_id]

    def _get_file_path(self, user_id: int) -> Path:
        return self._data_dir / f"{user_id}.json"

    def get_state(self, user_id: int) -> ConversationState:
        with self._get_lock(user_id):
            file_path = self._get_file_path(user_id)
            if not file_path.exists():
                return ConversationState()
            try:
                with open(file_path, "r", encoding="utf-8") as f:
                    data = json.load(f)
                return self._deserialize_state(data.get("state") or {})
            except (json.JSONDecodeError, OSError, ValueError) as e:
                # Corrupted file: the user starts over.
                self._logger.warning(
                    "Unreadable conversation file, using defaults",
                    extra={"user_id": user_id, "error": str(e)},
                )
                return ConversationState()

    def set_state(self, user_id: int, state: ConversationState) -> None:
        with self._get_lock(user_id):
            self._save(user_id, {"user_id": user_id, "state": self._serialize_state(state), "version": 1})

    def clear(self, user_id: int) -> None:
        with self._get_lock(user_id):
            self._get_file_path(user_id).unlink(missing_ok=True)

    def _save(self, user_id: int, data: dict[str, Any]) -> None:
        """Write to a temp file and rename so readers never see a partial file."""
        file_path = self._get_file_path(user_id)
        temp_path = file_path.with_suffix(".json.tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_path.replace(file_path)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise

    def _serialize_state(self, state: ConversationState) -> dict[str, Any]:
        return {
            "dialog_state": state.dialog_state.value,
            "updated_at": state.updated_at,
            "selection": {
                "selected_date": state.selection.selected_date,
                "selected_session": state.selection.selected_session,
                "selected_category": state.selection.selected_category,
            },
        }

    def _deserialize_state(self, data: dict[str, Any]) -> ConversationState:
        selection = data.get("selection") or {}
        return ConversationState(
            dialog_state=DialogState(data.get("dialog_state", DialogState.IDLE.value)),
            selection=TicketSelection(
                selected_date=selection.get("selected_date"),
                selected_session=selection.get("selected_session"),
                selected_category=selection.get("selected_category"),
            ),
            updated_at=data.get("updated_at"),
        )
