"""
Tests for durable conversation state persistence.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

from vkbot.application.services.conversation_state import ConversationStateService
from vkbot.domain.entities.conversation_state import ConversationState, DialogState
from vkbot.domain.entities.ticket_selection import TicketSelection
from vkbot.infrastructure.store.json_store import JsonConversationStore


def test_json_store_persistence():
    """State and selection survive a round trip through the file."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        state = ConversationState(
            dialog_state=DialogState.WAITING_FOR_CATEGORY,
            selection=TicketSelection(selected_date="20.10.2026", selected_session="10:00"),
            updated_at=1760000000.0,
        )

        store.set_state(42, state)

        assert store.get_state(42) == state


def test_state_survives_restart():
    """A new store over the same directory sees the user mid-purchase."""
    with tempfile.TemporaryDirectory() as tmpdir:
        first = ConversationStateService(JsonConversationStore(data_dir=tmpdir))
        first.transition(7, DialogState.WAITING_FOR_SESSION, selected_date="21.10.2026")

        second = ConversationStateService(JsonConversationStore(data_dir=tmpdir))

        assert second.get_state(7) is DialogState.WAITING_FOR_SESSION
        assert second.get_data(7, "selected_date") == "21.10.2026"


def test_file_layout_is_readable_json():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        store.set_state(3, ConversationState(dialog_state=DialogState.WAITING_FOR_DATE))

        data = json.loads((Path(tmpdir) / "3.json").read_text(encoding="utf-8"))

        assert data["user_id"] == 3
        assert data["version"] == 1
        assert data["state"]["dialog_state"] == "waiting_for_date"
        assert not list(Path(tmpdir).glob("*.tmp"))


def test_corrupted_file_falls_back_to_idle():
    with tempfile.TemporaryDirectory() as tmpdir:
        (Path(tmpdir) / "9.json").write_text("{not json", encoding="utf-8")
        store = JsonConversationStore(data_dir=tmpdir)

        assert store.get_state(9) == ConversationState()


def test_unknown_dialog_state_falls_back_to_idle():
    with tempfile.TemporaryDirectory() as tmpdir:
        payload = {"user_id": 9, "state": {"dialog_state": "waiting_for_refund"}, "version": 1}
        (Path(tmpdir) / "9.json").write_text(json.dumps(payload), encoding="utf-8")
        store = JsonConversationStore(data_dir=tmpdir)

        assert store.get_state(9).dialog_state is DialogState.IDLE


def test_clear_removes_the_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JsonConversationStore(data_dir=tmpdir)
        store.set_state(5, ConversationState(dialog_state=DialogState.WAITING_FOR_DATE))

        store.clear(5)
        store.clear(5)

        assert not (Path(tmpdir) / "5.json").exists()
        assert store.get_state(5) == ConversationState()
