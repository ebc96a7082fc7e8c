"""
Shared fakes for dialog engine tests. No network, no VK.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pytest

from vkbot.application.ports.command_catalog import CommandCatalogPort
from vkbot.application.ports.message_platform import MessagePlatformPort
from vkbot.application.ports.park_data import ParkDataPort
from vkbot.application.ports.user_sync import UserSyncPort
from vkbot.application.services.conversation_state import ConversationStateService
from vkbot.application.use_cases.admin_commands import AdminCommandsUseCase
from vkbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from vkbot.application.use_cases.send_reply import SendReplyUseCase
from vkbot.application.utils.keyboards import KeyboardProvider
from vkbot.domain.entities.command import Command
from vkbot.domain.entities.park import ParkLoad
from vkbot.infrastructure.store.memory_store import MemoryConversationStore

TODAY = date(2026, 10, 19)
TICKETS_URL = "https://example.test/tickets"


class RecordingPlatform(MessagePlatformPort):
    def __init__(self) -> None:
        self.sent: list[tuple[int, str, str | None]] = []

    def send_message(self, peer_id: int, text: str, keyboard: str | None = None) -> bool:
        self.sent.append((peer_id, text, keyboard))
        return True

    @property
    def last_text(self) -> str:
        return self.sent[-1][1]

    @property
    def last_labels(self) -> list[str]:
        return keyboard_labels(self.sent[-1][2])


class FakePark(ParkDataPort):
    def __init__(self) -> None:
        self.load = ParkLoad(count=120, load_percent=25)
        self.sessions: list[dict[str, Any]] = [
            {"sessionTime": "10:00", "availableCount": 30, "totalCount": 50},
            {"sessionTime": "12:00", "availableCount": 5, "totalCount": 50},
        ]
        self.tariffs: list[dict[str, Any]] = [
            {"Name": "Взрослый билет", "Price": 1500},
            {"Name": "взрослый билет", "Price": 1500},
            {"Name": "Детский", "Price": 500},
        ]
        self.fail_load = False
        self.fail_sessions = False
        self.fail_tariffs = False
        self.session_requests: list[str] = []

    def fetch_current_load(self) -> ParkLoad:
        if self.fail_load:
            raise RuntimeError("load gateway down")
        return self.load

    def fetch_sessions(self, date: str) -> list[dict[str, Any]]:
        self.session_requests.append(date)
        if self.fail_sessions:
            raise RuntimeError("sessions gateway down")
        return self.sessions

    def fetch_tariffs(self, date: str) -> list[dict[str, Any]]:
        if self.fail_tariffs:
            raise RuntimeError("tariffs gateway down")
        return self.tariffs


class FakeCommands(CommandCatalogPort):
    def __init__(self, commands: list[Command] | None = None, fail: bool = False) -> None:
        self._commands = commands or []
        self._fail = fail

    def find_command(self, text: str) -> Command | None:
        if self._fail:
            raise RuntimeError("database is locked")
        lowered = text.lower()
        for command in self._commands:
            if command.name.lower() in lowered or any(t.lower() in lowered for t in command.triggers):
                return command
        return None


@dataclass
class FakeUserSync(UserSyncPort):
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    sync_ok: bool = True

    def sync_user(self, vk_user_id, first_name, last_name, username, is_online=True) -> bool:
        self.calls.append(("sync_user", vk_user_id, first_name, username, is_online))
        return self.sync_ok

    def update_activity(self, vk_user_id, is_online) -> bool:
        self.calls.append(("update_activity", vk_user_id, is_online))
        return True

    def increment_message_count(self, vk_user_id) -> bool:
        self.calls.append(("increment_message_count", vk_user_id))
        return True

    def get_stats(self) -> str:
        self.calls.append(("get_stats",))
        return "📊 stats"

    def search_users(self, query, limit=5) -> str:
        self.calls.append(("search_users", query, limit))
        return f"found {query}"

    def manage_user(self, vk_user_id, ban, reason="") -> str:
        self.calls.append(("manage_user", vk_user_id, ban, reason))
        return f"managed {vk_user_id}"


def keyboard_labels(keyboard: str | None) -> list[str]:
    if not keyboard:
        return []
    rows = json.loads(keyboard)["buttons"]
    return [button["action"]["label"] for row in rows for button in row]


@dataclass
class Bot:
    engine: HandleIncomingMessageUseCase
    state: ConversationStateService
    keyboards: KeyboardProvider
    platform: RecordingPlatform
    park: FakePark
    user_sync: FakeUserSync

    def say(self, text: str, user_id: int = 1) -> str:
        self.engine.process(user_id, user_id, text)
        return self.platform.last_text


def build_bot(
    commands: CommandCatalogPort | None = None,
    admin_user_ids: tuple[int, ...] = (),
) -> Bot:
    state = ConversationStateService(MemoryConversationStore())
    keyboards = KeyboardProvider(today=lambda: TODAY)
    platform = RecordingPlatform()
    park = FakePark()
    user_sync = FakeUserSync()
    engine = HandleIncomingMessageUseCase(
        state=state,
        keyboards=keyboards,
        send_reply=SendReplyUseCase(platform=platform),
        park=park,
        commands=commands or FakeCommands(),
        admin_commands=AdminCommandsUseCase(user_sync=user_sync),
        tickets_url=TICKETS_URL,
        admin_user_ids=admin_user_ids,
    )
    return Bot(
        engine=engine,
        state=state,
        keyboards=keyboards,
        platform=platform,
        park=park,
        user_sync=user_sync,
    )


@pytest.fixture
def bot() -> Bot:
    return build_bot()
