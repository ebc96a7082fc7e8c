#!/usr/bin/env python3
"""
Interactive local chat harness (no HTTP, no VK).

Usage:
  python3 scripts/chat_local.py

What it does:
- Keeps a stable user id for the session
- Sends your typed messages through the same HandleIncomingMessageUseCase
- Prints the dialog state, the reply text and the button labels of the keyboard
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from vkbot.application.services.conversation_state import ConversationStateService
from vkbot.application.use_cases.admin_commands import AdminCommandsUseCase
from vkbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from vkbot.application.use_cases.send_reply import SendReplyUseCase
from vkbot.application.utils.keyboards import KeyboardProvider
from vkbot.core.config import settings
from vkbot.infrastructure.admin_panel.user_sync_client import AdminPanelUserSync
from vkbot.infrastructure.db.command_repository import SqlCommandRepository
from vkbot.infrastructure.db.session import build_engine, build_session_factory, create_tables
from vkbot.infrastructure.park.mock_park import MockParkData
from vkbot.infrastructure.store.memory_store import MemoryConversationStore
from vkbot.infrastructure.vk.mock_platform import MockVkPlatform


def _print_header(user_id: int) -> None:
    print("\nLocal Chat Harness")
    print("-" * 60)
    print(f"user_id: {user_id}")
    print("Type your message and press Enter.")
    print("Commands: /new (reset dialog), /quit, /help")
    print("-" * 60)


def _button_labels(keyboard: str | None) -> list[list[str]]:
    if not keyboard:
        return []
    rows = json.loads(keyboard).get("buttons", [])
    return [[button["action"].get("label", "") for button in row] for row in rows]


def main() -> None:
    user_id = int(os.getenv("CHAT_USER_ID", "1"))
    platform = MockVkPlatform()
    store = MemoryConversationStore()
    state = ConversationStateService(store)

    engine = build_engine(settings.DATABASE_URL)
    create_tables(engine)

    use_case = HandleIncomingMessageUseCase(
        state=state,
        keyboards=KeyboardProvider(),
        send_reply=SendReplyUseCase(platform=platform),
        park=MockParkData(),
        commands=SqlCommandRepository(build_session_factory(engine)),
        admin_commands=AdminCommandsUseCase(user_sync=AdminPanelUserSync()),
        tickets_url=settings.TICKETS_URL,
    )
    _print_header(user_id)

    while True:
        try:
            user_text = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            return

        if not user_text:
            continue

        cmd = user_text.lower()
        if cmd in ("/quit", "/exit"):
            print("Bye!")
            return
        if cmd == "/help":
            print("Commands:")
            print("  /new  -> forget the dialog state and selection")
            print("  /quit -> exit")
            print("Anything else (including button labels) goes to the bot.")
            continue
        if cmd == "/new":
            state.clear_user_data(user_id)
            print("Dialog reset")
            continue

        sent_before = len(platform.sent)
        use_case.process(user_id, user_id, user_text)

        print(f"\n--- State: {state.get_state(user_id).value} ---")
        for _, text, keyboard in platform.sent[sent_before:]:
            print(text)
            for row in _button_labels(keyboard):
                print("  [" + "] [".join(row) + "]")
        print("-" * 60)


if __name__ == "__main__":
    main()
