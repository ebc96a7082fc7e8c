from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from vkbot.application.ports.command_catalog import CommandCatalogPort
from vkbot.domain.entities.command import Command
from vkbot.infrastructure.db.models import BotCommand


class SqlCommandRepository(CommandCatalogPort):
    """
    Admin-managed commands in the bot_commands table.

    A command matches when its name or any of its triggers occurs in the
    message text (case-insensitive). The first active match by id wins.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory
        self._logger = logging.getLogger(__name__)

    def find_command(self, text: str) -> Command | None:
        lowered = (text or "").strip().lower()
        if not lowered:
            return None
        with self._session_factory() as session:
            rows = session.scalars(
                select(BotCommand).where(BotCommand.is_active.is_(True)).order_by(BotCommand.id)
            ).all()
            for row in rows:
                if _matches(row, lowered):
                    return _to_entity(row)
        return None

    def add_command(
        self,
        name: str,
        response: str,
        triggers: tuple[str, ...] = (),
        keyboard_json: str | None = None,
        command_type: str = "text",
        is_active: bool = True,
    ) -> Command:
        with self._session_factory() as session:
            row = BotCommand(
                name=name,
                response=response,
                triggers=",".join(trigger.strip() for trigger in triggers if trigger.strip()),
                keyboard_json=keyboard_json,
                command_type=command_type,
                is_active=is_active,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            self._logger.info("Command added", extra={"command": name})
            return _to_entity(row)


def _matches(row: BotCommand, lowered_text: str) -> bool:
    candidates = [row.name, *row.trigger_list()]
    return any(candidate.lower() in lowered_text for candidate in candidates if candidate)


def _to_entity(row: BotCommand) -> Command:
    return Command(
        id=row.id,
        name=row.name,
        response=row.response,
        triggers=tuple(row.trigger_list()),
        keyboard_payload=row.keyboard_json or None,
        command_type=row.command_type,
    )
