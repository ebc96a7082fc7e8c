from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class BotCommand(Base):
    __tablename__ = "bot_commands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    # Comma-separated trigger phrases.
    triggers: Mapped[str] = mapped_column(Text, default="", server_default="", nullable=False)
    response: Mapped[str] = mapped_column(Text, nullable=False)
    keyboard_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    command_type: Mapped[str] = mapped_column(String(32), default="text", server_default="text", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="1", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def trigger_list(self) -> list[str]:
        return [part.strip() for part in (self.triggers or "").split(",") if part.strip()]
