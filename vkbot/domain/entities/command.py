from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Command:
    name: str
    response: str
    triggers: tuple[str, ...] = ()
    keyboard_payload: str | None = None
    command_type: str = "text"
    id: int | None = None
