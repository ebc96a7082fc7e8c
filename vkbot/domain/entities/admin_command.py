from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AdminAction(str, Enum):
    STATS = "stats"
    SEARCH = "search"
    BAN = "ban"
    UNBAN = "unban"
    USAGE = "usage"


@dataclass(frozen=True)
class AdminCommand:
    action: AdminAction
    query: str | None = None
    vk_user_id: int | None = None
    reason: str = ""
