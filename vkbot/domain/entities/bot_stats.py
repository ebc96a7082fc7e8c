from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UserActivity:
    user_id: int
    messages_count: int
    last_activity: float
    is_online: bool


@dataclass(frozen=True)
class BotStats:
    total_users: int
    active_users_today: int
    online_users: int
    messages_last_hour: int
    total_messages: int
    total_commands: int
    started_at: float
