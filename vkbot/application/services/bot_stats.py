from __future__ import annotations

import re
import threading
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from vkbot.domain.entities.bot_stats import BotStats, UserActivity

HOUR_SECONDS = 3600
BUTTON_COMMAND = "кнопка"

_NON_WORD_RE = re.compile(r"[^\w\s/]+", re.UNICODE)


def normalize_command(text: str) -> str:
    """'📅 Билеты' -> 'билеты'; pure emoji buttons collapse to a single bucket."""
    cleaned = _NON_WORD_RE.sub(" ", (text or "").lower())
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned or BUTTON_COMMAND


@dataclass
class _UserStat:
    messages_count: int
    last_activity: float
    is_online: bool


class BotStatsService:
    """In-process counters for the stats endpoint. Reset on restart."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._users: dict[int, _UserStat] = {}
        self._commands: dict[str, int] = {}
        self._message_times: deque[float] = deque()
        self._total_messages = 0
        self._total_commands = 0
        self._started_at = clock()

    def register_message(self, user_id: int) -> None:
        now = self._clock()
        with self._lock:
            self._total_messages += 1
            self._message_times.append(now)
            self._prune(now)
            stat = self._users.get(user_id)
            if stat is None:
                self._users[user_id] = _UserStat(messages_count=1, last_activity=now, is_online=True)
            else:
                stat.messages_count += 1
                stat.last_activity = now
                stat.is_online = True

    def register_command(self, text: str) -> None:
        command = normalize_command(text)
        with self._lock:
            self._total_commands += 1
            self._commands[command] = self._commands.get(command, 0) + 1

    def update_activity(self, user_id: int, is_online: bool) -> None:
        with self._lock:
            stat = self._users.get(user_id)
            if stat is None:
                self._users[user_id] = _UserStat(
                    messages_count=0, last_activity=self._clock(), is_online=is_online
                )
            else:
                stat.is_online = is_online

    def get_user_activity(self, user_id: int) -> UserActivity | None:
        with self._lock:
            stat = self._users.get(user_id)
            if stat is None:
                return None
            return UserActivity(
                user_id=user_id,
                messages_count=stat.messages_count,
                last_activity=stat.last_activity,
                is_online=stat.is_online,
            )

    def get_stats(self) -> BotStats:
        now = self._clock()
        today = datetime.fromtimestamp(now).date()
        with self._lock:
            self._prune(now)
            return BotStats(
                total_users=len(self._users),
                active_users_today=sum(
                    1 for stat in self._users.values()
                    if datetime.fromtimestamp(stat.last_activity).date() == today
                ),
                online_users=sum(1 for stat in self._users.values() if stat.is_online),
                messages_last_hour=len(self._message_times),
                total_messages=self._total_messages,
                total_commands=self._total_commands,
                started_at=self._started_at,
            )

    def get_command_stats(self) -> dict[str, int]:
        with self._lock:
            return dict(sorted(self._commands.items(), key=lambda item: item[1], reverse=True))

    def _prune(self, now: float) -> None:
        while self._message_times and now - self._message_times[0] > HOUR_SECONDS:
            self._message_times.popleft()
