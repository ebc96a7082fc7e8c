from __future__ import annotations

import logging
import threading
from typing import Callable

from vkbot.application.ports.user_directory import UserDirectoryPort
from vkbot.application.ports.user_sync import UserSyncPort
from vkbot.application.services.bot_stats import BotStatsService

MESSAGE_ALLOW_COMMAND = "message_allow"


class TrackActivityUseCase:
    """
    Bookkeeping around every inbound event: local counters, admin panel sync
    and the delayed "offline" mark. Never raises to the caller.
    """

    def __init__(
        self,
        stats: BotStatsService,
        directory: UserDirectoryPort,
        user_sync: UserSyncPort,
        schedule_offline: Callable[[int], None] | None = None,
    ) -> None:
        self._stats = stats
        self._directory = directory
        self._user_sync = user_sync
        self._schedule_offline = schedule_offline
        self._synced: set[int] = set()
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def on_message(self, user_id: int, text: str) -> None:
        self._stats.register_command(text)
        self._stats.register_message(user_id)
        try:
            self._sync(user_id)
            self._user_sync.increment_message_count(user_id)
        except Exception as e:
            self._logger.warning("User sync failed", extra={"user_id": user_id, "error": str(e)})
        self._arm_offline(user_id)

    def on_message_allow(self, user_id: int) -> None:
        self._stats.register_command(MESSAGE_ALLOW_COMMAND)
        self._stats.update_activity(user_id, is_online=True)
        self._arm_offline(user_id)

    def mark_offline(self, user_id: int) -> None:
        self._stats.update_activity(user_id, is_online=False)
        if not self._user_sync.update_activity(user_id, is_online=False):
            self._logger.warning("Offline mark not synced", extra={"user_id": user_id})

    def _sync(self, user_id: int) -> None:
        with self._lock:
            known = user_id in self._synced
        if known:
            self._user_sync.update_activity(user_id, is_online=True)
            return
        user = self._directory.get_user_info(user_id)
        if self._user_sync.sync_user(user.id, user.first_name, user.last_name, user.username, is_online=True):
            with self._lock:
                self._synced.add(user_id)

    def _arm_offline(self, user_id: int) -> None:
        if self._schedule_offline is None:
            return
        try:
            self._schedule_offline(user_id)
        except Exception as e:
            self._logger.warning("Offline schedule failed", extra={"user_id": user_id, "error": str(e)})
