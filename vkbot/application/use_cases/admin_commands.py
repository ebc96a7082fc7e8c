from __future__ import annotations

import logging

from vkbot.application.ports.user_sync import UserSyncPort
from vkbot.domain.entities.admin_command import AdminAction, AdminCommand

SEARCH_LIMIT = 5

USAGE_TEXT = (
    "🛠 Команды администратора:\n"
    "/stats - статистика пользователей\n"
    "/search <запрос> - поиск пользователей\n"
    "/ban <id> [причина] - заблокировать пользователя\n"
    "/unban <id> - разблокировать пользователя"
)


class AdminCommandsUseCase:
    """Runs parsed admin commands against the admin panel and returns the reply text."""

    def __init__(self, user_sync: UserSyncPort) -> None:
        self._user_sync = user_sync
        self._logger = logging.getLogger(__name__)

    def execute(self, command: AdminCommand) -> str:
        self._logger.info("Admin command", extra={"command": command.action.value})
        if command.action is AdminAction.STATS:
            return self._user_sync.get_stats()
        if command.action is AdminAction.SEARCH and command.query:
            return self._user_sync.search_users(command.query, limit=SEARCH_LIMIT)
        if command.action is AdminAction.BAN and command.vk_user_id is not None:
            return self._user_sync.manage_user(command.vk_user_id, ban=True, reason=command.reason)
        if command.action is AdminAction.UNBAN and command.vk_user_id is not None:
            return self._user_sync.manage_user(command.vk_user_id, ban=False)
        return USAGE_TEXT
