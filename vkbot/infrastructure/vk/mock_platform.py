from __future__ import annotations

import logging

from vkbot.application.ports.message_platform import MessagePlatformPort
from vkbot.application.ports.user_directory import UserDirectoryPort
from vkbot.domain.entities.vk_user import VkUser


class MockVkPlatform(MessagePlatformPort, UserDirectoryPort):
    """Logs outgoing messages and keeps them in `sent` for local runs."""

    def __init__(self) -> None:
        self.sent: list[tuple[int, str, str | None]] = []
        self._logger = logging.getLogger(__name__)

    def send_message(self, peer_id: int, text: str, keyboard: str | None = None) -> bool:
        self.sent.append((peer_id, text, keyboard))
        self._logger.info("Mock send to VK", extra={"peer_id": peer_id})
        return True

    def get_user_info(self, user_id: int) -> VkUser:
        return VkUser.fallback(user_id)
