from __future__ import annotations

import logging

from vk_api.exceptions import VkApiError

from vkbot.application.ports.message_platform import MessagePlatformPort
from vkbot.application.ports.user_directory import UserDirectoryPort
from vkbot.domain.entities.vk_user import VkUser
from vkbot.infrastructure.vk.vk_client import VkClient


class VkPlatform(MessagePlatformPort, UserDirectoryPort):
    def __init__(self, client: VkClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    def send_message(self, peer_id: int, text: str, keyboard: str | None = None) -> bool:
        try:
            self._client.send_message(peer_id, text, keyboard)
        except (VkApiError, OSError) as e:
            self._logger.error("VK send failed", extra={"peer_id": peer_id, "error": str(e)})
            return False
        return True

    def get_user_info(self, user_id: int) -> VkUser:
        try:
            raw = self._client.get_user(user_id)
        except (VkApiError, OSError) as e:
            self._logger.warning("VK users.get failed", extra={"user_id": user_id, "error": str(e)})
            return VkUser.fallback(user_id)
        if not raw.get("first_name"):
            return VkUser.fallback(user_id)
        return VkUser(
            id=user_id,
            first_name=raw["first_name"],
            last_name=raw.get("last_name") or "",
            username=raw.get("screen_name") or f"id{user_id}",
        )
