from __future__ import annotations

import logging
from typing import Any

import vk_api
from vk_api.utils import get_random_id


class VkClient:
    """Thin wrapper over the VK community API session."""

    def __init__(self, token: str, api_version: str) -> None:
        self._session = vk_api.VkApi(token=token, api_version=api_version)
        self._api = self._session.get_api()
        self._logger = logging.getLogger(__name__)

    def send_message(self, peer_id: int, text: str, keyboard: str | None = None) -> int:
        params: dict[str, Any] = {
            "peer_id": peer_id,
            "message": text,
            "random_id": get_random_id(),
        }
        if keyboard:
            params["keyboard"] = keyboard
        message_id = self._api.messages.send(**params)
        self._logger.info("VK message sent", extra={"peer_id": peer_id})
        return message_id

    def get_user(self, user_id: int) -> dict[str, Any]:
        users = self._api.users.get(user_ids=user_id, fields="screen_name")
        if not users:
            return {}
        return users[0] or {}
