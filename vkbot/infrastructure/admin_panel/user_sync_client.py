from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

import httpx

from vkbot.application.exceptions import UserSyncError
from vkbot.application.ports.user_sync import UserSyncPort
from vkbot.core.config import settings

STATS_DISABLED_TEXT = "📊 Статистика недоступна\nАдмин-панель не настроена"
SEARCH_DISABLED_TEXT = "🔍 Поиск недоступен\nАдмин-панель не настроена"
MANAGE_DISABLED_TEXT = "Админ-панель не настроена"


class AdminPanelUserSync(UserSyncPort):
    """
    User registry in the admin panel.

    With no base url configured every call is a no-op: sync calls report
    success and admin calls explain that the panel is not set up.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url if base_url is not None else settings.ADMIN_PANEL_BASE_URL).rstrip("/")
        self._client = client or httpx.Client(timeout=timeout or settings.ADMIN_PANEL_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return bool(self._base_url)

    def sync_user(
        self,
        vk_user_id: int,
        first_name: str,
        last_name: str,
        username: str,
        is_online: bool = True,
    ) -> bool:
        if not self.enabled:
            return True
        payload = {
            "vkUserId": vk_user_id,
            "firstName": first_name,
            "lastName": last_name,
            "username": username or "",
            "isActive": True,
            "isOnline": is_online,
            "lastActivity": _utc_now(),
        }
        try:
            response = self._send("POST", "/api/users", json=payload)
        except UserSyncError as e:
            self._logger.warning("User sync failed", extra={"user_id": vk_user_id, "error": str(e)})
            return False
        if response.is_success:
            self._logger.info("User synced", extra={"user_id": vk_user_id})
            return True
        # Existing users are rejected by the create call; refresh activity instead.
        self._logger.warning(
            "User sync rejected", extra={"user_id": vk_user_id, "error": f"status={response.status_code}"}
        )
        return self.update_activity(vk_user_id, is_online)

    def update_activity(self, vk_user_id: int, is_online: bool) -> bool:
        if not self.enabled:
            return True
        try:
            response = self._send(
                "PATCH",
                f"/api/users/vk/{vk_user_id}/activity",
                json={"isOnline": is_online, "lastActivity": _utc_now()},
            )
        except UserSyncError as e:
            self._logger.warning("Activity update failed", extra={"user_id": vk_user_id, "error": str(e)})
            return False
        return response.is_success

    def increment_message_count(self, vk_user_id: int) -> bool:
        if not self.enabled:
            return True
        try:
            response = self._send("POST", f"/api/users/vk/{vk_user_id}/message", json={})
        except UserSyncError as e:
            self._logger.warning("Message count update failed", extra={"user_id": vk_user_id, "error": str(e)})
            return False
        if not response.is_success:
            self._logger.warning(
                "Message count update rejected",
                extra={"user_id": vk_user_id, "error": f"status={response.status_code}"},
            )
        return response.is_success

    def get_stats(self) -> str:
        if not self.enabled:
            return STATS_DISABLED_TEXT
        try:
            data = self._get_data("/api/users/stats")
        except UserSyncError as e:
            self._logger.warning("Stats request failed", extra={"error": str(e)})
            return "Ошибка при получении статистики"
        if not isinstance(data, dict):
            return "Не удалось получить статистику"
        return (
            "📊 Статистика пользователей:\n"
            f"👥 Всего пользователей: {data.get('totalUsers', 0)}\n"
            f"🟢 Активных: {data.get('activeUsers', 0)}\n"
            f"🟡 Онлайн сейчас: {data.get('onlineUsers', 0)}\n"
            f"📅 Новых сегодня: {data.get('newToday', 0)}"
        )

    def search_users(self, query: str, limit: int = 5) -> str:
        if not self.enabled:
            return SEARCH_DISABLED_TEXT
        try:
            data = self._get_data("/api/users/search", params={"query": query, "limit": limit})
        except UserSyncError as e:
            self._logger.warning("User search failed", extra={"error": str(e)})
            return "Ошибка при поиске пользователей"
        if not isinstance(data, list):
            return "Ошибка поиска пользователей"
        data = [user for user in data if isinstance(user, dict)]
        if not data:
            return "Пользователи не найдены"

        lines = ["🔍 Найденные пользователи:", ""]
        for user in data[:limit]:
            lines.append(f"👤 {user.get('firstName', '')} {user.get('lastName', '')}".rstrip())
            if user.get("username"):
                lines.append(f"   @{user['username']}")
            lines.append(f"   VK ID: {user.get('vkUserId')}")
            lines.append(f"   Сообщений: {user.get('messageCount', 0)}")
            lines.append(f"   Статус: {_status_label(user)}")
            lines.append("")
        return "\n".join(lines).rstrip()

    def manage_user(self, vk_user_id: int, ban: bool, reason: str = "") -> str:
        if not self.enabled:
            return MANAGE_DISABLED_TEXT
        try:
            response = self._send("GET", f"/api/users/vk/{vk_user_id}")
            if not response.is_success:
                return f"Пользователь с VK ID {vk_user_id} не найден"
            body = _json(response)
            if not body.get("success"):
                return "Пользователь не найден"
            user = body.get("data") or {}
            name = f"{user.get('firstName', '')} {user.get('lastName', '')}".strip()

            update = self._send(
                "PATCH",
                f"/api/users/{user.get('id')}/status",
                json={"isActive": not ban, "isBanned": ban},
            )
        except UserSyncError as e:
            self._logger.warning("User status update failed", extra={"user_id": vk_user_id, "error": str(e)})
            return "Ошибка выполнения команды"

        if not update.is_success:
            return "Ошибка обновления статуса пользователя"
        if not ban:
            return f"✅ Пользователь {name} разблокирован"
        suffix = f". Причина: {reason}" if reason else ""
        return f"✅ Пользователь {name} заблокирован{suffix}"

    def _get_data(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = self._send("GET", path, params=params)
        if not response.is_success:
            raise UserSyncError(f"{path} returned {response.status_code}")
        body = _json(response)
        if not body.get("success"):
            return None
        return body.get("data")

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, f"{self._base_url}{path}", **kwargs)
        except httpx.HTTPError as e:
            raise UserSyncError(f"{method} {path} failed: {e}") from e


def _json(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError as e:
        raise UserSyncError("Admin panel returned invalid JSON") from e
    if not isinstance(body, dict):
        raise UserSyncError("Admin panel returned an unexpected payload")
    return body


def _status_label(user: dict[str, Any]) -> str:
    if user.get("isOnline"):
        return "🟢 Онлайн"
    if user.get("isActive"):
        return "🟢 Активен"
    return "⚪ Неактивен"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()
