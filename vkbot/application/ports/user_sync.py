from abc import ABC, abstractmethod


class UserSyncPort(ABC):
    """
    Admin panel user registry.

    All methods are best-effort: failures are logged by the adapter and reported
    as False (sync calls) or as a human-readable text (admin calls), never raised.
    """

    @abstractmethod
    def sync_user(
        self,
        vk_user_id: int,
        first_name: str,
        last_name: str,
        username: str,
        is_online: bool = True,
    ) -> bool:
        raise NotImplementedError

    @abstractmethod
    def update_activity(self, vk_user_id: int, is_online: bool) -> bool:
        raise NotImplementedError

    @abstractmethod
    def increment_message_count(self, vk_user_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_stats(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def search_users(self, query: str, limit: int = 5) -> str:
        raise NotImplementedError

    @abstractmethod
    def manage_user(self, vk_user_id: int, ban: bool, reason: str = "") -> str:
        raise NotImplementedError
