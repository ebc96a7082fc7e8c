from abc import ABC, abstractmethod

from vkbot.domain.entities.vk_user import VkUser


class UserDirectoryPort(ABC):
    @abstractmethod
    def get_user_info(self, user_id: int) -> VkUser:
        """Never raises; returns VkUser.fallback(user_id) when the lookup fails."""
        raise NotImplementedError
