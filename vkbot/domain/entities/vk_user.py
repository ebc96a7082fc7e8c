from dataclasses import dataclass


@dataclass(frozen=True)
class VkUser:
    id: int
    first_name: str
    last_name: str = ""
    username: str = ""

    @staticmethod
    def fallback(user_id: int) -> "VkUser":
        return VkUser(id=user_id, first_name="Пользователь", last_name="", username=f"id{user_id}")
