from abc import ABC, abstractmethod


class MessagePlatformPort(ABC):
    @abstractmethod
    def send_message(self, peer_id: int, text: str, keyboard: str | None = None) -> bool:
        raise NotImplementedError
