from abc import ABC, abstractmethod

from vkbot.domain.entities.command import Command


class CommandCatalogPort(ABC):
    @abstractmethod
    def find_command(self, text: str) -> Command | None:
        """Resolve free text against the configured command table. None when nothing matches."""
        raise NotImplementedError
