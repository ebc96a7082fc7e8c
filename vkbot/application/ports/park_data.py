from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from vkbot.domain.entities.park import ParkLoad


class ParkDataPort(ABC):
    @abstractmethod
    def fetch_current_load(self) -> ParkLoad:
        """Current visitor count and load percent. Raises ParkApiError / ParkApiContractError."""
        raise NotImplementedError

    @abstractmethod
    def fetch_sessions(self, date: str) -> list[dict[str, Any]]:
        """
        Raw session objects for a dd.MM.yyyy date.

        Field naming is not stable upstream (sessionTime / SessionTime / time ...);
        normalization happens in the application layer.
        """
        raise NotImplementedError

    @abstractmethod
    def fetch_tariffs(self, date: str) -> list[dict[str, Any]]:
        """Raw rate entries (Name/name, Price/price) for a dd.MM.yyyy date."""
        raise NotImplementedError
