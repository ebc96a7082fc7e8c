from __future__ import annotations

import logging
import random
from typing import Any

from vkbot.application.ports.park_data import ParkDataPort
from vkbot.domain.entities.park import ParkLoad

SESSION_TIMES = ("10:00", "12:00", "14:00", "16:00", "18:00", "20:00")

TARIFFS: tuple[dict[str, Any], ...] = (
    {"Name": "Билет взрослый весь день", "Price": 1800},
    {"Name": "Билет взрослый 3 часа", "Price": 1200},
    {"Name": "Вип билет взрослый", "Price": 2500},
    {"Name": "Билет детский весь день", "Price": 1100},
    {"Name": "Билет детский 3 часа", "Price": 800},
)


class MockParkData(ParkDataPort):
    """Fixed sessions and tariffs with a random load, for dev and local runs."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._logger = logging.getLogger(__name__)

    def fetch_current_load(self) -> ParkLoad:
        load = self._rng.randint(5, 95)
        return ParkLoad(count=load * 12, load_percent=load)

    def fetch_sessions(self, date: str) -> list[dict[str, Any]]:
        self._logger.info("Mock sessions requested", extra={"reason": date})
        return [
            {"sessionTime": time, "availableCount": 40 - index * 7, "totalCount": 50}
            for index, time in enumerate(SESSION_TIMES)
        ]

    def fetch_tariffs(self, date: str) -> list[dict[str, Any]]:
        return [dict(tariff) for tariff in TARIFFS]
