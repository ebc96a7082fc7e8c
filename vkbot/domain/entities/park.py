from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class ParkLoad:
    count: int
    load_percent: int


@dataclass(frozen=True)
class ParkSession:
    time_label: str
    free_count: int
    total_count: int


@dataclass(frozen=True)
class Tariff:
    name: str
    price: Decimal
