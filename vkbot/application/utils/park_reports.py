from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from vkbot.application.exceptions import ParkApiContractError
from vkbot.domain.entities.park import ParkLoad, ParkSession, Tariff
from vkbot.domain.entities.ticket_selection import CATEGORY_ADULT, CATEGORY_CHILD

SESSION_TIME_FIELDS = ("sessionTime", "SessionTime", "time", "Time", "name", "Name", "title", "Title")
SESSION_FREE_FIELDS = (
    "availableCount",
    "AvailableCount",
    "placesFree",
    "PlacesFree",
    "free",
    "Free",
    "available",
    "Available",
)
SESSION_TOTAL_FIELDS = (
    "totalCount",
    "TotalCount",
    "placesTotal",
    "PlacesTotal",
    "total",
    "Total",
    "capacity",
    "Capacity",
)

# Upstream sometimes reports no capacity at all; show the session anyway.
PLACEHOLDER_FREE = 1
PLACEHOLDER_TOTAL = 50

ADULT_MARKERS = ("взрос", "adult")
CHILD_MARKERS = ("детск", "child", "kids")

DEFAULT_TICKET_NAME = "Стандартный"
TICKETS_SITE = "yes35.ru"


def _first_string(raw: dict[str, Any], fields: tuple[str, ...]) -> str | None:
    for field in fields:
        value = raw.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _first_int(raw: dict[str, Any], fields: tuple[str, ...]) -> int:
    for field in fields:
        value = raw.get(field)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return int(value)
    return 0


def parse_session(raw: dict[str, Any]) -> ParkSession | None:
    """Normalize one upstream session object; None when it carries no time label."""
    if not isinstance(raw, dict):
        return None
    label = _first_string(raw, SESSION_TIME_FIELDS)
    if label is None:
        return None
    free = _first_int(raw, SESSION_FREE_FIELDS)
    total = _first_int(raw, SESSION_TOTAL_FIELDS)
    if free == 0 and total == 0:
        free, total = PLACEHOLDER_FREE, PLACEHOLDER_TOTAL
    return ParkSession(time_label=label, free_count=free, total_count=total)


def availability_label(free_count: int) -> str:
    if free_count <= 0:
        return "🔴 Нет мест"
    if free_count < 10:
        return "🔴 Мало мест"
    if free_count < 20:
        return "🟡 Средняя загрузка"
    return "🟢 Есть места"


def format_sessions(date: str, raw_sessions: list[dict[str, Any]]) -> tuple[str, list[str]]:
    """
    Session list text for a date plus the time labels to put on buttons.
    An empty label list means there is nothing the user can pick.
    """
    sessions = [session for session in (parse_session(raw) for raw in raw_sessions) if session]
    if not sessions:
        return no_sessions_text(date), []

    lines = [f"🎟 Доступные сеансы на {date}:", ""]
    for session in sessions:
        lines.append(f"⏰ *{session.time_label}*")
        lines.append(f"   Свободно: {session.free_count}/{session.total_count} мест")
        lines.append(f"   {availability_label(session.free_count)}")
        lines.append("")
    return "\n".join(lines).rstrip(), [session.time_label for session in sessions]


def no_sessions_text(date: str) -> str:
    return f"😔 На {date} нет доступных сеансов или все заняты."


def parse_tariff(raw: dict[str, Any]) -> Tariff:
    if not isinstance(raw, dict):
        raise ParkApiContractError(f"Tariff entry is not an object: {raw!r}")
    name = raw.get("Name") or raw.get("name") or ""
    price = _to_decimal(raw.get("Price"))
    if not price:
        price = _to_decimal(raw.get("price"))
    return Tariff(name=str(name), price=price)


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        price = Decimal(str(value))
    except InvalidOperation as exc:
        raise ParkApiContractError(f"Tariff price is not a number: {value!r}") from exc
    if not price.is_finite():
        raise ParkApiContractError(f"Tariff price is not finite: {value!r}")
    return price


def _category_of(name: str) -> str | None:
    lowered = name.lower()
    is_adult = any(marker in lowered for marker in ADULT_MARKERS)
    is_child = any(marker in lowered for marker in CHILD_MARKERS)
    if is_adult == is_child:
        return None
    return CATEGORY_ADULT if is_adult else CATEGORY_CHILD


def filter_tariffs(tariffs: list[Tariff], category: str) -> list[Tariff]:
    """
    Tariffs of one category, deduplicated and sorted by price (highest first).

    Entries naming both categories or neither are dropped. Entries that render
    to the same display name keep the first occurrence.
    """
    seen: set[tuple[str, Decimal]] = set()
    matching: list[Tariff] = []
    for tariff in tariffs:
        key = (tariff.name.lower(), tariff.price)
        if key in seen:
            continue
        seen.add(key)
        if _category_of(tariff.name) == category:
            matching.append(tariff)

    by_display_name: dict[str, Tariff] = {}
    for tariff in matching:
        by_display_name.setdefault(format_ticket_name(tariff.name), tariff)
    return sorted(by_display_name.values(), key=lambda tariff: tariff.price, reverse=True)


def format_ticket_name(name: str) -> str:
    if not name:
        return DEFAULT_TICKET_NAME
    formatted = (
        name.replace("Билет", "")
        .replace("билет", "")
        .replace("Вип", "VIP")
        .replace("вип", "VIP")
        .replace("весь день", "Весь день")
        .replace("взрослый", "")
        .replace("детский", "")
    )
    formatted = re.sub(r"\s+", " ", formatted).strip()
    if formatted.startswith("VIP"):
        formatted = ("VIP " + formatted[3:].strip()).strip()
    return formatted or DEFAULT_TICKET_NAME


def format_price(price: Decimal) -> str:
    if price == price.to_integral_value():
        return str(price.quantize(Decimal(1)))
    return str(price)


def price_emoji(price: Decimal) -> str:
    if price > 2000:
        return "💎"
    if price > 1000:
        return "⭐"
    return "🎫"


def format_tariffs(date: str, session: str, category: str, tariffs: list[Tariff]) -> str:
    """Tariff summary for already filtered tariffs (see filter_tariffs)."""
    title = "👤 ВЗРОСЛЫЕ БИЛЕТЫ" if category == CATEGORY_ADULT else "👶 ДЕТСКИЕ БИЛЕТЫ"
    lines = [f"🎟 *{title}*", f"⏰ Сеанс: {session}", f"📅 Дата: {date}", ""]

    if not tariffs:
        lines.append("😔 Нет доступных билетов этой категории")
        lines.append("💡 Попробуйте выбрать другую категорию")
    else:
        lines.append("💰 Стоимость билетов:")
        lines.append("")
        for tariff in tariffs:
            lines.append(
                f"{price_emoji(tariff.price)} *{format_ticket_name(tariff.name)}*: {format_price(tariff.price)}₽"
            )
        lines.append("")
        lines.append("💡 Примечания:")
        lines.append("• Детский билет - для детей от 4 до 12 лет")
        lines.append("• Дети до 4 лет - бесплатно (с взрослым)")
        lines.append("• VIP билеты включают дополнительные услуги")

    lines.append("")
    lines.append(f"🔗 *Купить онлайн:* {TICKETS_SITE}")
    return "\n".join(lines)


def load_status(load_percent: int) -> str:
    if load_percent < 30:
        return "🟢 Низкая загруженность"
    if load_percent < 60:
        return "🟡 Средняя загруженность"
    if load_percent < 85:
        return "🟠 Высокая загруженность"
    return "🔴 Очень высокая загруженность"


def load_recommendation(load_percent: int) -> str:
    if load_percent < 30:
        return "🌟 Идеальное время для посещения!"
    if load_percent < 50:
        return "👍 Хорошее время, народу немного"
    if load_percent < 70:
        return "⚠️ Средняя загруженность, возможны очереди"
    if load_percent < 85:
        return "📢 Много посетителей, лучше выбрать другое время"
    return "🚫 Очень высокая загруженность, не рекомендуется"


def format_load(load: ParkLoad, now: datetime | None = None) -> str:
    now = now or datetime.now()
    return (
        "📊 Загруженность аквапарка:\n\n"
        f"👥 Количество посетителей: {load.count} чел.\n"
        f"📈 Уровень загруженности: {load.load_percent}%\n"
        f"🏷 Статус: {load_status(load.load_percent)}\n\n"
        f"💡 Рекомендация:\n{load_recommendation(load.load_percent)}\n\n"
        f"🕐 Обновлено: {now:%H:%M}"
    )
