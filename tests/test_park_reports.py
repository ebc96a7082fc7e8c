from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest

from vkbot.application.exceptions import ParkApiContractError
from vkbot.application.utils.park_reports import (
    availability_label,
    filter_tariffs,
    format_load,
    format_price,
    format_sessions,
    format_tariffs,
    format_ticket_name,
    load_recommendation,
    load_status,
    parse_session,
    parse_tariff,
    price_emoji,
)
from vkbot.domain.entities.park import ParkLoad, ParkSession, Tariff


def _tariffs(*pairs) -> list[Tariff]:
    return [Tariff(name=name, price=Decimal(price)) for name, price in pairs]


def test_filter_tariffs_duplicates_removed_and_other_category_excluded():
    """Case-insensitive duplicates collapse; child tariffs are left out of the adult list."""
    tariffs = _tariffs(("Взрослый билет", 1500), ("взрослый билет", 1500), ("Детский", 500))

    result = filter_tariffs(tariffs, "adult")

    assert len(result) == 1
    assert format_ticket_name(result[0].name) == "Взрослый"
    assert result[0].price == Decimal(1500)


def test_filter_tariffs_entries_matching_both_or_neither_category_are_dropped():
    tariffs = _tariffs(("Семейный взрослый + детский", 3000), ("Абонемент", 900), ("Детский билет", 600))

    assert [t.name for t in filter_tariffs(tariffs, "child")] == ["Детский билет"]
    assert filter_tariffs(tariffs, "adult") == []


def test_filter_tariffs_sorted_by_price_descending():
    tariffs = _tariffs(("Взрослый утро", 900), ("Взрослый Вип весь день", 2500), ("Взрослый вечер", 1200))

    assert [t.price for t in filter_tariffs(tariffs, "adult")] == [2500, 1200, 900]


def test_filter_tariffs_same_display_name_keeps_first_occurrence():
    tariffs = _tariffs(("Билет взрослый", 1400), ("взрослый", 1600))

    result = filter_tariffs(tariffs, "adult")

    assert [t.price for t in result] == [Decimal(1400)]


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Взрослый билет", "Взрослый"),
        ("Билет вип весь день взрослый", "VIP Весь день"),
        ("Вип", "VIP"),
        ("  Детский   билет  вечер ", "Детский вечер"),
        ("билет", "Стандартный"),
        ("", "Стандартный"),
    ],
)
def test_format_ticket_name(name, expected):
    assert format_ticket_name(name) == expected


def test_price_formatting_and_tiers():
    assert format_price(Decimal("1500.00")) == "1500"
    assert format_price(Decimal("1499.50")) == "1499.50"
    assert price_emoji(Decimal(2500)) == "💎"
    assert price_emoji(Decimal(2000)) == "⭐"
    assert price_emoji(Decimal(1000)) == "🎫"


def test_format_tariffs_lists_prices_and_site():
    text = format_tariffs("20.10.2026", "10:00", "adult", _tariffs(("Взрослый Вип", 2500), ("Взрослый", 1500)))

    assert text.startswith("🎟 *👤 ВЗРОСЛЫЕ БИЛЕТЫ*\n⏰ Сеанс: 10:00\n📅 Дата: 20.10.2026")
    assert "💎 *Взрослый VIP*: 2500₽" in text
    assert "⭐ *Взрослый*: 1500₽" in text
    assert text.endswith("🔗 *Купить онлайн:* yes35.ru")


def test_format_tariffs_without_entries():
    text = format_tariffs("20.10.2026", "10:00", "child", [])

    assert text.startswith("🎟 *👶 ДЕТСКИЕ БИЛЕТЫ*")
    assert "😔 Нет доступных билетов этой категории" in text
    assert "💰" not in text


def test_parse_tariff_field_name_variants():
    assert parse_tariff({"Name": "Детский", "Price": "500.5"}) == Tariff("Детский", Decimal("500.5"))
    assert parse_tariff({"name": "Взрослый", "price": 1500}) == Tariff("Взрослый", Decimal(1500))


def test_parse_tariff_missing_price_reads_as_zero():
    assert parse_tariff({"Name": "Взрослый"}).price == 0


def test_parse_tariff_bad_entries_break_the_contract():
    with pytest.raises(ParkApiContractError):
        parse_tariff({"Name": "Взрослый", "Price": "бесплатно"})
    with pytest.raises(ParkApiContractError):
        parse_tariff(["Взрослый", 1500])


@pytest.mark.parametrize("price", [float("nan"), "NaN", "Infinity", float("-inf")])
def test_parse_tariff_non_finite_price_breaks_the_contract(price):
    """Prices that cannot be compared or printed are rejected at parse time."""
    with pytest.raises(ParkApiContractError):
        parse_tariff({"Name": "Взрослый билет", "Price": price})


def test_parse_session_first_present_string_field_wins():
    """Field names are tried in order; empty strings are skipped."""
    session = parse_session({"time": "", "Time": "11:00", "name": "Утро", "free": 12, "total": 40})
    assert session == ParkSession(time_label="11:00", free_count=12, total_count=40)


def test_parse_session_missing_capacity_uses_placeholder():
    assert parse_session({"SessionTime": "18:00"}) == ParkSession("18:00", 1, 50)


def test_parse_session_zero_free_with_known_total_is_kept():
    assert parse_session({"sessionTime": "18:00", "availableCount": 0, "totalCount": 50}).free_count == 0


def test_parse_session_without_label_the_entry_is_skipped():
    assert parse_session({"availableCount": 10}) is None
    assert parse_session("10:00") is None


def test_format_sessions():
    text, labels = format_sessions(
        "20.10.2026",
        [
            {"sessionTime": "10:00", "availableCount": 30, "totalCount": 50},
            {"Title": "12:00", "PlacesFree": 5, "PlacesTotal": 50},
            {"availableCount": 3},
        ],
    )

    assert labels == ["10:00", "12:00"]
    assert text.splitlines()[0] == "🎟 Доступные сеансы на 20.10.2026:"
    assert "⏰ *12:00*\n   Свободно: 5/50 мест\n   🔴 Мало мест" in text


def test_format_sessions_when_nothing_is_bookable():
    text, labels = format_sessions("20.10.2026", [])
    assert labels == []
    assert text == "😔 На 20.10.2026 нет доступных сеансов или все заняты."


@pytest.mark.parametrize(
    "free, expected",
    [(0, "🔴 Нет мест"), (9, "🔴 Мало мест"), (10, "🟡 Средняя загрузка"), (20, "🟢 Есть места")],
)
def test_availability_label(free, expected):
    assert availability_label(free) == expected


@pytest.mark.parametrize(
    "percent, status, recommendation",
    [
        (10, "🟢 Низкая загруженность", "🌟 Идеальное время для посещения!"),
        (45, "🟡 Средняя загруженность", "👍 Хорошее время, народу немного"),
        (65, "🟠 Высокая загруженность", "⚠️ Средняя загруженность, возможны очереди"),
        (80, "🟠 Высокая загруженность", "📢 Много посетителей, лучше выбрать другое время"),
        (95, "🔴 Очень высокая загруженность", "🚫 Очень высокая загруженность, не рекомендуется"),
    ],
)
def test_load_bands(percent, status, recommendation):
    assert load_status(percent) == status
    assert load_recommendation(percent) == recommendation


def test_format_load():
    text = format_load(ParkLoad(count=340, load_percent=72), now=datetime(2026, 10, 19, 14, 5))

    assert "👥 Количество посетителей: 340 чел." in text
    assert "📈 Уровень загруженности: 72%" in text
    assert "🏷 Статус: 🟠 Высокая загруженность" in text
    assert text.endswith("🕐 Обновлено: 14:05")
