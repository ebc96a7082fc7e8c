from __future__ import annotations

import json
from datetime import date

from conftest import keyboard_labels
from vkbot.application.utils.keyboards import MAX_SESSION_BUTTONS, KeyboardProvider

KEYBOARDS = KeyboardProvider(today=lambda: date(2026, 12, 30))


def _buttons(keyboard: str) -> list[dict]:
    return [button for row in json.loads(keyboard)["buttons"] for button in row]


def test_date_keyboard_offers_three_days_across_year_end():
    labels = keyboard_labels(KEYBOARDS.tickets_date_keyboard())
    assert labels == ["📅 30.12.2026", "📅 31.12.2026", "📅 01.01.2027", "🔙 Главное меню"]


def test_sessions_keyboard_is_capped_and_ends_with_back():
    time_labels = [f"{hour}:00" for hour in range(8, 22)]

    labels = keyboard_labels(KEYBOARDS.sessions_keyboard(time_labels))

    assert len(labels) == MAX_SESSION_BUTTONS + 1
    assert labels[0] == "⏰ 8:00"
    assert labels[-1] == "🔙 Назад"


def test_sessions_keyboard_without_sessions_has_only_back():
    assert keyboard_labels(KEYBOARDS.sessions_keyboard([])) == ["🔙 Назад"]


def test_category_keyboard_highlights_selected_category():
    plain = _buttons(KEYBOARDS.ticket_category_keyboard())
    assert [b["color"] for b in plain[:2]] == ["primary", "primary"]

    child = _buttons(KEYBOARDS.ticket_category_keyboard("child"))
    assert [b["color"] for b in child[:2]] == ["primary", "positive"]
    assert child[-1]["action"]["label"] == "🔙 Назад"


def test_tariffs_keyboard_links_to_the_ticket_site():
    buttons = _buttons(KEYBOARDS.tariffs_keyboard("adult", "https://example.test/tickets"))

    link = buttons[0]["action"]
    assert link["type"] == "open_link"
    assert link["link"] == "https://example.test/tickets"

    labels = [b["action"]["label"] for b in buttons]
    assert labels[1:] == ["💳 Оплатить", "👤 Взрослые", "👶 Детские", "🔙 Назад", "🔙 К сеансам", "🔙 Главное меню"]
    assert buttons[2]["color"] == "positive"


def test_main_menu_is_persistent():
    keyboard = json.loads(KEYBOARDS.main_menu())
    assert keyboard["one_time"] is False
    assert keyboard_labels(KEYBOARDS.main_menu()) == ["📅 Билеты", "ℹ️ Информация", "📊 Загруженность"]


def test_info_keyboards():
    assert keyboard_labels(KEYBOARDS.info_menu()) == [
        "🕒 Время работы",
        "📞 Контакты",
        "📍 Как добраться",
        "🔙 Главное меню",
    ]
    assert keyboard_labels(KEYBOARDS.back_to_info()) == ["🔙 К информации", "🔙 Главное меню"]
