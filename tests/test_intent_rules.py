from __future__ import annotations

import pytest

from vkbot.application.utils.intent_rules import (
    classify_intent,
    extract_date,
    extract_session,
    parse_admin_command,
)
from vkbot.domain.entities.admin_command import AdminAction
from vkbot.domain.entities.conversation_state import DialogState
from vkbot.domain.entities.intent import IntentKind


@pytest.mark.parametrize("state", list(DialogState))
def test_main_menu_matches_in_every_state(state):
    assert classify_intent("🔙 Главное меню", state).kind is IntentKind.MAIN_MENU


@pytest.mark.parametrize(
    "text, state, expected",
    [
        ("📅 Билеты", DialogState.IDLE, IntentKind.TICKETS),
        ("хочу купить билет", DialogState.IDLE, IntentKind.TICKETS),
        ("📊 Загруженность", DialogState.IDLE, IntentKind.LOAD),
        ("ℹ️ Информация", DialogState.IDLE, IntentKind.INFO),
        ("🕒 Время работы", DialogState.IDLE, IntentKind.HOURS),
        ("какой у вас телефон", DialogState.IDLE, IntentKind.CONTACTS),
        ("📍 Как добраться", DialogState.IDLE, IntentKind.LOCATION),
        ("🔙 К информации", DialogState.IDLE, IntentKind.BACK_TO_INFO),
        ("🔙 К сеансам", DialogState.WAITING_FOR_PAYMENT, IntentKind.BACK_TO_SESSIONS),
        ("🔙 Назад", DialogState.WAITING_FOR_SESSION, IntentKind.BACK),
        ("💳 Оплатить", DialogState.WAITING_FOR_PAYMENT, IntentKind.PAY),
        ("👤 Взрослые", DialogState.WAITING_FOR_CATEGORY, IntentKind.CATEGORY_ADULT),
        ("👶 Детские", DialogState.WAITING_FOR_PAYMENT, IntentKind.CATEGORY_CHILD),
    ],
)
def test_classify_intent(text, state, expected):
    assert classify_intent(text, state).kind is expected


def test_rules_are_scoped_by_state():
    # Idle-only menu items are plain text once the purchase flow has started.
    assert classify_intent("📊 Загруженность", DialogState.WAITING_FOR_SESSION).kind is IntentKind.UNKNOWN
    assert classify_intent("💳 Оплатить", DialogState.IDLE).kind is IntentKind.UNKNOWN
    assert classify_intent("👤 Взрослые", DialogState.IDLE).kind is IntentKind.UNKNOWN
    assert classify_intent("⏰ 10:00", DialogState.WAITING_FOR_DATE).kind is IntentKind.UNKNOWN


def test_date_and_session_values_are_extracted():
    intent = classify_intent("📅 20.10.2026", DialogState.WAITING_FOR_DATE)
    assert intent.kind is IntentKind.DATE_PICK
    assert intent.value == "20.10.2026"

    intent = classify_intent("⏰ 12:30", DialogState.WAITING_FOR_SESSION)
    assert intent.kind is IntentKind.SESSION_PICK
    assert intent.value == "12:30"


@pytest.mark.parametrize(
    "text, state, kind, value",
    [
        ("⏰ Старт 10:00", DialogState.WAITING_FOR_SESSION, IntentKind.SESSION_PICK, "Старт 10:00"),
        ("⏰ Главное меню дня", DialogState.WAITING_FOR_SESSION, IntentKind.SESSION_PICK, "Главное меню дня"),
        ("⏰ Оплатить на месте", DialogState.WAITING_FOR_SESSION, IntentKind.SESSION_PICK, "Оплатить на месте"),
    ],
)
def test_marker_picks_win_over_keywords(text, state, kind, value):
    """Upstream session labels may contain menu keywords and must still be selectable."""
    intent = classify_intent(text, state)
    assert intent.kind is kind
    assert intent.value == value


@pytest.mark.parametrize("text", ["20.10.2026", "📅 2026-10-20", "📅 31.02.2026", "📅", ""])
def test_extract_date_rejects_malformed_input(text):
    assert extract_date(text) is None


def test_extract_session():
    assert extract_session("⏰  Весь день ") == "Весь день"
    assert extract_session("⏰") is None
    assert extract_session("10:00") is None


def test_unknown_text():
    intent = classify_intent("просто текст", DialogState.IDLE)
    assert intent.kind is IntentKind.UNKNOWN
    assert intent.value is None


def test_admin_stats():
    assert parse_admin_command("/stats").action is AdminAction.STATS
    assert parse_admin_command("/Статистика").action is AdminAction.STATS


def test_admin_search_keeps_whole_query():
    command = parse_admin_command("/search Иван Петров")
    assert command.action is AdminAction.SEARCH
    assert command.query == "Иван Петров"


def test_admin_ban_with_reason():
    command = parse_admin_command("/ban 42 спам в личку")
    assert command.action is AdminAction.BAN
    assert command.vk_user_id == 42
    assert command.reason == "спам в личку"


def test_admin_unban():
    command = parse_admin_command("/разбан 42")
    assert command.action is AdminAction.UNBAN
    assert command.vk_user_id == 42


@pytest.mark.parametrize("text", ["/search", "/ban", "/ban abc", "/unban id42"])
def test_admin_bad_arguments_yield_usage(text):
    assert parse_admin_command(text).action is AdminAction.USAGE


@pytest.mark.parametrize("text", ["/start", "stats", "привет", "", "/"])
def test_admin_not_an_admin_command(text):
    assert parse_admin_command(text) is None
