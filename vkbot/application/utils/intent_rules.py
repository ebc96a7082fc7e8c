from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from vkbot.application.utils.keyboards import DATE_FORMAT, DATE_MARKER, SESSION_MARKER
from vkbot.domain.entities.admin_command import AdminAction, AdminCommand
from vkbot.domain.entities.conversation_state import DialogState
from vkbot.domain.entities.intent import Intent, IntentKind

MAIN_MENU_PATTERNS = ("главное меню", "в начало", "меню", "начать", "старт", "start")
BACK_PATTERNS = ("🔙", "назад")
PAY_PATTERNS = ("💳", "оплат")
ADULT_PATTERNS = ("👤", "взрос")
CHILD_PATTERNS = ("👶", "дет")
TICKETS_PATTERNS = ("📅", "билет")
LOAD_PATTERNS = ("📊", "загруженность")
HOURS_PATTERNS = ("🕒", "время работы", "режим работы")
CONTACTS_PATTERNS = ("📞", "контакт", "телефон")
LOCATION_PATTERNS = ("📍", "адрес", "как добраться", "местоположение")
INFO_PATTERNS = ("ℹ️", "информация", "инфо")

_ADMIN_RE = re.compile(r"^/(?P<verb>\S+)(?:\s+(?P<args>.*))?$", re.DOTALL)
_ADMIN_VERBS = {
    "stats": AdminAction.STATS,
    "статистика": AdminAction.STATS,
    "search": AdminAction.SEARCH,
    "поиск": AdminAction.SEARCH,
    "ban": AdminAction.BAN,
    "бан": AdminAction.BAN,
    "unban": AdminAction.UNBAN,
    "разбан": AdminAction.UNBAN,
}


def normalize_text(text: str) -> str:
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def _contains_any(patterns: tuple[str, ...]) -> Callable[[str], bool]:
    return lambda normalized: any(pattern in normalized for pattern in patterns)


def extract_date(text: str) -> str | None:
    """'📅 19.10.2026' -> '19.10.2026'; None unless the rest is a real dd.MM.yyyy date."""
    stripped = (text or "").strip()
    if not stripped.startswith(DATE_MARKER):
        return None
    candidate = stripped[len(DATE_MARKER):].strip()
    try:
        datetime.strptime(candidate, DATE_FORMAT)
    except ValueError:
        return None
    return candidate


def extract_session(text: str) -> str | None:
    stripped = (text or "").strip()
    if not stripped.startswith(SESSION_MARKER):
        return None
    label = stripped[len(SESSION_MARKER):].strip()
    return label or None


@dataclass(frozen=True)
class IntentRule:
    kind: IntentKind
    matches: Callable[[str], bool]
    states: frozenset[DialogState] | None = None  # None: any state

    def applies(self, normalized: str, state: DialogState) -> bool:
        if self.states is not None and state not in self.states:
            return False
        return self.matches(normalized)


# Evaluated top to bottom; the first applicable rule wins.
# Date and session buttons carry upstream labels, so marker-prefixed picks
# are matched before any keyword. "Main menu" comes next and works from
# every state.
INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(
        IntentKind.DATE_PICK,
        lambda normalized: extract_date(normalized) is not None,
        frozenset({DialogState.WAITING_FOR_DATE}),
    ),
    IntentRule(
        IntentKind.SESSION_PICK,
        lambda normalized: extract_session(normalized) is not None,
        frozenset({DialogState.WAITING_FOR_SESSION}),
    ),
    IntentRule(IntentKind.MAIN_MENU, _contains_any(MAIN_MENU_PATTERNS)),
    IntentRule(IntentKind.BACK_TO_SESSIONS, _contains_any(("к сеансам",))),
    IntentRule(IntentKind.BACK_TO_INFO, _contains_any(("к информации",))),
    IntentRule(IntentKind.BACK, _contains_any(BACK_PATTERNS)),
    IntentRule(
        IntentKind.PAY,
        _contains_any(PAY_PATTERNS),
        frozenset({DialogState.WAITING_FOR_PAYMENT}),
    ),
    IntentRule(
        IntentKind.CATEGORY_ADULT,
        _contains_any(ADULT_PATTERNS),
        frozenset({DialogState.WAITING_FOR_CATEGORY, DialogState.WAITING_FOR_PAYMENT}),
    ),
    IntentRule(
        IntentKind.CATEGORY_CHILD,
        _contains_any(CHILD_PATTERNS),
        frozenset({DialogState.WAITING_FOR_CATEGORY, DialogState.WAITING_FOR_PAYMENT}),
    ),
    IntentRule(IntentKind.TICKETS, _contains_any(TICKETS_PATTERNS), frozenset({DialogState.IDLE})),
    IntentRule(IntentKind.LOAD, _contains_any(LOAD_PATTERNS), frozenset({DialogState.IDLE})),
    IntentRule(IntentKind.HOURS, _contains_any(HOURS_PATTERNS), frozenset({DialogState.IDLE})),
    IntentRule(IntentKind.CONTACTS, _contains_any(CONTACTS_PATTERNS), frozenset({DialogState.IDLE})),
    IntentRule(IntentKind.LOCATION, _contains_any(LOCATION_PATTERNS), frozenset({DialogState.IDLE})),
    IntentRule(IntentKind.INFO, _contains_any(INFO_PATTERNS), frozenset({DialogState.IDLE})),
)


def classify_intent(text: str, state: DialogState = DialogState.IDLE) -> Intent:
    normalized = normalize_text(text)
    for rule in INTENT_RULES:
        if rule.applies(normalized, state):
            return Intent(kind=rule.kind, text=text, value=_extract_value(rule.kind, text))
    return Intent(kind=IntentKind.UNKNOWN, text=text)


def _extract_value(kind: IntentKind, text: str) -> str | None:
    if kind is IntentKind.DATE_PICK:
        return extract_date(text)
    if kind is IntentKind.SESSION_PICK:
        return extract_session(text)
    return None


def parse_admin_command(text: str) -> AdminCommand | None:
    """
    /stats, /search <query>, /ban <id> [reason], /unban <id> (plus Russian aliases).
    Known verbs with bad arguments yield AdminAction.USAGE; anything else is None.
    """
    match = _ADMIN_RE.match((text or "").strip())
    if not match:
        return None
    action = _ADMIN_VERBS.get(match.group("verb").lower())
    if action is None:
        return None
    args = (match.group("args") or "").strip()

    if action is AdminAction.STATS:
        return AdminCommand(action=action)
    if action is AdminAction.SEARCH:
        if not args:
            return AdminCommand(action=AdminAction.USAGE)
        return AdminCommand(action=action, query=args)

    parts = args.split(maxsplit=1)
    if not parts or not parts[0].isdigit():
        return AdminCommand(action=AdminAction.USAGE)
    vk_user_id = int(parts[0])
    if action is AdminAction.UNBAN:
        return AdminCommand(action=action, vk_user_id=vk_user_id)
    reason = parts[1].strip() if len(parts) > 1 else ""
    return AdminCommand(action=action, vk_user_id=vk_user_id, reason=reason)
