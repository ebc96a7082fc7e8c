from dataclasses import dataclass
from enum import Enum


class IntentKind(str, Enum):
    MAIN_MENU = "main_menu"
    BACK = "back"
    BACK_TO_SESSIONS = "back_to_sessions"
    BACK_TO_INFO = "back_to_info"
    PAY = "pay"
    DATE_PICK = "date_pick"
    SESSION_PICK = "session_pick"
    CATEGORY_ADULT = "category_adult"
    CATEGORY_CHILD = "category_child"
    TICKETS = "tickets"
    LOAD = "load"
    INFO = "info"
    HOURS = "hours"
    CONTACTS = "contacts"
    LOCATION = "location"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Intent:
    kind: IntentKind
    text: str
    value: str | None = None  # extracted date / session label
