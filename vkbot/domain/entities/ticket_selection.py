from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DATE_LABEL = "неизвестная дата"
DEFAULT_SESSION_LABEL = "неизвестный сеанс"

CATEGORY_ADULT = "adult"
CATEGORY_CHILD = "child"

SELECTION_KEYS = ("selected_date", "selected_session", "selected_category")


@dataclass(frozen=True)
class TicketSelection:
    selected_date: str | None = None  # dd.MM.yyyy
    selected_session: str | None = None  # free-form time label, e.g. "10:00"
    selected_category: str | None = None  # "adult" | "child"

    def date_label(self) -> str:
        return self.selected_date or DEFAULT_DATE_LABEL

    def session_label(self) -> str:
        return self.selected_session or DEFAULT_SESSION_LABEL

    def category_or_default(self) -> str:
        return self.selected_category or CATEGORY_ADULT
