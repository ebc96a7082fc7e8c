from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum

from vkbot.domain.entities.ticket_selection import TicketSelection


class DialogState(str, Enum):
    IDLE = "idle"
    WAITING_FOR_DATE = "waiting_for_date"
    WAITING_FOR_SESSION = "waiting_for_session"
    WAITING_FOR_CATEGORY = "waiting_for_category"
    WAITING_FOR_PAYMENT = "waiting_for_payment"


# Selection fields that carry meaning in each dialog state.
_SCOPED_FIELDS: dict[DialogState, tuple[str, ...]] = {
    DialogState.IDLE: (),
    DialogState.WAITING_FOR_DATE: (),
    DialogState.WAITING_FOR_SESSION: ("selected_date",),
    DialogState.WAITING_FOR_CATEGORY: ("selected_date", "selected_session"),
    DialogState.WAITING_FOR_PAYMENT: ("selected_date", "selected_session", "selected_category"),
}


@dataclass(frozen=True)
class ConversationState:
    dialog_state: DialogState = DialogState.IDLE
    selection: TicketSelection = TicketSelection()
    updated_at: float | None = None

    def scoped_selection(self) -> TicketSelection:
        """
        Selection as seen from the current dialog state.
        Fields that are not meaningful for the state read as unset.
        """
        allowed = _SCOPED_FIELDS[self.dialog_state]
        hidden = {f.name: None for f in fields(TicketSelection) if f.name not in allowed}
        return replace(self.selection, **hidden)
