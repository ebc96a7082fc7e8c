from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

from vk_api.keyboard import VkKeyboard, VkKeyboardColor

from vkbot.domain.entities.ticket_selection import CATEGORY_ADULT, CATEGORY_CHILD

# Button labels double as the text the bot receives back, so intent rules
# (intent_rules.py) match on the same emoji markers.
TICKETS_LABEL = "📅 Билеты"
INFO_LABEL = "ℹ️ Информация"
LOAD_LABEL = "📊 Загруженность"
HOURS_LABEL = "🕒 Время работы"
CONTACTS_LABEL = "📞 Контакты"
LOCATION_LABEL = "📍 Как добраться"
MAIN_MENU_LABEL = "🔙 Главное меню"
BACK_LABEL = "🔙 Назад"
BACK_TO_SESSIONS_LABEL = "🔙 К сеансам"
BACK_TO_INFO_LABEL = "🔙 К информации"
ADULT_LABEL = "👤 Взрослые"
CHILD_LABEL = "👶 Детские"
PAY_LABEL = "💳 Оплатить"
BUY_ONLINE_LABEL = "🎟 Купить на сайте"

DATE_MARKER = "📅"
SESSION_MARKER = "⏰"
DATE_FORMAT = "%d.%m.%Y"

DATE_BUTTONS = 3
# VK allows 10 rows on a regular keyboard; one is kept for the back button.
MAX_SESSION_BUTTONS = 9


class KeyboardProvider:
    """Serialized VK keyboards for every dialog screen. No I/O, no decisions."""

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def main_menu(self) -> str:
        keyboard = VkKeyboard(one_time=False)
        keyboard.add_button(TICKETS_LABEL, color=VkKeyboardColor.PRIMARY)
        keyboard.add_button(INFO_LABEL, color=VkKeyboardColor.SECONDARY)
        keyboard.add_line()
        keyboard.add_button(LOAD_LABEL, color=VkKeyboardColor.POSITIVE)
        return keyboard.get_keyboard()

    def info_menu(self) -> str:
        keyboard = VkKeyboard(one_time=True)
        keyboard.add_button(HOURS_LABEL, color=VkKeyboardColor.PRIMARY)
        keyboard.add_line()
        keyboard.add_button(CONTACTS_LABEL, color=VkKeyboardColor.PRIMARY)
        keyboard.add_line()
        keyboard.add_button(LOCATION_LABEL, color=VkKeyboardColor.PRIMARY)
        keyboard.add_line()
        keyboard.add_button(MAIN_MENU_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def tickets_date_keyboard(self) -> str:
        today = self._today()
        keyboard = VkKeyboard(one_time=True)
        for offset in range(DATE_BUTTONS):
            day = today + timedelta(days=offset)
            keyboard.add_button(f"{DATE_MARKER} {day.strftime(DATE_FORMAT)}", color=VkKeyboardColor.PRIMARY)
            keyboard.add_line()
        keyboard.add_button(MAIN_MENU_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def sessions_keyboard(self, time_labels: list[str]) -> str:
        keyboard = VkKeyboard(one_time=True)
        for label in time_labels[:MAX_SESSION_BUTTONS]:
            keyboard.add_button(f"{SESSION_MARKER} {label}", color=VkKeyboardColor.PRIMARY)
            keyboard.add_line()
        keyboard.add_button(BACK_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def ticket_category_keyboard(self, selected: str | None = None) -> str:
        """The previously chosen category, if any, is highlighted."""
        keyboard = VkKeyboard(one_time=True)
        keyboard.add_button(ADULT_LABEL, color=_category_color(CATEGORY_ADULT, selected))
        keyboard.add_line()
        keyboard.add_button(CHILD_LABEL, color=_category_color(CATEGORY_CHILD, selected))
        keyboard.add_line()
        keyboard.add_button(BACK_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def tariffs_keyboard(self, category: str, tickets_url: str) -> str:
        keyboard = VkKeyboard(one_time=False)
        keyboard.add_openlink_button(BUY_ONLINE_LABEL, link=tickets_url)
        keyboard.add_line()
        keyboard.add_button(PAY_LABEL, color=VkKeyboardColor.POSITIVE)
        keyboard.add_line()
        keyboard.add_button(ADULT_LABEL, color=_category_color(CATEGORY_ADULT, category))
        keyboard.add_button(CHILD_LABEL, color=_category_color(CATEGORY_CHILD, category))
        keyboard.add_line()
        keyboard.add_button(BACK_LABEL, color=VkKeyboardColor.SECONDARY)
        keyboard.add_button(BACK_TO_SESSIONS_LABEL, color=VkKeyboardColor.SECONDARY)
        keyboard.add_line()
        keyboard.add_button(MAIN_MENU_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def payment_keyboard(self) -> str:
        keyboard = VkKeyboard(one_time=True)
        keyboard.add_button(PAY_LABEL, color=VkKeyboardColor.POSITIVE)
        keyboard.add_line()
        keyboard.add_button(BACK_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def back_to_main(self) -> str:
        keyboard = VkKeyboard(one_time=False)
        keyboard.add_button(MAIN_MENU_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def back_to_sessions(self) -> str:
        keyboard = VkKeyboard(one_time=True)
        keyboard.add_button(BACK_TO_SESSIONS_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()

    def back_to_info(self) -> str:
        keyboard = VkKeyboard(one_time=True)
        keyboard.add_button(BACK_TO_INFO_LABEL, color=VkKeyboardColor.SECONDARY)
        keyboard.add_line()
        keyboard.add_button(MAIN_MENU_LABEL, color=VkKeyboardColor.NEGATIVE)
        return keyboard.get_keyboard()


def _category_color(category: str, selected: str | None) -> VkKeyboardColor:
    return VkKeyboardColor.POSITIVE if category == selected else VkKeyboardColor.PRIMARY
