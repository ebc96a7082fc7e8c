from __future__ import annotations

import logging
from typing import Callable, Iterable

from vkbot.application.ports.command_catalog import CommandCatalogPort
from vkbot.application.ports.park_data import ParkDataPort
from vkbot.application.services.conversation_state import ConversationStateService
from vkbot.application.use_cases.admin_commands import AdminCommandsUseCase
from vkbot.application.use_cases.send_reply import SendReplyUseCase
from vkbot.application.utils.intent_rules import classify_intent, parse_admin_command
from vkbot.application.utils.keyboards import KeyboardProvider
from vkbot.application.utils.park_reports import (
    filter_tariffs,
    format_load,
    format_sessions,
    format_tariffs,
    parse_tariff,
)
from vkbot.application.utils.texts import (
    CONTACTS_TEXT,
    LOCATION_TEXT,
    WELCOME_TEXT,
    WORKING_HOURS_TEXT,
)
from vkbot.domain.entities.command import Command
from vkbot.domain.entities.conversation_state import DialogState
from vkbot.domain.entities.intent import Intent, IntentKind
from vkbot.domain.entities.message import InboundMessage
from vkbot.domain.entities.reply import Reply
from vkbot.domain.entities.ticket_selection import CATEGORY_ADULT, CATEGORY_CHILD, TicketSelection

MAIN_MENU_TEXT = "Возвращаемся в главное меню 👇"
ALREADY_IN_MAIN_MENU_TEXT = "Вы уже в главном меню 👇"
NOT_UNDERSTOOD_TEXT = "Я вас не понял, выберите пункт меню 👇"
INFO_MENU_TEXT = "Выберите нужный раздел информации 👇"
CHOOSE_VISIT_DATE_TEXT = "Выберите дату для посещения:"
CHOOSE_DATE_TEXT = "Выберите дату:"
DATE_REPROMPT_TEXT = "Пожалуйста, выберите дату кнопкой 📅"
SESSION_REPROMPT_TEXT = "Выберите сеанс кнопкой ⏰"
CATEGORY_PROMPT_TEXT = "Выберите категорию билетов:"
PAYMENT_REPROMPT_TEXT = "Нажмите 💳 для оплаты или 🔙 чтобы вернуться"
PAYMENT_DONE_TEXT = "✅ Оплата прошла успешно! Спасибо за покупку!"
NO_TARIFFS_TEXT = "😔 На выбранную дату нет доступных тарифов"
LOAD_FAILED_TEXT = "❌ Не удалось получить информацию о загруженности. Попробуйте позже 😔"
TARIFFS_FAILED_TEXT = "❌ Ошибка при получении тарифов. Попробуйте позже 😔"
TECHNICAL_ERROR_TEXT = "⚠️ Произошла техническая ошибка. Попробуйте ещё раз чуть позже."

CATEGORY_TITLES = {CATEGORY_ADULT: "Взрослые", CATEGORY_CHILD: "Детские"}

Handler = Callable[[int, Intent, TicketSelection], Reply]


class HandleIncomingMessageUseCase:
    """
    Dialog engine for the ticket bot.

    Pipeline per message: admin command, command table (idle only), main-menu
    escape, then the handler of the user's current dialog state. State is read
    fresh on every message and written through ConversationStateService.
    Exactly one reply is sent per message, an error reply included.
    """

    def __init__(
        self,
        state: ConversationStateService,
        keyboards: KeyboardProvider,
        send_reply: SendReplyUseCase,
        park: ParkDataPort,
        commands: CommandCatalogPort,
        admin_commands: AdminCommandsUseCase,
        tickets_url: str,
        admin_user_ids: Iterable[int] = (),
    ) -> None:
        self._state = state
        self._kb = keyboards
        self._send_reply = send_reply
        self._park = park
        self._commands = commands
        self._admin_commands = admin_commands
        self._tickets_url = tickets_url
        self._admin_user_ids = frozenset(admin_user_ids)
        self._logger = logging.getLogger(__name__)
        self._handlers: dict[DialogState, Handler] = {
            DialogState.IDLE: self._on_idle,
            DialogState.WAITING_FOR_DATE: self._on_waiting_for_date,
            DialogState.WAITING_FOR_SESSION: self._on_waiting_for_session,
            DialogState.WAITING_FOR_CATEGORY: self._on_waiting_for_category,
            DialogState.WAITING_FOR_PAYMENT: self._on_waiting_for_payment,
        }

    def handle(self, message: InboundMessage) -> None:
        self.process(message.sender_id, message.peer_id, message.text)

    def process(self, sender_id: int, peer_id: int, text: str) -> None:
        text = (text or "").strip()
        self._logger.info("Message received", extra={"user_id": sender_id, "peer_id": peer_id})
        try:
            reply = self._route(sender_id, text)
            self._send_reply.execute(peer_id, reply.text, reply.keyboard)
        except Exception as e:
            # State is left as-is.
            self._logger.exception(
                "Failed to handle incoming message",
                extra={"user_id": sender_id, "peer_id": peer_id, "error": type(e).__name__},
            )
            try:
                self._send_reply.execute(peer_id, TECHNICAL_ERROR_TEXT, None)
            except Exception:
                self._logger.exception("Failed to send error reply", extra={"peer_id": peer_id})

    def welcome(self, user_id: int) -> bool:
        """Greeting for a user who just allowed messages from the community."""
        self._logger.info("Sending welcome", extra={"user_id": user_id})
        return self._send_reply.execute(user_id, WELCOME_TEXT, self._kb.main_menu())

    def _route(self, user_id: int, text: str) -> Reply:
        admin_reply = self._handle_admin(user_id, text)
        if admin_reply is not None:
            return admin_reply

        conversation = self._state.get(user_id)
        dialog_state = conversation.dialog_state
        intent = classify_intent(text, dialog_state)
        self._logger.info(
            "Intent classified",
            extra={"user_id": user_id, "state": dialog_state.value, "intent": intent.kind.value},
        )

        if dialog_state is DialogState.IDLE:
            command = self._find_command(text)
            if command is not None:
                return self._command_reply(user_id, command)

        if intent.kind is IntentKind.MAIN_MENU:
            self._state.clear_user_data(user_id)
            return Reply(MAIN_MENU_TEXT, self._kb.main_menu())

        handler = self._handlers[dialog_state]
        return handler(user_id, intent, conversation.scoped_selection())

    def _handle_admin(self, user_id: int, text: str) -> Reply | None:
        command = parse_admin_command(text)
        if command is None:
            return None
        if self._admin_user_ids and user_id not in self._admin_user_ids:
            self._logger.info("Admin command from non-admin ignored", extra={"user_id": user_id})
            return None
        return Reply(self._admin_commands.execute(command))

    def _find_command(self, text: str) -> Command | None:
        if not text:
            return None
        try:
            return self._commands.find_command(text)
        except Exception as e:
            self._logger.error("Command lookup failed", extra={"error": str(e)})
            return None

    def _command_reply(self, user_id: int, command: Command) -> Reply:
        self._logger.info("Command matched", extra={"user_id": user_id, "command": command.name})
        self._state.clear_user_data(user_id)
        return Reply(command.response, command.keyboard_payload or self._kb.main_menu())

    # Idle

    def _on_idle(self, user_id: int, intent: Intent, selection: TicketSelection) -> Reply:
        kind = intent.kind
        if kind in (IntentKind.BACK, IntentKind.BACK_TO_SESSIONS):
            self._state.clear_user_data(user_id)
            return Reply(ALREADY_IN_MAIN_MENU_TEXT, self._kb.main_menu())
        if kind in (IntentKind.INFO, IntentKind.BACK_TO_INFO):
            return Reply(INFO_MENU_TEXT, self._kb.info_menu())
        if kind is IntentKind.TICKETS:
            self._state.transition(user_id, DialogState.WAITING_FOR_DATE)
            return Reply(CHOOSE_VISIT_DATE_TEXT, self._kb.tickets_date_keyboard())
        if kind is IntentKind.LOAD:
            return self._load_reply()
        if kind is IntentKind.HOURS:
            return Reply(WORKING_HOURS_TEXT, self._kb.back_to_info())
        if kind is IntentKind.CONTACTS:
            return Reply(CONTACTS_TEXT, self._kb.back_to_info())
        if kind is IntentKind.LOCATION:
            return Reply(LOCATION_TEXT, self._kb.back_to_info())
        return Reply(NOT_UNDERSTOOD_TEXT, self._kb.main_menu())

    def _load_reply(self) -> Reply:
        try:
            load = self._park.fetch_current_load()
        except Exception as e:
            self._logger.exception("Park load fetch failed", extra={"error": type(e).__name__})
            return Reply(LOAD_FAILED_TEXT, self._kb.back_to_main())
        return Reply(format_load(load), self._kb.back_to_main())

    # Ticket flow

    def _on_waiting_for_date(self, user_id: int, intent: Intent, selection: TicketSelection) -> Reply:
        if intent.kind is IntentKind.DATE_PICK and intent.value:
            return self._show_sessions(user_id, intent.value, self._kb.tickets_date_keyboard())
        if intent.kind is IntentKind.BACK:
            self._state.clear_user_data(user_id)
            return Reply(MAIN_MENU_TEXT, self._kb.main_menu())
        command = self._find_command(intent.text)
        if command is not None:
            return self._command_reply(user_id, command)
        return Reply(DATE_REPROMPT_TEXT, self._kb.tickets_date_keyboard())

    def _on_waiting_for_session(self, user_id: int, intent: Intent, selection: TicketSelection) -> Reply:
        if intent.kind is IntentKind.SESSION_PICK and intent.value:
            new_state = self._state.transition(
                user_id, DialogState.WAITING_FOR_CATEGORY, selected_session=intent.value
            )
            chosen = new_state.selection
            return Reply(
                f"Вы выбрали сеанс {chosen.session_label()} на {chosen.date_label()}. "
                "Теперь выберите категорию билетов:",
                self._kb.ticket_category_keyboard(),
            )
        if intent.kind is IntentKind.BACK:
            self._state.transition(user_id, DialogState.WAITING_FOR_DATE)
            return Reply(CHOOSE_DATE_TEXT, self._kb.tickets_date_keyboard())
        if intent.kind is IntentKind.BACK_TO_SESSIONS:
            return self._back_to_sessions(user_id, selection, self._kb.back_to_sessions())
        return Reply(SESSION_REPROMPT_TEXT, self._kb.back_to_sessions())

    def _on_waiting_for_category(self, user_id: int, intent: Intent, selection: TicketSelection) -> Reply:
        category = _intent_category(intent)
        if category is not None:
            return self._show_tariffs(user_id, selection, category)
        if intent.kind in (IntentKind.BACK, IntentKind.BACK_TO_SESSIONS):
            return self._back_to_sessions(user_id, selection, self._kb.ticket_category_keyboard())
        return Reply(CATEGORY_PROMPT_TEXT, self._kb.ticket_category_keyboard())

    def _on_waiting_for_payment(self, user_id: int, intent: Intent, selection: TicketSelection) -> Reply:
        if intent.kind is IntentKind.PAY:
            self._logger.info(
                "Payment confirmed",
                extra={"user_id": user_id, "state": DialogState.WAITING_FOR_PAYMENT.value},
            )
            self._state.clear_user_data(user_id)
            return Reply(_payment_summary(selection), self._kb.main_menu())
        category = _intent_category(intent)
        if category is not None:
            return self._show_tariffs(user_id, selection, category)
        if intent.kind is IntentKind.BACK:
            self._state.transition(user_id, DialogState.WAITING_FOR_CATEGORY)
            return Reply(
                CATEGORY_PROMPT_TEXT, self._kb.ticket_category_keyboard(selection.selected_category)
            )
        if intent.kind is IntentKind.BACK_TO_SESSIONS:
            return self._back_to_sessions(user_id, selection, self._kb.payment_keyboard())
        return Reply(PAYMENT_REPROMPT_TEXT, self._kb.payment_keyboard())

    def _back_to_sessions(self, user_id: int, selection: TicketSelection, failure_keyboard: str) -> Reply:
        if not selection.selected_date:
            self._state.transition(user_id, DialogState.WAITING_FOR_DATE)
            return Reply(CHOOSE_DATE_TEXT, self._kb.tickets_date_keyboard())
        return self._show_sessions(user_id, selection.selected_date, failure_keyboard)

    def _show_sessions(self, user_id: int, date: str, failure_keyboard: str) -> Reply:
        """
        Sessions for date. Success moves the user to WAITING_FOR_SESSION; a date
        without sessions sends them back to the date picker; a failed fetch keeps
        the current state and shows failure_keyboard.
        """
        try:
            raw_sessions = self._park.fetch_sessions(date)
            text, labels = format_sessions(date, raw_sessions)
        except Exception as e:
            self._logger.exception(
                "Sessions fetch failed", extra={"user_id": user_id, "error": type(e).__name__}
            )
            return Reply(f"❌ Не удалось загрузить сеансы на {date}. Попробуйте ещё раз 😔", failure_keyboard)

        if not labels:
            self._state.transition(user_id, DialogState.WAITING_FOR_DATE)
            return Reply(text, self._kb.tickets_date_keyboard())

        keyboard = self._kb.sessions_keyboard(labels)
        self._state.transition(user_id, DialogState.WAITING_FOR_SESSION, selected_date=date)
        return Reply(text, keyboard)

    def _show_tariffs(self, user_id: int, selection: TicketSelection, category: str) -> Reply:
        """
        Tariffs of category for the chosen date and session. Anything short of a
        non-empty tariff list leaves the user choosing a category.
        """
        date = selection.date_label()
        session = selection.session_label()
        retry_keyboard = self._kb.ticket_category_keyboard(category)
        try:
            tariffs = [parse_tariff(raw) for raw in self._park.fetch_tariffs(date)]
        except Exception as e:
            self._logger.exception(
                "Tariffs fetch failed", extra={"user_id": user_id, "error": type(e).__name__}
            )
            self._state.transition(user_id, DialogState.WAITING_FOR_CATEGORY)
            return Reply(TARIFFS_FAILED_TEXT, retry_keyboard)

        if not tariffs:
            self._state.transition(user_id, DialogState.WAITING_FOR_CATEGORY)
            return Reply(NO_TARIFFS_TEXT, retry_keyboard)

        filtered = filter_tariffs(tariffs, category)
        text = format_tariffs(date, session, category, filtered)
        if not filtered:
            self._state.transition(user_id, DialogState.WAITING_FOR_CATEGORY)
            return Reply(text, retry_keyboard)

        self._state.transition(user_id, DialogState.WAITING_FOR_PAYMENT, selected_category=category)
        return Reply(text, self._kb.tariffs_keyboard(category, self._tickets_url))


def _intent_category(intent: Intent) -> str | None:
    if intent.kind is IntentKind.CATEGORY_ADULT:
        return CATEGORY_ADULT
    if intent.kind is IntentKind.CATEGORY_CHILD:
        return CATEGORY_CHILD
    return None


def _payment_summary(selection: TicketSelection) -> str:
    category = CATEGORY_TITLES.get(selection.category_or_default(), CATEGORY_TITLES[CATEGORY_ADULT])
    return (
        f"{PAYMENT_DONE_TEXT}\n\n"
        f"📅 Дата: {selection.date_label()}\n"
        f"⏰ Сеанс: {selection.session_label()}\n"
        f"🎟 Категория: {category}"
    )
