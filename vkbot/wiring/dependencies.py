from functools import lru_cache
import logging

from vkbot.application.ports.command_catalog import CommandCatalogPort
from vkbot.application.ports.park_data import ParkDataPort
from vkbot.application.ports.user_sync import UserSyncPort
from vkbot.application.services.bot_stats import BotStatsService
from vkbot.application.services.conversation_state import ConversationStateService
from vkbot.application.use_cases.admin_commands import AdminCommandsUseCase
from vkbot.application.use_cases.handle_incoming_message import HandleIncomingMessageUseCase
from vkbot.application.use_cases.send_reply import SendReplyUseCase
from vkbot.application.use_cases.track_activity import TrackActivityUseCase
from vkbot.application.utils.keyboards import KeyboardProvider
from vkbot.core.config import settings
from vkbot.infrastructure.admin_panel.user_sync_client import AdminPanelUserSync
from vkbot.infrastructure.db.command_repository import SqlCommandRepository
from vkbot.infrastructure.db.session import build_engine, build_session_factory
from vkbot.infrastructure.park.mock_park import MockParkData
from vkbot.infrastructure.park.nordciti_client import NordcitiParkClient
from vkbot.infrastructure.scheduler.activity_worker import ActivityWorker
from vkbot.infrastructure.store.json_store import JsonConversationStore
from vkbot.infrastructure.store.memory_store import MemoryConversationStore
from vkbot.infrastructure.vk.mock_platform import MockVkPlatform
from vkbot.infrastructure.vk.vk_client import VkClient
from vkbot.infrastructure.vk.vk_platform import VkPlatform


def _is_dev() -> bool:
    return settings.ENV.lower() in {"dev", "local"}


@lru_cache
def get_conversation_store() -> MemoryConversationStore | JsonConversationStore:
    if _is_dev():
        return JsonConversationStore(settings.STORE_DIR)
    return MemoryConversationStore()


@lru_cache
def get_vk_platform() -> VkPlatform | MockVkPlatform:
    logger = logging.getLogger(__name__)
    logger.info("ENV=%s VK_TOKEN present=%s", settings.ENV, bool(settings.VK_TOKEN))

    if not settings.VK_TOKEN:
        if _is_dev():
            logger.info("Using MockVkPlatform (token missing, ENV=dev/local)")
            return MockVkPlatform()
        raise ValueError("VK_TOKEN is required to send VK replies.")

    client = VkClient(token=settings.VK_TOKEN, api_version=settings.VK_API_VERSION)
    return VkPlatform(client=client)


@lru_cache
def get_park_data() -> ParkDataPort:
    if _is_dev():
        return MockParkData()
    return NordcitiParkClient()


@lru_cache
def get_engine():
    return build_engine(settings.DATABASE_URL)


@lru_cache
def get_command_catalog() -> CommandCatalogPort:
    return SqlCommandRepository(build_session_factory(get_engine()))


@lru_cache
def get_user_sync() -> UserSyncPort:
    return AdminPanelUserSync()


@lru_cache
def get_bot_stats() -> BotStatsService:
    return BotStatsService()


@lru_cache
def get_track_activity_use_case() -> TrackActivityUseCase:
    return TrackActivityUseCase(
        stats=get_bot_stats(),
        directory=get_vk_platform(),
        user_sync=get_user_sync(),
        schedule_offline=get_activity_worker().schedule_offline,
    )


@lru_cache
def get_activity_worker() -> ActivityWorker:
    return ActivityWorker(
        on_due=lambda user_id: get_track_activity_use_case().mark_offline(user_id),
        delay_seconds=settings.OFFLINE_AFTER_SECONDS,
    )


@lru_cache
def get_handle_incoming_message_use_case() -> HandleIncomingMessageUseCase:
    return HandleIncomingMessageUseCase(
        state=ConversationStateService(get_conversation_store()),
        keyboards=KeyboardProvider(),
        send_reply=SendReplyUseCase(
            platform=get_vk_platform(), auto_reply_enabled=settings.AUTO_REPLY_ENABLED
        ),
        park=get_park_data(),
        commands=get_command_catalog(),
        admin_commands=AdminCommandsUseCase(user_sync=get_user_sync()),
        tickets_url=settings.TICKETS_URL,
        admin_user_ids=settings.ADMIN_USER_IDS,
    )
