from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Request, Response
from fastapi.responses import PlainTextResponse

from vkbot.application.dto.callback_event import VkCallbackEventDTO
from vkbot.core.config import settings
from vkbot.domain.entities.message import InboundMessage
from vkbot.infrastructure.vk.callback_verify import verify_callback_secret
from vkbot.wiring.dependencies import (
    get_handle_incoming_message_use_case,
    get_track_activity_use_case,
)


router = APIRouter()
logger = logging.getLogger(__name__)

OK = "ok"


def process_message(message: InboundMessage) -> None:
    get_track_activity_use_case().on_message(message.sender_id, message.text)
    get_handle_incoming_message_use_case().handle(message)


def process_message_allow(user_id: int) -> None:
    get_track_activity_use_case().on_message_allow(user_id)
    get_handle_incoming_message_use_case().welcome(user_id)


@router.post("/callback")
async def vk_callback(request: Request, background_tasks: BackgroundTasks) -> Response:
    try:
        body = await request.body()
        try:
            payload = json.loads(body.decode("utf-8")) if body else {}
            event = VkCallbackEventDTO.model_validate(payload)
        except Exception:
            logger.exception("Failed to parse callback body")
            return Response(status_code=400)

        if event.type == "confirmation":
            logger.info("Confirmation requested")
            return PlainTextResponse(settings.VK_CONFIRMATION_TOKEN)

        if not verify_callback_secret(event.secret, settings.VK_SECRET_KEY):
            return Response(status_code=403)

        if event.type == "message_new":
            message = event.extract_message()
            if message is None:
                logger.warning("message_new without sender", extra={"reason": "unparsed"})
            else:
                background_tasks.add_task(process_message, message)
            return PlainTextResponse(OK)

        if event.type == "message_allow":
            user_id = event.extract_allowed_user_id()
            if user_id is not None:
                logger.info("Messages allowed", extra={"user_id": user_id})
                background_tasks.add_task(process_message_allow, user_id)
            return PlainTextResponse(OK)

        logger.info("Callback ignored", extra={"reason": event.type})
        return PlainTextResponse(OK)
    except Exception as e:
        logger.exception("Fatal error in callback handler", extra={"error": str(e)})
        return Response(status_code=500)
