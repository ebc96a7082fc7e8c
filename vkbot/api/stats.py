from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from vkbot.wiring.dependencies import get_bot_stats


router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/stats/memory")
def memory_stats() -> JSONResponse:
    try:
        service = get_bot_stats()
        stats = service.get_stats()
        data = {
            "general": {
                "totalUsers": stats.total_users,
                "activeUsersToday": stats.active_users_today,
                "onlineUsers": stats.online_users,
                "messagesLastHour": stats.messages_last_hour,
                "totalMessages": stats.total_messages,
                "totalCommands": stats.total_commands,
            },
            "commands": service.get_command_stats(),
        }
        return JSONResponse({"success": True, "data": data})
    except Exception as e:
        logger.exception("Error getting stats", extra={"error": str(e)})
        return JSONResponse({"success": False, "message": str(e)}, status_code=500)
