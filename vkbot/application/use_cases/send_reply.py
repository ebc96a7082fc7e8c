from __future__ import annotations

import logging

from vkbot.application.ports.message_platform import MessagePlatformPort


class SendReplyUseCase:
    def __init__(self, platform: MessagePlatformPort, auto_reply_enabled: bool = True) -> None:
        self._platform = platform
        self._auto_reply_enabled = auto_reply_enabled
        self._logger = logging.getLogger(__name__)

    def execute(self, peer_id: int, text: str, keyboard: str | None = None) -> bool:
        """Send a reply. Returns True if actually sent, False if skipped or rejected."""
        if not self._auto_reply_enabled:
            self._logger.info("WOULD_SEND_REPLY", extra={"peer_id": peer_id})
            self._logger.info("AUTO_REPLY_ENABLED=false -> skipping send")
            return False
        return self._platform.send_message(peer_id, text, keyboard)
