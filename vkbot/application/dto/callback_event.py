from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from vkbot.domain.entities.message import InboundMessage


class VkCallbackEventDTO(BaseModel):
    type: str | None = None
    object: dict[str, Any] = Field(default_factory=dict)
    group_id: int | None = None
    secret: str | None = None

    def extract_message(self) -> InboundMessage | None:
        # Newer API versions nest the message under object.message.
        raw = self.object.get("message")
        if not isinstance(raw, dict):
            raw = self.object

        from_id = _as_int(raw.get("from_id"))
        user_id = _as_int(raw.get("user_id"))
        sender_id = from_id or user_id
        peer_id = _as_int(raw.get("peer_id")) or from_id or user_id
        if not sender_id or not peer_id:
            return None

        text = raw.get("text")
        return InboundMessage(
            sender_id=sender_id,
            peer_id=peer_id,
            text=str(text) if text is not None else "",
            message_id=_as_int(raw.get("id")),
        )

    def extract_allowed_user_id(self) -> int | None:
        return _as_int(self.object.get("user_id"))


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.lstrip("-").isdigit():
        return int(value)
    return None
