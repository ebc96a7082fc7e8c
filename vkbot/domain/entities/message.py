from dataclasses import dataclass


@dataclass(frozen=True)
class InboundMessage:
    sender_id: int
    peer_id: int
    text: str
    message_id: int | None = None
