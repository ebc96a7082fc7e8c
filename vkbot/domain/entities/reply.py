from dataclasses import dataclass


@dataclass(frozen=True)
class Reply:
    text: str
    keyboard: str | None = None
