from __future__ import annotations

import hmac
import logging


logger = logging.getLogger(__name__)


def verify_callback_secret(received: str | None, expected: str | None) -> bool:
    """Compare the `secret` field of a callback event with the configured one."""
    if not expected:
        return True

    if not received:
        logger.warning("Callback event without secret rejected")
        return False

    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))
