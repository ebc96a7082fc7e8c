#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import time
from typing import Any

import httpx
from httpx import ConnectError


def build_payload(event_type: str, user_id: int, text: str, group_id: int, secret: str) -> dict[str, Any]:
    payload: dict[str, Any] = {"type": event_type, "group_id": group_id}
    if event_type == "message_new":
        payload["object"] = {
            "message": {
                "id": int(time.time()),
                "date": int(time.time()),
                "from_id": user_id,
                "peer_id": user_id,
                "text": text,
            }
        }
    elif event_type == "message_allow":
        payload["object"] = {"user_id": user_id, "key": ""}
    else:
        payload["object"] = {}
    if secret:
        payload["secret"] = secret
    return payload


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a test VK Callback API event")
    parser.add_argument("--url", default="http://127.0.0.1:8001/callback")
    parser.add_argument("--type", default="message_new", choices=["message_new", "message_allow", "confirmation"])
    parser.add_argument("--user", type=int, default=1)
    parser.add_argument("--group", type=int, default=1)
    parser.add_argument("--text", default="📅 Билеты")
    parser.add_argument("--secret", default="", help="Callback API secret key")
    args = parser.parse_args()

    payload = build_payload(args.type, args.user, args.text, args.group, args.secret)
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")

    try:
        resp = httpx.post(args.url, content=body, headers={"Content-Type": "application/json"}, timeout=10.0)
    except ConnectError:
        print("Connection refused. Is the FastAPI server running?")
        print("Try: uvicorn vkbot.main:app --reload --port 8001")
        return

    print(resp.status_code)
    if resp.text:
        print(resp.text)


if __name__ == "__main__":
    main()
