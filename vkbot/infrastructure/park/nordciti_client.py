from __future__ import annotations

import logging
from typing import Any

import httpx

from vkbot.application.exceptions import ParkApiContractError, ParkApiError
from vkbot.application.ports.park_data import ParkDataPort
from vkbot.core.config import settings
from vkbot.domain.entities.park import ParkLoad

SESSION_WRAPPER_KEYS = ("result", "data", "sessions")


class NordcitiParkClient(ParkDataPort):
    """Water park gateway: current load, sessions and tariffs per date."""

    def __init__(
        self,
        base_url: str | None = None,
        site_id: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._base_url = (base_url or settings.PARK_API_BASE_URL).rstrip("/")
        self._site_id = site_id or settings.PARK_SITE_ID
        self._client = client or httpx.Client(timeout=timeout or settings.PARK_API_TIMEOUT_SECONDS)
        self._logger = logging.getLogger(__name__)

    def fetch_current_load(self) -> ParkLoad:
        payload = self._request("POST", "/CurrentLoad", json={"SiteID": self._site_id})
        if not isinstance(payload, dict):
            raise ParkApiContractError("CurrentLoad response is not an object")
        count = _read_int(payload, "count", "Count")
        load = _read_int(payload, "load", "Load")
        if count is None or load is None:
            raise ParkApiContractError(f"CurrentLoad response misses count/load: {payload!r}")
        return ParkLoad(count=count, load_percent=load)

    def fetch_sessions(self, date: str) -> list[dict[str, Any]]:
        payload = self._request("GET", "/getSessionsAqua", params={"date": date})
        if isinstance(payload, list):
            return [item for item in payload if isinstance(item, dict)]
        if isinstance(payload, dict):
            for key in SESSION_WRAPPER_KEYS:
                value = payload.get(key)
                if isinstance(value, list):
                    return [item for item in value if isinstance(item, dict)]
        self._logger.warning("Unrecognized sessions payload", extra={"reason": type(payload).__name__})
        return []

    def fetch_tariffs(self, date: str) -> list[dict[str, Any]]:
        payload = self._request("GET", "/getTariffsAqua", params={"date": date})
        result = payload.get("result") if isinstance(payload, dict) else None
        if result is None:
            return []
        if not isinstance(result, list):
            raise ParkApiContractError("getTariffsAqua result is not a list")
        return [item for item in result if isinstance(item, dict)]

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Park gateway error",
                extra={"reason": path, "error": f"status={e.response.status_code}"},
            )
            raise ParkApiError(f"{path} returned {e.response.status_code}") from e
        except httpx.HTTPError as e:
            self._logger.error("Park gateway unreachable", extra={"reason": path, "error": str(e)})
            raise ParkApiError(f"{path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise ParkApiContractError(f"{path} returned invalid JSON") from e


def _read_int(payload: dict[str, Any], *keys: str) -> int | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return int(value)
    return None
