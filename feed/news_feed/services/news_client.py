from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class NewsFetchError(Exception):
    """Raised when the news data endpoint cannot supply a usable collection."""


class NewsClient:
    def __init__(
        self,
        data_url: str,
        *,
        timeout_seconds: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.data_url = data_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def fetch_news(self) -> list[dict[str, Any]]:
        logger.info("fetching news data url=%s", self.data_url)
        if self._client is not None:
            payload = await self._get_payload(self._client)
        else:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as temp_client:
                payload = await self._get_payload(temp_client)

        if isinstance(payload, dict):
            error = payload.get("error")
            if error:
                raise NewsFetchError(str(error))
            raise NewsFetchError("unexpected news payload: object without items")
        if not isinstance(payload, list):
            raise NewsFetchError(f"unexpected news payload type: {type(payload).__name__}")
        logger.info("fetched news items count=%s", len(payload))
        return payload

    async def _get_payload(self, client: httpx.AsyncClient) -> Any:
        try:
            response = await client.get(self.data_url, headers={"Accept": "application/json"})
        except httpx.HTTPError as exc:
            raise NewsFetchError(f"network error: {exc}") from exc

        if not response.is_success:
            raise NewsFetchError(
                f"Network response was not ok: {response.status_code} {response.reason_phrase}".rstrip()
            )
        try:
            return response.json()
        except ValueError as exc:
            raise NewsFetchError("news payload is not valid JSON") from exc
