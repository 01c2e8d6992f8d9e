from __future__ import annotations

from enum import Enum
import logging

from news_feed.filters import NewsFilterCriteria, derive_view, distinct_categories, latest
from news_feed.models import NewsItem, ingest_news
from news_feed.rendering import fetch_failed_message
from news_feed.services.news_client import NewsClient, NewsFetchError

logger = logging.getLogger(__name__)


class FeedState(str, Enum):
    UNINITIALIZED = "uninitialized"
    FETCHING = "fetching"
    READY = "ready"
    FETCH_FAILED = "fetch_failed"


class FeedStateError(RuntimeError):
    """Raised when an operation is not allowed in the engine's current state."""


class NewsFeedEngine:
    """Owns the news collection for one page session.

    The collection is fetched once and never reordered; every view is a
    derived copy, so positions recorded at ingestion stay valid.
    """

    def __init__(self, client: NewsClient) -> None:
        self.client = client
        self.state = FeedState.UNINITIALIZED
        self.error_message: str | None = None
        self._items: tuple[NewsItem, ...] = ()
        self._by_id: dict[str, NewsItem] = {}

    @property
    def items(self) -> tuple[NewsItem, ...]:
        return self._items

    async def load(self) -> FeedState:
        if self.state is not FeedState.UNINITIALIZED:
            raise FeedStateError(f"news feed already loaded (state={self.state.value})")

        self.state = FeedState.FETCHING
        try:
            records = await self.client.fetch_news()
        except NewsFetchError as exc:
            logger.error("news fetch failed: %s", exc)
            self._items = ()
            self._by_id = {}
            self.error_message = fetch_failed_message(str(exc))
            self.state = FeedState.FETCH_FAILED
            return self.state

        self._items = ingest_news(records)
        self._by_id = {item.id: item for item in self._items}
        self.state = FeedState.READY
        logger.info("news feed ready items=%s", len(self._items))
        return self.state

    def view(self, criteria: NewsFilterCriteria | None = None) -> list[NewsItem]:
        self._require_loaded()
        return derive_view(self._items, criteria)

    def latest(self, count: int) -> list[NewsItem]:
        self._require_loaded()
        return latest(self._items, count)

    def categories(self) -> list[str]:
        self._require_loaded()
        return distinct_categories(self._items)

    def resolve(self, address: str | None) -> NewsItem | None:
        """Looks up an item by stable id, falling back to a fetch position for old links."""
        self._require_loaded()
        if address is None:
            return None
        key = address.strip()
        item = self._by_id.get(key)
        if item is not None:
            return item
        if not key.isdecimal():
            return None
        position = int(key)
        for candidate in self._items:
            if candidate.position == position:
                return candidate
        return None

    def _require_loaded(self) -> None:
        if self.state in (FeedState.UNINITIALIZED, FeedState.FETCHING):
            raise FeedStateError(f"news feed not loaded (state={self.state.value})")
