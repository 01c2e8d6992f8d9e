from __future__ import annotations

import asyncio
from typing import Any, Callable

import httpx
import pytest

from news_feed.engine import NewsFeedEngine
from news_feed.models import NewsItem, ingest_news
from news_feed.page import NewsPage, PageKind, PageRender
from news_feed.rendering import NewsRenderer
from news_feed.services.news_client import NewsClient

DATA_URL = "https://itf.example/php/fetch_news.php"

LONG_SUMMARY = " ".join(f"word{i}" for i in range(60))


@pytest.fixture
def news_records() -> list[dict[str, Any]]:
    return [
        {
            "title": "社員旅行を実施しました",
            "category": "お知らせ",
            "date": "2024-03-01",
            "created_at": "2024-03-01 10:00:00",
            "summary": "沖縄へ社員旅行に行きました",
            "content": "三日間の旅行でした",
            "image": "uploads/trip.jpg",
            "posted_by": "広報",
        },
        {
            "title": "東京オフィス移転",
            "category": "会社情報",
            "date": "2024-05-10",
            "created_at": "2024-05-10T09:00:00Z",
            "summary": LONG_SUMMARY,
            "content": "新住所は蒲田です",
            "image": None,
            "posted_by": "総務",
        },
        {
            "title": "ビザ更新サポート開始",
            "category": "お知らせ",
            "date": "2024-04-20",
            "created_at": "2024-04-20 08:30:00",
            "summary": "在留資格の更新をサポートします",
            "content": "詳細はお問い合わせください",
            "image": "",
            "posted_by": "支援チーム",
        },
        {
            "title": "合同説明会のご案内",
            "category": "イベント",
            "date": "2024-05-10",
            "created_at": "2024-05-10 09:00:00",
            "summary": "",
            "content": "大阪会場で開催します",
            "image": "uploads/event.jpg",
            "posted_by": "採用チーム",
        },
    ]


@pytest.fixture
def news_items(news_records: list[dict[str, Any]]) -> tuple[NewsItem, ...]:
    return ingest_news(news_records)


@pytest.fixture
def load_page() -> Callable[..., tuple[NewsPage, PageRender]]:
    def _load(
        payload: Any,
        *,
        kind: PageKind = PageKind.NEWS,
        query_params: dict[str, str] | None = None,
        status_code: int = 200,
    ) -> tuple[NewsPage, PageRender]:
        async def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, json=payload, request=request)

        async def run() -> tuple[NewsPage, PageRender]:
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
                engine = NewsFeedEngine(NewsClient(DATA_URL, client=http_client))
                page = NewsPage(engine, NewsRenderer(), kind=kind, query_params=query_params)
                return page, await page.setup()

        return asyncio.run(run())

    return _load
