from __future__ import annotations

from typing import Any

import pytest
from fastapi.testclient import TestClient

from careers_api.main import app
from careers_api.schemas.postings import PostingFilters
from careers_api.services.query_builder import EXACT_FILTER_COLUMNS, SEARCH_COLUMNS
from careers_api.services.repository import (
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    get_repository,
)


def make_post(post_id: int, **fields: Any) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": post_id,
        "post_type": "job",
        "title": f"Posting {post_id}",
        "summary": "介護施設でのお仕事です",
        "company_name": "株式会社サンプル",
        "salary": "月給25万円",
        "job_type": "正社員",
        "job_location": "大阪",
        "japanese_level": "N2",
        "job_category": "介護",
        "minimum_leave_per_year": 105,
        "image": None,
        "date": "2024-05-01",
    }
    row.update(fields)
    return row


class FakePostingRepository:
    """In-memory stand-in that applies the same predicates as the SQL builder."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, news: list[dict[str, Any]] | None = None) -> None:
        self.rows = rows or []
        self.news = news or []
        self.unavailable = False
        self.received_filters: list[PostingFilters] = []

    async def search_postings(self, filters: PostingFilters) -> list[dict[str, Any]]:
        self._check_available()
        self.received_filters.append(filters)
        matched = [row for row in self.rows if row["post_type"] == "job" and self._matches(row, filters)]
        matched.sort(key=lambda row: row["id"])
        matched.sort(key=lambda row: row["date"], reverse=True)
        return [self._public(row) for row in matched]

    async def list_posting_filter_options(self) -> dict[str, list[str]]:
        self._check_available()
        options: dict[str, list[str]] = {}
        for name, column in EXACT_FILTER_COLUMNS.items():
            values = {
                row[column].strip() for row in self.rows if row["post_type"] == "job" and (row.get(column) or "").strip()
            }
            options[name] = sorted(values)
        return options

    async def get_posting(self, posting_id: int) -> dict[str, Any]:
        self._check_available()
        for row in self.rows:
            if row["id"] == posting_id and row["post_type"] == "job":
                return self._public(row)
        raise RepositoryNotFoundError("posting not found")

    async def list_news(self) -> list[dict[str, Any]]:
        self._check_available()
        return list(self.news)

    def _check_available(self) -> None:
        if self.unavailable:
            raise RepositoryUnavailableError("posts query failed")

    @staticmethod
    def _matches(row: dict[str, Any], filters: PostingFilters) -> bool:
        if filters.q:
            term = filters.q.lower()
            if not any(term in (row.get(column) or "").lower() for column in SEARCH_COLUMNS):
                return False
        for name, column in EXACT_FILTER_COLUMNS.items():
            value = getattr(filters, name)
            if value and (row.get(column) or "").strip() != value:
                return False
        return True

    @staticmethod
    def _public(row: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in row.items() if key != "post_type"}


@pytest.fixture(name="make_post")
def make_post_fixture():
    return make_post


@pytest.fixture
def fake_repository() -> FakePostingRepository:
    return FakePostingRepository(
        rows=[
            make_post(1, title="介護スタッフ募集", date="2024-04-01", job_location="大阪", job_type="正社員"),
            make_post(
                2,
                title="ITエンジニア",
                summary="Webアプリ開発",
                company_name="テック株式会社",
                job_location="東京",
                job_category="IT",
                japanese_level="N1",
                date="2024-05-10",
                image="../uploads/it.jpg",
            ),
            make_post(3, title="ホテル受付", job_location="東京", job_category="宿泊", job_type="契約社員", date="2024-05-01"),
            make_post(4, title="倉庫作業", job_location="大阪", job_category="物流", japanese_level="N3", date="2024-05-01"),
            make_post(5, title="社内報", post_type="news", date="2024-06-01"),
        ],
        news=[
            {
                "title": "新オフィス開設",
                "category": "お知らせ",
                "date": "2024-05-10",
                "created_at": "2024-05-10T09:00:00",
                "summary": "東京に新しいオフィスを開設しました",
                "content": "詳細はこちら",
                "image": None,
                "posted_by": "ITF",
            }
        ],
    )


@pytest.fixture
def api_client(fake_repository: FakePostingRepository) -> TestClient:
    app.dependency_overrides[get_repository] = lambda: fake_repository

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
