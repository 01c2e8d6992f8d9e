from __future__ import annotations

from datetime import date, datetime
from functools import lru_cache
import logging
from typing import Any

import asyncpg  # type: ignore[import-untyped]
from asyncpg import exceptions as pg_exc

from careers_api.core.config import get_settings
from careers_api.schemas.postings import PostingFilters
from careers_api.services.query_builder import (
    EXACT_FILTER_COLUMNS,
    POSTING_COLUMNS,
    CompiledQuery,
    PostingQuery,
    build_filter_options_query,
)

logger = logging.getLogger(__name__)

JOB_POST_TYPE = "job"
NEWS_POST_TYPE = "news"


class RepositoryError(Exception):
    """Base repository error."""


class RepositoryUnavailableError(RepositoryError):
    """Raised when the database is unavailable, not configured, or a query fails."""


class RepositoryNotFoundError(RepositoryError):
    """Raised when the requested entity does not exist."""


class PostgresRepository:
    def __init__(
        self,
        database_url: str | None,
        min_pool_size: int,
        max_pool_size: int,
        command_timeout_seconds: float = 15.0,
    ) -> None:
        self.database_url = database_url
        self.min_pool_size = min_pool_size
        self.max_pool_size = max_pool_size
        self.command_timeout_seconds = command_timeout_seconds
        self._pool: asyncpg.Pool | None = None

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def search_postings(self, filters: PostingFilters) -> list[dict[str, Any]]:
        query = PostingQuery.from_filters(filters, post_type=JOB_POST_TYPE).compile()
        rows = await self._fetch(query)
        return [self._posting_row_to_dict(row) for row in rows]

    async def list_posting_filter_options(self) -> dict[str, list[str]]:
        rows = await self._fetch(build_filter_options_query(post_type=JOB_POST_TYPE))
        options: dict[str, list[str]] = {name: [] for name in EXACT_FILTER_COLUMNS}
        for row in rows:
            facet = row["facet"]
            if facet in options:
                options[facet].append(row["value"])
        return options

    async def get_posting(self, posting_id: int) -> dict[str, Any]:
        columns_sql = ", ".join(POSTING_COLUMNS)
        query = CompiledQuery(
            sql=f"""
            select {columns_sql}
            from posts
            where post_type = $1
              and id = $2
            """,
            params=[JOB_POST_TYPE, posting_id],
        )
        pool = await self._get_pool()
        try:
            rows = await pool.fetch(query.sql, *query.params)
        except (pg_exc.InvalidTextRepresentationError, asyncpg.DataError) as exc:
            # Ids outside the column range cannot exist.
            raise RepositoryNotFoundError("posting not found") from exc
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.exception("posts query failed")
            raise RepositoryUnavailableError("posts query failed") from exc
        if not rows:
            raise RepositoryNotFoundError("posting not found")
        return self._posting_row_to_dict(rows[0])

    async def list_news(self) -> list[dict[str, Any]]:
        rows = await self._fetch(
            CompiledQuery(
                sql="""
                select
                  title,
                  category,
                  date,
                  created_at,
                  summary,
                  content,
                  image,
                  posted_by
                from posts
                where post_type = $1
                order by id asc
                """,
                params=[NEWS_POST_TYPE],
            )
        )
        return [self._news_row_to_dict(row) for row in rows]

    async def _fetch(self, query: CompiledQuery) -> list[asyncpg.Record]:
        pool = await self._get_pool()
        try:
            return await pool.fetch(query.sql, *query.params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            logger.exception("posts query failed")
            raise RepositoryUnavailableError("posts query failed") from exc

    async def _get_pool(self) -> asyncpg.Pool:
        if not self.database_url:
            raise RepositoryUnavailableError("ITF_DATABASE_URL is required")

        if self._pool is not None:
            return self._pool

        try:
            self._pool = await asyncpg.create_pool(
                dsn=self.database_url,
                min_size=self.min_pool_size,
                max_size=self.max_pool_size,
                command_timeout=self.command_timeout_seconds,
            )
            return self._pool
        except Exception as exc:  # pragma: no cover - depends on environment
            raise RepositoryUnavailableError("database unavailable") from exc

    @classmethod
    def _posting_row_to_dict(cls, row: asyncpg.Record) -> dict[str, Any]:
        return {
            "id": int(row["id"]),
            "title": cls._coerce_text(row["title"]) or "",
            "summary": cls._coerce_text(row["summary"]),
            "company_name": cls._coerce_text(row["company_name"]),
            "salary": cls._coerce_text(row["salary"]),
            "job_type": cls._coerce_text(row["job_type"]),
            "job_location": cls._coerce_text(row["job_location"]),
            "japanese_level": cls._coerce_text(row["japanese_level"]),
            "job_category": cls._coerce_text(row["job_category"]),
            "minimum_leave_per_year": row["minimum_leave_per_year"],
            "image": cls._coerce_text(row["image"]),
            "date": cls._coerce_date_text(row["date"]),
        }

    @classmethod
    def _news_row_to_dict(cls, row: asyncpg.Record) -> dict[str, Any]:
        return {
            "title": cls._coerce_text(row["title"]) or "",
            "category": cls._coerce_text(row["category"]),
            "date": cls._coerce_date_text(row["date"]),
            "created_at": row["created_at"],
            "summary": row["summary"],
            "content": row["content"],
            "image": cls._coerce_text(row["image"]),
            "posted_by": cls._coerce_text(row["posted_by"]),
        }

    @staticmethod
    def _coerce_text(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return str(value)

    @staticmethod
    def _coerce_date_text(value: Any) -> str | None:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.strftime("%Y-%m-%d %H:%M:%S")
        if isinstance(value, date):
            return value.isoformat()
        return str(value)


@lru_cache
def get_repository() -> PostgresRepository:
    settings = get_settings()
    return PostgresRepository(
        database_url=settings.database_url,
        min_pool_size=settings.database_pool_min_size,
        max_pool_size=settings.database_pool_max_size,
        command_timeout_seconds=settings.database_command_timeout_seconds,
    )
