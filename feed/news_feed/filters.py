from __future__ import annotations

from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

from news_feed.models import NewsItem

ALL_CATEGORIES = "all"
ELLIPSIS = "..."

DateOrder = Literal["asc", "desc"]


class NewsFilterCriteria(BaseModel):
    """Category/date-order selection; the defaults are the initial list view."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    category: str = ALL_CATEGORIES
    date_order: DateOrder = Field(default="desc", alias="dateOrder")

    @field_validator("category", mode="before")
    @classmethod
    def _blank_category_is_all(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return ALL_CATEGORIES
        return value


def short_summary(summary: str | None, limit: int = 50) -> str:
    if not summary:
        return ""
    words = summary.split()
    shortened = " ".join(words[:limit])
    return shortened + (ELLIPSIS if len(words) > limit else "")


def filter_by_category(items: Sequence[NewsItem], category: str) -> list[NewsItem]:
    if category == ALL_CATEGORIES:
        return list(items)
    return [item for item in items if item.category == category]


def sort_by_created_at(items: Sequence[NewsItem], date_order: DateOrder = "desc") -> list[NewsItem]:
    """Stable sort on the parsed timestamp; unparseable timestamps go last in either order."""
    dated = [item for item in items if item.created_at_ts is not None]
    undated = [item for item in items if item.created_at_ts is None]
    # sorted() keeps ties in input order even with reverse=True.
    ordered = sorted(dated, key=lambda item: item.created_at_ts, reverse=date_order == "desc")
    return ordered + undated


def derive_view(items: Sequence[NewsItem], criteria: NewsFilterCriteria | None = None) -> list[NewsItem]:
    criteria = criteria or NewsFilterCriteria()
    return sort_by_created_at(filter_by_category(items, criteria.category), criteria.date_order)


def latest(items: Sequence[NewsItem], count: int) -> list[NewsItem]:
    return sort_by_created_at(items, "desc")[: max(0, count)]


def distinct_categories(items: Sequence[NewsItem]) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        if item.category and item.category not in seen:
            seen[item.category] = None
    return list(seen)
