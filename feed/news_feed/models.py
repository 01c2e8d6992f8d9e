from __future__ import annotations

from datetime import datetime, timezone
import hashlib
import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

NEWS_ID_LENGTH = 16


class NewsItem(BaseModel):
    """One news record as fetched, tagged with a stable id and its fetch position."""

    model_config = ConfigDict(frozen=True)

    id: str
    position: int
    title: str = ""
    category: str | None = None
    date: str | None = None
    created_at: str | None = None
    summary: str | None = None
    content: str | None = None
    image: str | None = None
    posted_by: str | None = None
    created_at_ts: datetime | None = Field(default=None, exclude=True, repr=False)

    @property
    def display_date(self) -> str:
        return (self.date or "").replace("-", "/")


def news_identity(title: str, date: str | None, created_at: str | None) -> str:
    seed = "\x1f".join([title, date or "", created_at or ""])
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:NEWS_ID_LENGTH]


def parse_timestamp(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        raw = value.strip()
        if not raw:
            return None
        try:
            dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def ingest_news(records: Iterable[Any]) -> tuple[NewsItem, ...]:
    """Builds the immutable base collection; ids stay unique even for duplicate records."""
    items: list[NewsItem] = []
    seen_ids: dict[str, int] = {}
    for position, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("skipping news record at position=%s: not an object", position)
            continue
        title = _as_text(record.get("title")) or ""
        date = _as_text(record.get("date"))
        created_at = _as_text(record.get("created_at"))

        base_id = news_identity(title, date, created_at)
        occurrence = seen_ids.get(base_id, 0) + 1
        seen_ids[base_id] = occurrence
        item_id = base_id if occurrence == 1 else f"{base_id}-{occurrence}"

        items.append(
            NewsItem(
                id=item_id,
                position=position,
                title=title,
                category=_as_text(record.get("category")),
                date=date,
                created_at=created_at,
                summary=_as_raw_text(record.get("summary")),
                content=_as_raw_text(record.get("content")),
                image=_as_text(record.get("image")),
                posted_by=_as_text(record.get("posted_by")),
                created_at_ts=parse_timestamp(created_at),
            )
        )
    return tuple(items)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return str(value)


def _as_raw_text(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)
