from datetime import datetime

from pydantic import BaseModel


class NewsItemOut(BaseModel):
    title: str
    category: str | None = None
    date: str | None = None
    created_at: datetime | str | None = None
    summary: str | None = None
    content: str | None = None
    image: str | None = None
    posted_by: str | None = None
