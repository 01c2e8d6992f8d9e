from typing import Any

from pydantic import BaseModel, Field, field_validator


class PostingFilters(BaseModel):
    q: str | None = None
    location: str | None = None
    job_type: str | None = None
    japanese_level: str | None = None
    job_category: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    def is_empty(self) -> bool:
        return not any(self.model_dump().values())


class PostingOut(BaseModel):
    id: int
    title: str
    summary: str | None = None
    company_name: str | None = None
    salary: str | None = None
    job_type: str | None = None
    job_location: str | None = None
    japanese_level: str | None = None
    job_category: str | None = None
    minimum_leave_per_year: int | str | None = None
    image: str | None = None
    date: str | None = None


class PostingFilterOptions(BaseModel):
    location: list[str] = Field(default_factory=list)
    job_type: list[str] = Field(default_factory=list)
    japanese_level: list[str] = Field(default_factory=list)
    job_category: list[str] = Field(default_factory=list)


class PostingSearchOut(BaseModel):
    items: list[PostingOut] = Field(default_factory=list)
    filters: PostingFilterOptions = Field(default_factory=PostingFilterOptions)
