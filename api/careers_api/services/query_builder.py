from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from careers_api.schemas.postings import PostingFilters

LIKE_ESCAPE_CHAR = "\\"

POSTING_COLUMNS = (
    "id",
    "title",
    "summary",
    "company_name",
    "salary",
    "job_type",
    "job_location",
    "japanese_level",
    "job_category",
    "minimum_leave_per_year",
    "image",
    "date",
)

# Columns searched by the free-text criterion, in match order.
SEARCH_COLUMNS = ("title", "summary", "company_name", "job_location", "job_category")

# Filter name -> column for exact-match criteria.
EXACT_FILTER_COLUMNS = {
    "location": "job_location",
    "job_type": "job_type",
    "japanese_level": "japanese_level",
    "job_category": "job_category",
}


@dataclass(slots=True)
class Predicate:
    """A clause template whose `{}` slots are filled with bound placeholders."""

    template: str
    values: tuple[Any, ...] = ()


@dataclass(slots=True)
class CompiledQuery:
    sql: str
    params: list[Any]


@dataclass(slots=True)
class PostingQuery:
    post_type: str = "job"
    predicates: list[Predicate] = field(default_factory=list)

    @classmethod
    def from_filters(cls, filters: PostingFilters, *, post_type: str = "job") -> PostingQuery:
        query = cls(post_type=post_type)
        if filters.q:
            query.add_substring_match(SEARCH_COLUMNS, filters.q)
        for name, column in EXACT_FILTER_COLUMNS.items():
            value = getattr(filters, name)
            if value:
                query.add_equals(column, value)
        return query

    def add_equals(self, column: str, value: Any) -> None:
        # Trimmed like the facet values, so every listed option can match.
        self.predicates.append(Predicate(f"trim(p.{column}::text) = {{}}", (value,)))

    def add_substring_match(self, columns: tuple[str, ...], term: str) -> None:
        pattern = f"%{escape_like(term)}%"
        # Every column reuses the same placeholder; backslash is the default LIKE escape.
        clause = " or ".join(f"p.{column} ilike {{0}}" for column in columns)
        self.predicates.append(Predicate(f"({clause})", (pattern,)))

    def compile(self) -> CompiledQuery:
        params: list[Any] = []

        def bind(value: Any) -> str:
            params.append(value)
            return f"${len(params)}"

        conditions = [f"p.post_type = {bind(self.post_type)}"]
        for predicate in self.predicates:
            tokens = [bind(value) for value in predicate.values]
            conditions.append(predicate.template.format(*tokens))

        where_sql = "\n              and ".join(conditions)
        columns_sql = ",\n              ".join(f"p.{column}" for column in POSTING_COLUMNS)
        sql = f"""
            select
              {columns_sql}
            from posts p
            where {where_sql}
            order by p.date desc, p.id asc
            """
        return CompiledQuery(sql=sql, params=params)


def escape_like(term: str) -> str:
    return (
        term.replace(LIKE_ESCAPE_CHAR, LIKE_ESCAPE_CHAR * 2)
        .replace("%", f"{LIKE_ESCAPE_CHAR}%")
        .replace("_", f"{LIKE_ESCAPE_CHAR}_")
    )


def build_filter_options_query(*, post_type: str = "job") -> CompiledQuery:
    selects = [
        f"""
              select '{name}'::text as facet, trim(p.{column}::text) as value
              from posts p
              where p.post_type = $1
                and nullif(trim(p.{column}::text), '') is not null"""
        for name, column in EXACT_FILTER_COLUMNS.items()
    ]
    union_sql = "\n              union\n".join(selects)
    sql = f"""
            select facet, value
            from ({union_sql}
            ) options
            order by facet asc, value asc
            """
    return CompiledQuery(sql=sql, params=[post_type])
