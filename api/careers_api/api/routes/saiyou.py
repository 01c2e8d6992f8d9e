from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status as http_status
from fastapi.responses import HTMLResponse

from careers_api.api.routes.postings import get_posting_filters
from careers_api.core.templating import render_template
from careers_api.schemas.postings import PostingFilters
from careers_api.services.repository import (
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    get_repository,
)

router = APIRouter()

# Filter name -> control label, in form order.
FILTER_CONTROL_LABELS = {
    "location": "勤務地",
    "job_type": "職種",
    "japanese_level": "日本語レベル",
    "job_category": "カテゴリ",
}


def build_filter_controls(filters: PostingFilters, options: dict[str, list[str]]) -> list[dict[str, Any]]:
    return [
        {
            "name": name,
            "label": label,
            "options": options.get(name, []),
            "selected": getattr(filters, name),
        }
        for name, label in FILTER_CONTROL_LABELS.items()
    ]


@router.get("", response_class=HTMLResponse)
async def saiyou_page(
    filters: PostingFilters = Depends(get_posting_filters),
    repository=Depends(get_repository),
) -> HTMLResponse:
    try:
        postings = await repository.search_postings(filters)
        options = await repository.list_posting_filter_options()
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc

    html = render_template(
        "saiyou.html",
        filters=filters,
        postings=postings,
        filter_controls=build_filter_controls(filters, options),
    )
    return HTMLResponse(content=html)


@router.get("/{posting_id}", response_class=HTMLResponse)
async def posting_detail_page(posting_id: int, repository=Depends(get_repository)) -> HTMLResponse:
    try:
        job = await repository.get_posting(posting_id=posting_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return HTMLResponse(content=render_template("posting_detail.html", job=job))
