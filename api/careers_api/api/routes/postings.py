from fastapi import APIRouter, Depends, HTTPException, Query, status as http_status

from careers_api.schemas.postings import PostingFilterOptions, PostingFilters, PostingOut, PostingSearchOut
from careers_api.services.repository import (
    RepositoryNotFoundError,
    RepositoryUnavailableError,
    get_repository,
)

router = APIRouter()


def get_posting_filters(
    q: str | None = Query(default=None),
    location: str | None = Query(default=None),
    job_type: str | None = Query(default=None),
    japanese_level: str | None = Query(default=None),
    job_category: str | None = Query(default=None),
) -> PostingFilters:
    return PostingFilters(
        q=q,
        location=location,
        job_type=job_type,
        japanese_level=japanese_level,
        job_category=job_category,
    )


@router.get("", response_model=PostingSearchOut)
async def search_postings(
    filters: PostingFilters = Depends(get_posting_filters),
    repository=Depends(get_repository),
) -> PostingSearchOut:
    try:
        rows = await repository.search_postings(filters)
        options = await repository.list_posting_filter_options()
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return PostingSearchOut(
        items=[PostingOut(**row) for row in rows],
        filters=PostingFilterOptions(**options),
    )


@router.get("/{posting_id}", response_model=PostingOut)
async def get_posting(posting_id: int, repository=Depends(get_repository)) -> PostingOut:
    try:
        row = await repository.get_posting(posting_id=posting_id)
    except RepositoryUnavailableError as exc:
        raise HTTPException(status_code=http_status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    except RepositoryNotFoundError as exc:
        raise HTTPException(status_code=http_status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PostingOut(**row)
