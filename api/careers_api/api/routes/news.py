import logging
from typing import Any

from fastapi import APIRouter, Depends

from careers_api.schemas.news import NewsItemOut
from careers_api.services.repository import RepositoryUnavailableError, get_repository

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/data", response_model=None)
async def news_data(repository=Depends(get_repository)) -> list[dict[str, Any]] | dict[str, str]:
    # The news page reads `error` from the payload instead of the status code.
    try:
        rows = await repository.list_news()
    except RepositoryUnavailableError as exc:
        logger.warning("news data unavailable: %s", exc)
        return {"error": str(exc)}
    return [NewsItemOut(**row).model_dump(mode="json") for row in rows]
