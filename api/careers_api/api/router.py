from fastapi import APIRouter

from careers_api.api.routes import health, news, postings, saiyou

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(postings.router, prefix="/postings", tags=["public"])
api_router.include_router(saiyou.router, prefix="/saiyou", tags=["pages"])
api_router.include_router(news.router, prefix="/news", tags=["public"])
