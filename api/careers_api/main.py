from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI
from starlette.requests import Request

from careers_api.api.router import api_router
from careers_api.core.config import Settings, get_settings
from careers_api.core.telemetry import (
    configure_api_logging,
    setup_api_telemetry,
    shutdown_api_telemetry,
)
from careers_api.services.repository import get_repository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        runtime = getattr(app.state, "telemetry", None)
        if runtime is not None:
            shutdown_api_telemetry(app, runtime)
        await get_repository().close()
        get_repository.cache_clear()


async def log_request(request: Request, call_next):
    started_at = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "http request method=%s path=%s query=%s status=%s duration_ms=%.2f",
        request.method,
        request.url.path,
        request.url.query or "-",
        response.status_code,
        (time.perf_counter() - started_at) * 1000.0,
    )
    return response


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_api_logging()

    application = FastAPI(title=settings.app_name, lifespan=lifespan)
    application.state.telemetry = setup_api_telemetry(application, settings)
    application.middleware("http")(log_request)
    application.include_router(api_router)
    return application


app = create_app()
