import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routers import dashboard_router, health_router
from dashboard_service.logging_config import configure_logging
from dashboard_service.settings import Settings
from db import close_repository, init_repository
from models import ConfigurationError, UpstreamUnavailable

load_dotenv()
settings = Settings.from_env()
configure_logging(settings.log_level)
logger = logging.getLogger("dashboard")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_repository(settings.db_url)
    logger.info(
        "dashboard_started",
        extra={
            "db_url": settings.db_url,
            "trailing_window_days": settings.trailing_window_days,
        },
    )
    try:
        yield
    finally:
        close_repository()


app = FastAPI(title="Infra Dashboard Metrics", version="0.1.0", lifespan=lifespan)
app.state.settings = settings
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)
app.include_router(health_router)
app.include_router(dashboard_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(
    request: Request, exc: ConfigurationError
) -> JSONResponse:
    logger.error("configuration_error", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


@app.exception_handler(UpstreamUnavailable)
async def upstream_unavailable_handler(
    request: Request, exc: UpstreamUnavailable
) -> JSONResponse:
    logger.error("upstream_unavailable", extra={"path": request.url.path, "error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": str(exc)},
    )


def run() -> None:
    uvicorn.run(
        "dashboard_service.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
