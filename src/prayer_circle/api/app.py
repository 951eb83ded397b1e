"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from prayer_circle import __version__
from prayer_circle.api.dependencies import initialize_app_state, shutdown_app_state
from prayer_circle.api.routes import router as prayers_router
from prayer_circle.api.routes import system_router
from prayer_circle.config import AppConfig, get_config
from prayer_circle.domain.exceptions import PrayerCircleError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    logger.info("Prayer Circle başlatılıyor...")

    config: AppConfig = app.state.config
    state = await initialize_app_state(config)

    # Scheduler'ı başlat ve bekleyen kapanışları kur
    state.scheduler_adapter.start()
    if config.recover_on_startup:
        await state.auto_close_service.recover()

    logger.info("Prayer Circle hazır!")

    yield

    # Shutdown
    logger.info("Prayer Circle kapatılıyor...")
    await shutdown_app_state()
    logger.info("Prayer Circle kapatıldı.")


async def domain_error_handler(request: Request, exc: PrayerCircleError) -> JSONResponse:
    """Domain hatalarını {"error": ...} yanıtına çevir."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} başarısız: {exc.__cause__ or exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP hatalarını aynı gövde biçimiyle döndür."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers,
    )


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Geçersiz istek gövdesini 400 olarak döndür."""
    logger.debug(f"{request.method} {request.url.path} geçersiz istek: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Beklenmeyen hatalar da {"error": ...} biçiminde 500 döner."""
    logger.exception(f"{request.method} {request.url.path} beklenmeyen hata: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(config: AppConfig | None = None) -> FastAPI:
    """
    Create FastAPI application.

    Args:
        config: Uygulama ayarları (varsayılan: ortam değişkenleri)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="Prayer Circle",
        description="Topluluk dua istekleri, katılımcılar ve izlenimler",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config in app state
    app.state.config = config or get_config()

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Production'da kısıtlanmalı
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PrayerCircleError, domain_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # API routes
    app.include_router(prayers_router)
    app.include_router(system_router)

    return app
