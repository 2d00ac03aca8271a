import uvicorn
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.core.constants import API_VERSION_HEADER
from src.api.core.exceptions.base import register_exception_handlers
from src.api.core.middleware.auth import auth_middleware
from src.api.core.middleware.logging import logging_middleware
from src.api.core.middleware.security import (
    SecurityHeadersMiddleware,
    PayloadSizeMiddleware,
)
from src.api.router import api_router
from src.database.connection import AsyncSessionLocal
from src.modules.posthog.client import close_posthog_session
from src.redis.client import close_redis_pool
from src.utils.settings.app import AppSettings
from src.utils.logger import setup_logging


app_settings = AppSettings()
app_settings.validate_prod()
is_production = app_settings.ENVIRONMENT.upper() == "PROD"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger = setup_logging(is_production, debug=app_settings.DEBUG)
    logger.info("Starting Iridium API...", version=app_settings.API_VERSION)

    app.state.session_factory = AsyncSessionLocal
    logger.info("Database session factory added to app state")

    yield

    # Shutdown
    await close_posthog_session()
    await close_redis_pool()
    logger.info("Shutting down Iridium API...")


app = FastAPI(
    title=f"{app_settings.APP_NAME} API",
    description="SaaS starter API: accounts, organizations, chat and billing",
    version=app_settings.API_VERSION,
    lifespan=lifespan,
    # Security: Disable docs in production
    docs_url=None if is_production else "/docs",
    redoc_url=None if is_production else "/redoc",
    openapi_url=None if is_production else "/openapi.json",
)

# Register global exception handlers
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", API_VERSION_HEADER],
)

app.add_middleware(SecurityHeadersMiddleware, is_production=is_production)
app.add_middleware(
    PayloadSizeMiddleware,
    max_request_size=app_settings.MAX_REQUEST_SIZE,
    max_response_size=app_settings.MAX_RESPONSE_SIZE,
)
app.middleware("http")(auth_middleware)
app.middleware("http")(logging_middleware)

app.include_router(api_router)


def run_dev_server():
    """Run development server with auto-reload."""
    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=8010, reload=True, access_log=False
    )


def run_prod_server():
    """Run production server."""
    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=8010, reload=False, access_log=False
    )
