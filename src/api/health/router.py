"""Health check endpoints for debugging and monitoring."""

from dataclasses import asdict

from fastapi import APIRouter, Response

from src.api.core.dependencies import AsyncSessionDep
from src.modules.health.service import HealthService
from src.utils.settings.app import AppSettings

# Create separate routers for root and health endpoints
root_router = APIRouter()
router = APIRouter(prefix="/health", tags=["health"])


@root_router.get("/")
async def root():
    """Minimal service descriptor."""
    settings = AppSettings()
    return {
        "name": f"{settings.APP_NAME} API",
        "version": settings.API_VERSION,
        "health": "/health",
    }


@router.get("")
async def health_check(db: AsyncSessionDep, response: Response) -> dict:
    """Database reachability. Always 200; ``status`` says ok or degraded."""
    response.headers["Cache-Control"] = "no-store"
    return asdict(await HealthService(db).run_all_checks())


@router.get("/liveness")
async def liveness_check():
    """Simple liveness check - indicates if service is running."""
    return {"status": "alive", "service": "iridium-api"}
