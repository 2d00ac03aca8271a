import time
from dataclasses import dataclass, field
from typing import Literal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.utils.dates import utcnow
from src.utils.logger import get_logger
from src.utils.settings.app import AppSettings

logger = get_logger(__name__)


@dataclass
class HealthCheckResult:
    """Result of a single dependency check."""

    status: Literal["ok", "error"]
    error: str | None = None


@dataclass
class OverallHealthStatus:
    status: Literal["ok", "degraded"]
    timestamp: str
    version: str
    response_time_ms: float
    checks: dict[str, HealthCheckResult] = field(default_factory=dict)


class HealthService:
    """Service for performing health checks on the service's dependencies."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def check_database_health(self) -> HealthCheckResult:
        try:
            await self.db.execute(text("SELECT 1"))
            return HealthCheckResult(status="ok")
        except Exception as e:
            logger.error(f"Database health check error: {e}")
            return HealthCheckResult(status="error", error=type(e).__name__)

    async def run_all_checks(self) -> OverallHealthStatus:
        started = time.perf_counter()
        database = await self.check_database_health()
        elapsed_ms = (time.perf_counter() - started) * 1000

        return OverallHealthStatus(
            status="ok" if database.status == "ok" else "degraded",
            timestamp=utcnow().isoformat(),
            version=AppSettings().API_VERSION,
            response_time_ms=round(elapsed_ms, 2),
            checks={"database": database},
        )
