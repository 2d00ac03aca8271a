"""Periodic cleanup jobs, meant to be run from cron."""

import argparse
import asyncio

from src.database.connection import get_async_db
from src.modules.organization.invitation import OrganizationInvitationService
from src.modules.organization.use_cases import OrganizationService
from src.utils.logger import setup_logging

JOBS = ("invitations", "organizations", "all")


async def run_maintenance(job: str = "all") -> dict[str, int]:
    """Run the selected jobs and return the number of rows each removed."""
    removed: dict[str, int] = {}
    async with get_async_db() as db:
        if job in ("invitations", "all"):
            removed["invitations"] = await OrganizationInvitationService(
                db
            ).cleanup_expired_invitations()
        if job in ("organizations", "all"):
            removed["organizations"] = await OrganizationService(
                db
            ).purge_soft_deleted()
    return removed


def main() -> None:
    parser = argparse.ArgumentParser(description="Iridium maintenance jobs")
    parser.add_argument("job", nargs="?", choices=JOBS, default="all")
    args = parser.parse_args()

    logger = setup_logging()
    removed = asyncio.run(run_maintenance(args.job))
    logger.info("Maintenance finished", job=args.job, **removed)


if __name__ == "__main__":
    main()
