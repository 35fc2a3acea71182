"""Delete meetings whose expiry has passed.

The API never reads ``expires_at``; run this on a schedule (cron, a platform
job) to reclaim stale codes.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from app.core.config import get_settings
from app.db.session import build_engine, build_sessionmaker
from app.services.registry import MeetingRegistry

logger = logging.getLogger("purge_expired_meetings")


async def purge(now: datetime | None = None) -> int:
    engine = build_engine(get_settings())
    try:
        registry = MeetingRegistry(build_sessionmaker(engine))
        return await registry.purge_expired(now or datetime.now(timezone.utc))
    finally:
        await engine.dispose()


async def main() -> None:
    logging.basicConfig(level=get_settings().log_level.upper())
    removed = await purge()
    logger.info("Removed %d expired meetings", removed)


if __name__ == "__main__":
    asyncio.run(main())
