"""Create the meetings schema in the configured database."""
from __future__ import annotations

import asyncio

from app.core.config import get_settings
from app.db.session import build_engine
from app.models import Meeting  # noqa: F401 - registers the table on Base.metadata
from app.models.base import Base


async def create_schema() -> None:
	"""Create the database schema if it does not already exist."""

	engine = build_engine(get_settings())
	try:
		async with engine.begin() as conn:
			await conn.run_sync(Base.metadata.create_all)
	finally:
		await engine.dispose()


async def main() -> None:
	await create_schema()
	print("Database schema ensured.")


if __name__ == "__main__":
	asyncio.run(main())
