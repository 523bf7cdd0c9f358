# scripts/init_db.py
import sys
from pathlib import Path

# Ensure project root is on the path when running this script directly
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio

from sqlalchemy import text

import elgar.infrastructure.database.models  # noqa: F401  registers tables on Base.metadata
from elgar.infrastructure.database.session import Base, get_engine


async def init_db():
    engine = get_engine()
    async with engine.begin() as conn:
        result = await conn.execute(text("SELECT 1"))
        print("DB Connected:", result.scalar())
        await conn.run_sync(Base.metadata.create_all)
    print("Tables:", ", ".join(sorted(Base.metadata.tables)))
    await engine.dispose()


asyncio.run(init_db())
