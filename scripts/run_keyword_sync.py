"""
Script to run the publication keyword sync once
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, models, etc.
sys.path.append(os.getcwd())

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from core.config import settings
from core.exceptions import StoreUnavailableError
from core.logging import setup_logging
from enrichment.service import KeywordSyncService

logger = logging.getLogger(__name__)


async def run_sync() -> int:
    """Run one keyword sync; returns the process exit code"""

    engine = create_async_engine(
        settings.DATABASE_URL,
        echo=False,
    )

    AsyncSessionLocal = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    service = KeywordSyncService(AsyncSessionLocal)

    try:
        summary = await service.run_once()
        logger.info(f"Keyword sync completed: {summary.log_line()}")
        print(summary.model_dump_json(indent=2))

        return 1 if summary.timed_out else 0

    except StoreUnavailableError as e:
        logger.error(f"Keyword sync aborted: {e}")
        return 1
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    sys.exit(asyncio.run(run_sync()))
