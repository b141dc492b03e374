"""
FastAPI dependencies
"""

from typing import AsyncGenerator
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from core.database import async_session_maker
from enrichment.service import KeywordSyncService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session per request"""
    async with async_session_maker() as session:
        yield session


def get_sync_service(request: Request) -> KeywordSyncService:
    return request.app.state.sync_service
