from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from cafe_pos.db.deps import get_async_session

router = APIRouter()


@router.get("/health", summary="Health check")
async def health_check(db: AsyncSession = Depends(get_async_session)):
    """
    Health-check: проверяет соединение с базой данных.
    """
    await db.execute(text("SELECT 1"))
    return {
        "status": "ok",
        "database": "ok",
        "timestamp": datetime.now(timezone.utc),
    }
