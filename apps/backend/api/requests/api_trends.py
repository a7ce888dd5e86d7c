"""
Trending topics endpoint backed by the in-memory trend cache.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends

from models.requests import TrendsResponse
from services.trend_service import TrendCache

router = APIRouter(prefix="/api/trends", tags=["trends"])


@lru_cache()
def get_trend_cache() -> TrendCache:
    return TrendCache()


@router.get("", response_model=TrendsResponse)
async def list_trends(cache: TrendCache = Depends(get_trend_cache)):
    return TrendsResponse(trends=await cache.refresh_trends())
