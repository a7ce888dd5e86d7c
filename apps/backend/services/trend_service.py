"""
Trending topic suggestions for the landing page.

Headlines are generated by the chat model in a "Category: ...\nHeadline: ..."
format and kept in a small in-memory cache that expires entries and refills
itself up to a minimum count.
"""

import asyncio
import random
import re
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from agents import config as global_config
from agents.generation.config import get_config
from agents.generation.exceptions import FormatError, GenerationError
from models.requests import TrendItem
from services.chat_completion_service import ChatCompletionService
from setup_logging_optimized import get_logger

logger = get_logger(__name__)

CATEGORY_COLORS = {
    "Technology": "linear-gradient(90deg, rgba(59, 130, 246, 0.3), rgba(6, 182, 212, 0.3))",
    "Science": "linear-gradient(90deg, rgba(168, 85, 247, 0.3), rgba(236, 72, 153, 0.3))",
    "Health": "linear-gradient(90deg, rgba(34, 197, 94, 0.3), rgba(16, 185, 129, 0.3))",
    "Environment": "linear-gradient(90deg, rgba(20, 184, 166, 0.3), rgba(34, 197, 94, 0.3))",
    "Business": "linear-gradient(90deg, rgba(249, 115, 22, 0.3), rgba(239, 68, 68, 0.3))",
    "Politics": "linear-gradient(90deg, rgba(99, 102, 241, 0.3), rgba(168, 85, 247, 0.3))",
    "Culture": "linear-gradient(90deg, rgba(236, 72, 153, 0.3), rgba(244, 63, 94, 0.3))",
    "Sports": "linear-gradient(90deg, rgba(234, 179, 8, 0.3), rgba(249, 115, 22, 0.3))",
}

_TOPICS = "technology, science, health, environment, business, politics, culture, or sports"
_FORMAT = "Format: Category: [category]\nHeadline: [headline]"

TREND_PROMPTS = (
    f"Generate a trending news headline about recent developments in {_TOPICS}. {_FORMAT}",
    f"What's the latest breakthrough or significant development in {_TOPICS}? {_FORMAT}",
    f"Share a current trend or important update in {_TOPICS}. {_FORMAT}",
)

FALLBACK_TREND = TrendItem(
    category="Technology",
    title="AI Continues to Transform Industries Worldwide",
    color=CATEGORY_COLORS["Technology"],
)

_CATEGORY_RE = re.compile(r"Category:\s*([^\n]+)")
_HEADLINE_RE = re.compile(r"Headline:\s*([^\n]+)")


def parse_trend(output: str) -> TrendItem:
    """Extract category and headline; unknown categories get the Technology color."""
    category_match = _CATEGORY_RE.search(output or '')
    headline_match = _HEADLINE_RE.search(output or '')
    if not category_match or not headline_match:
        raise FormatError("Invalid AI response format", raw_text=output)

    category = category_match.group(1).strip().strip('*[]').strip()
    title = headline_match.group(1).strip().strip('*[]').strip()
    return TrendItem(
        category=category,
        title=title,
        color=CATEGORY_COLORS.get(category, CATEGORY_COLORS["Technology"]),
    )


async def generate_trend(chat_service: Optional[ChatCompletionService] = None) -> TrendItem:
    """Ask the model for one headline. Any generation failure yields the fallback trend."""
    try:
        service = chat_service or ChatCompletionService()
        output = await service.complete(
            [{'role': 'user', 'content': random.choice(TREND_PROMPTS)}],
            temperature=global_config.TREND_TEMPERATURE,
            max_tokens=global_config.TREND_MAX_TOKENS,
            top_p=global_config.DECK_TOP_P,
            stream=False,
        )
        return parse_trend(output)
    except GenerationError as e:
        logger.error(f"Error generating trend: {e.message}")
        return FALLBACK_TREND.model_copy()


@dataclass
class CachedTrend:
    trend: TrendItem
    timestamp: float


class TrendCache:
    """In-memory cache of generated trends with expiry and a minimum fill level."""

    def __init__(
        self,
        generator: Optional[Callable[[], Awaitable[TrendItem]]] = None,
        cache_duration: Optional[float] = None,
        min_trends: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        trend_config = get_config().trends
        self.generator = generator or generate_trend
        self.cache_duration = trend_config.cache_duration_seconds if cache_duration is None else cache_duration
        self.min_trends = trend_config.min_trends if min_trends is None else min_trends
        self.clock = clock
        self._cache: List[CachedTrend] = []
        self._is_generating = False

    def _clean_expired(self) -> None:
        now = self.clock()
        self._cache = [c for c in self._cache if now - c.timestamp < self.cache_duration]

    async def ensure_minimum_trends(self) -> None:
        """Top the cache up to min_trends; concurrent callers skip while a refill runs."""
        if self._is_generating:
            return

        self._clean_expired()
        missing = self.min_trends - len(self._cache)
        if missing <= 0:
            return

        self._is_generating = True
        try:
            new_trends = await asyncio.gather(*(self.generator() for _ in range(missing)))
            now = self.clock()
            self._cache.extend(CachedTrend(trend=t, timestamp=now) for t in new_trends)
            logger.info(f"Generated {len(new_trends)} trends")
        finally:
            self._is_generating = False

    def get_latest_trends(self, count: Optional[int] = None) -> List[TrendItem]:
        self._clean_expired()
        count = self.min_trends if count is None else count
        newest_first = sorted(self._cache, key=lambda c: c.timestamp, reverse=True)
        return [c.trend for c in newest_first[:count]]

    async def refresh_trends(self) -> List[TrendItem]:
        await self.ensure_minimum_trends()
        return self.get_latest_trends()
