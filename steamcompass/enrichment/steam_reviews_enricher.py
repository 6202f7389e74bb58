# ===== IMPORTS & DEPENDENCIES =====
import logging
import os
from typing import Any, Dict, Optional

import aiohttp

from steamcompass.config import CACHE_DIR, DEFAULT_CACHE_TTL, STEAM_REVIEWS_URL
from steamcompass.core.base_client import BaseWebClient
from steamcompass.models.game import ReviewSentiment
from steamcompass.models.signals import Signal, Success, Unavailable

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
def parse_review_summary(response_data: Optional[Dict[str, Any]]) -> Optional[ReviewSentiment]:
    """Extracts positive/negative totals from a Steam appreviews response."""
    if not isinstance(response_data, dict) or not response_data.get('success'):
        return None
    summary = response_data.get('query_summary')
    if not isinstance(summary, dict):
        return None
    try:
        positive = int(summary.get('total_positive') or 0)
        negative = int(summary.get('total_negative') or 0)
    except (TypeError, ValueError):
        return None
    if positive < 0 or negative < 0:
        return None
    return ReviewSentiment(positive=positive, negative=negative)


class SteamReviewsEnricher(BaseWebClient):
    """Review sentiment from the Steam store, looked up by App ID."""

    def __init__(self, session: aiohttp.ClientSession, cache_ttl: int = DEFAULT_CACHE_TTL):
        super().__init__(
            session=session,
            cache_dir=os.path.join(CACHE_DIR, "steam_reviews"),
            cache_ttl=cache_ttl,
        )

    async def fetch_review_sentiment(self, app_id: int) -> Signal:
        response_data = await self._fetch(STEAM_REVIEWS_URL.format(app_id=app_id), is_json=True)
        if not response_data:
            return Unavailable(f"no response from Steam reviews for App ID {app_id}")

        sentiment = parse_review_summary(response_data)
        if sentiment is None:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Unusable review summary for App ID {app_id}.")
            return Unavailable(f"unusable review summary for App ID {app_id}")

        logger.info(f"✅ [{self.__class__.__name__}] Steam reviews for App ID {app_id}: +{sentiment.positive}, -{sentiment.negative}")
        return Success(sentiment)
