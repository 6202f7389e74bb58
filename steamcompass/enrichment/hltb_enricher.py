# ===== IMPORTS & DEPENDENCIES =====
import logging
import os
from typing import Any, Dict, List, Optional

import aiohttp

from steamcompass.config import CACHE_DIR, DEFAULT_CACHE_TTL, HLTB_HEADERS, HLTB_SEARCH_URL
from steamcompass.core.base_client import BaseWebClient
from steamcompass.models.game import CompletionHours
from steamcompass.models.signals import Signal, Success, Unavailable

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600

# ===== CORE BUSINESS LOGIC =====
def build_search_payload(name: str) -> Dict[str, Any]:
    return {
        "searchType": "games",
        "searchTerms": name.split(),
        "searchPage": 1,
        "size": 20,
        "searchOptions": {
            "games": {
                "userId": 0,
                "platform": "",
                "sortCategory": "popular",
                "rangeCategory": "main",
                "rangeTime": {"min": 0, "max": 0},
                "gameplay": {"perspective": "", "flow": "", "genre": ""},
                "modifier": "",
            },
            "users": {"sortCategory": "postcount"},
            "filter": "",
            "sort": 0,
            "randomizer": 0,
        },
    }


def _hours(seconds: Any) -> Optional[float]:
    """HLTB reports seconds; zero or missing means no estimate."""
    try:
        value = float(seconds)
    except (TypeError, ValueError):
        return None
    if value <= 0:
        return None
    return round(value / SECONDS_PER_HOUR, 1)


def _has_times(entry: Dict[str, Any]) -> bool:
    return any(_hours(entry.get(key)) for key in ("comp_main", "comp_plus", "comp_100"))


def find_best_match(name: str, entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Picks the result that best matches `name`: exact title, then same title
    before any subtitle, then a result containing the base title, then the
    first result with any completion data.
    """
    if not entries:
        return None

    wanted = name.lower().strip()
    wanted_base = wanted.split(':')[0].strip()

    for entry in entries:
        if str(entry.get('game_name', '')).lower().strip() == wanted:
            return entry

    for entry in entries:
        if str(entry.get('game_name', '')).lower().split(':')[0].strip() == wanted_base:
            return entry

    for entry in entries:
        title = str(entry.get('game_name', ''))
        if wanted_base and wanted_base in title.lower() and len(title) < len(name) + 20:
            return entry

    return next((entry for entry in entries if _has_times(entry)), None)


def parse_completion_hours(entry: Dict[str, Any]) -> CompletionHours:
    return CompletionHours(
        main=_hours(entry.get('comp_main')),
        main_plus_extra=_hours(entry.get('comp_plus')),
        completionist=_hours(entry.get('comp_100')),
    )


class HowLongToBeatEnricher(BaseWebClient):
    """Completion time estimates from HowLongToBeat, looked up by game name."""

    def __init__(self, session: aiohttp.ClientSession, cache_ttl: int = DEFAULT_CACHE_TTL):
        super().__init__(
            session=session,
            cache_dir=os.path.join(CACHE_DIR, "hltb"),
            cache_ttl=cache_ttl,
        )

    async def fetch_completion_hours(self, name: str) -> Signal:
        response_data = await self._fetch(
            HLTB_SEARCH_URL, method='POST', is_json=True,
            headers=HLTB_HEADERS, payload=build_search_payload(name),
        )
        if not isinstance(response_data, dict):
            return Unavailable(f"no response from HowLongToBeat for '{name}'")

        best_match = find_best_match(name, response_data.get('data') or [])
        if not best_match:
            logger.info(f"[{self.__class__.__name__}] No HowLongToBeat match for '{name}'.")
            return Unavailable(f"no HowLongToBeat match for '{name}'")

        times = parse_completion_hours(best_match)
        if times.preferred() is None:
            return Unavailable(f"no completion data for '{best_match.get('game_name')}'")

        logger.info(
            f"✅ [{self.__class__.__name__}] HowLongToBeat for '{name}' (matched '{best_match.get('game_name')}'): "
            f"main={times.main} extra={times.main_plus_extra} 100%={times.completionist}"
        )
        return Success(times)
