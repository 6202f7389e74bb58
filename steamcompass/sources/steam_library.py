# ===== IMPORTS & DEPENDENCIES =====
import logging
import os
from typing import Any, Dict, List, Optional

import aiohttp

from steamcompass.config import CACHE_DIR, LIBRARY_REQUEST_TIMEOUT, STEAM_OWNED_GAMES_URL
from steamcompass.core.base_client import BaseWebClient
from steamcompass.models.game import GameIdentity

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

LIBRARY_CACHE_TTL = 900  # 15 minutes
LIBRARY_MAX_RETRIES = 3
LIBRARY_RETRY_DELAY = 2.0

# ===== CORE BUSINESS LOGIC =====
def parse_owned_games(response_data: Optional[Dict[str, Any]]) -> List[GameIdentity]:
    """Turns a GetOwnedGames response into GameIdentity records, skipping malformed entries."""
    if not isinstance(response_data, dict):
        return []
    games = (response_data.get('response') or {}).get('games') or []

    identities: List[GameIdentity] = []
    for game in games:
        try:
            identities.append(GameIdentity(
                external_id=int(game['appid']),
                display_name=str(game.get('name') or f"App {game['appid']}"),
                owned_playtime_minutes=int(game.get('playtime_forever') or 0),
            ))
        except (KeyError, TypeError, ValueError):
            logger.debug(f"[parse_owned_games] Skipping malformed entry: {game}")
    return identities


class SteamLibrarySource(BaseWebClient):
    """Fetches the games a Steam user owns, with playtime."""

    def __init__(self, session: aiohttp.ClientSession, api_key: Optional[str], cache_ttl: int = LIBRARY_CACHE_TTL):
        super().__init__(
            session=session,
            cache_dir=os.path.join(CACHE_DIR, "library"),
            cache_ttl=cache_ttl,
            request_timeout=LIBRARY_REQUEST_TIMEOUT,
            max_retries=LIBRARY_MAX_RETRIES,
            initial_delay=LIBRARY_RETRY_DELAY,
        )
        self._api_key = api_key

    async def fetch_owned_games(self, steam_id: str) -> List[GameIdentity]:
        if not self._api_key:
            logger.error(f"❌ [{self.__class__.__name__}] STEAM_API_KEY is not set. Cannot import library.")
            return []

        url = STEAM_OWNED_GAMES_URL.format(api_key=self._api_key, steam_id=steam_id)
        response_data = await self._fetch(url, is_json=True)
        games = parse_owned_games(response_data)
        if games:
            logger.info(f"✅ [{self.__class__.__name__}] Imported {len(games)} owned games for {steam_id}.")
        else:
            logger.warning(f"⚠️ [{self.__class__.__name__}] No owned games returned for {steam_id} (private profile?).")
        return games
