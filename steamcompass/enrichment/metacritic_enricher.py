# ===== IMPORTS & DEPENDENCIES =====
import logging
import os
import re
from typing import Optional
from urllib.parse import quote

import aiohttp
from bs4 import BeautifulSoup

from steamcompass.config import CACHE_DIR, DEFAULT_CACHE_TTL, METACRITIC_BASE_URL, METACRITIC_SEARCH_URL
from steamcompass.core.base_client import BaseWebClient
from steamcompass.models.game import CriticScores
from steamcompass.models.signals import Signal, Success, Unavailable

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

CRITIC_SCORE_SELECTORS = [
    '[data-testid="critic-score-info"] .c-siteReviewScore span',
    '[data-testid="metascore-value"]',
    '.c-siteReviewScore_background-critic_medium .c-siteReviewScore_medium',
    'div.c-siteReviewScore_score',
    '.metascore_w.xlarge.game span',
    '.metascore_w.large.game',
]
USER_SCORE_SELECTORS = [
    '[data-testid="user-score-info"] .c-siteReviewScore span',
    'div[data-testid="userscore-value"] > span',
    '.c-siteReviewScore_background-user .c-siteReviewScore_medium',
    '.metascore_w.user.large.game',
    '.metascore_w.user.medium.game',
]

# ===== CORE BUSINESS LOGIC =====
def parse_scores(html_content: str) -> CriticScores:
    """Parses the critic (0-100) and user (0-10) scores from a Metacritic game page."""
    soup = BeautifulSoup(html_content, 'html.parser')

    critic_score = None
    for selector in CRITIC_SCORE_SELECTORS:
        tag = soup.select_one(selector)
        score_text = tag.get_text(strip=True) if tag else ''
        if score_text.isdigit() and 0 <= int(score_text) <= 100:
            critic_score = int(score_text)
            break

    user_score = None
    for selector in USER_SCORE_SELECTORS:
        tag = soup.select_one(selector)
        score_text = tag.get_text(strip=True) if tag else ''
        # "tbd" means too few user ratings
        if re.match(r"^\d+(\.\d+)?$", score_text):
            value = float(score_text)
            # Some layouts print the user score on the 100-point scale
            user_score = value / 10 if value > 10 else value
            break

    return CriticScores(critic_score=critic_score, user_score=user_score)


def find_game_page_path(html_content: str) -> Optional[str]:
    """Returns the path of the first game result on a Metacritic search page."""
    soup = BeautifulSoup(html_content, 'html.parser')
    results_container = soup.find('div', id='main-content') or soup.find('div', class_='search-results-container') or soup
    first_result_link = results_container.select_one('a[href^="/game/"]')
    if first_result_link and first_result_link.get('href'):
        return first_result_link['href']
    return None


class MetacriticEnricher(BaseWebClient):
    """Critic and user scores from Metacritic, looked up by game name."""

    def __init__(self, session: aiohttp.ClientSession, cache_ttl: int = DEFAULT_CACHE_TTL):
        super().__init__(
            session=session,
            cache_dir=os.path.join(CACHE_DIR, "metacritic"),
            cache_ttl=cache_ttl,
        )

    async def _find_game_page_url(self, name: str) -> Optional[str]:
        """Searches Metacritic and returns the URL of the first game result."""
        search_url = METACRITIC_SEARCH_URL.format(query=quote(name))
        html_content = await self._fetch(search_url, is_json=False)
        if not html_content:
            return None

        game_page_path = find_game_page_path(html_content)
        if not game_page_path:
            logger.info(f"[{self.__class__.__name__}] No game page link in Metacritic search results for '{name}'.")
            return None
        return METACRITIC_BASE_URL + game_page_path

    async def fetch_scores(self, name: str) -> Signal:
        """Looks up one name candidate. Success only when the page carries a score."""
        game_page_url = await self._find_game_page_url(name)
        if not game_page_url:
            return Unavailable(f"no Metacritic page for '{name}'")

        page_html = await self._fetch(game_page_url, is_json=False)
        if not page_html:
            return Unavailable(f"failed to fetch {game_page_url}")

        scores = parse_scores(page_html)
        if not scores.has_scores:
            logger.info(f"[{self.__class__.__name__}] No scores found on Metacritic page for '{name}'.")
            return Unavailable(f"no scores on {game_page_url}")

        logger.info(f"✅ [{self.__class__.__name__}] Metacritic scores for '{name}': critic={scores.critic_score} user={scores.user_score}")
        return Success(scores)
