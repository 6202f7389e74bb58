# ===== IMPORTS & DEPENDENCIES =====
import logging
import asyncio
import aiohttp
import os
import hashlib
import time
import json
import random
from typing import Optional, Any, Dict

from steamcompass.config import COMMON_HEADERS, MAX_RETRIES, REQUEST_TIMEOUT, RETRY_INITIAL_DELAY

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

RETRYABLE_STATUSES = (403, 429, 502, 503, 504)

# ===== CORE BUSINESS LOGIC =====
class BaseWebClient:
    """A base class for signal providers: shared session, file cache and retrying fetch."""

    def __init__(self, session: aiohttp.ClientSession, cache_dir: Optional[str], cache_ttl: int,
                 request_timeout: float = REQUEST_TIMEOUT, max_retries: int = MAX_RETRIES,
                 initial_delay: float = RETRY_INITIAL_DELAY):
        self._session = session
        self._cache_dir = cache_dir
        self._cache_ttl = cache_ttl
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)
        self._max_retries = max_retries
        self._initial_delay = initial_delay
        if self._cache_dir:
            os.makedirs(self._cache_dir, exist_ok=True)
        logger.debug(f"[{self.__class__.__name__}] Initialized with cache dir: {self._cache_dir} and TTL: {self._cache_ttl}s")

    @property
    def retry_budget_seconds(self) -> float:
        """Longest one _fetch can take: every attempt timing out plus the maximal backoff between them."""
        backoff = sum(self._initial_delay * (2 ** attempt) + 1 for attempt in range(self._max_retries - 1))
        return self._max_retries * self._timeout.total + backoff

    def _get_cache_path(self, key: str, extension: str = "json") -> Optional[str]:
        """Generates a cache file path from a given key, or None when caching is off."""
        if not self._cache_dir:
            return None
        hashed_key = hashlib.sha256(key.encode('utf-8')).hexdigest()
        return os.path.join(self._cache_dir, f"{hashed_key}.{extension}")

    def _is_cache_valid(self, cache_path: Optional[str]) -> bool:
        """Checks if a cache file exists and has not expired."""
        if not cache_path or not os.path.exists(cache_path):
            return False

        file_mod_time = os.path.getmtime(cache_path)
        if (time.time() - file_mod_time) > self._cache_ttl:
            logger.debug(f"[{self.__class__.__name__}] Cache file expired: {cache_path}")
            return False

        return True

    def _read_cache(self, cache_path: str, is_json: bool) -> Optional[Any]:
        with open(cache_path, 'r', encoding='utf-8') as f:
            content = f.read()
        if not is_json:
            return content
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Invalid JSON in cache file {cache_path}. Deleting and re-fetching.")
            os.remove(cache_path)
            return None

    def _write_cache(self, cache_path: Optional[str], content: Any, is_json: bool) -> None:
        if not cache_path:
            return
        file_content = json.dumps(content, ensure_ascii=False, indent=4) if is_json else content
        try:
            with open(cache_path, 'w', encoding='utf-8') as f:
                f.write(file_content)
            logger.debug(f"💾 [{self.__class__.__name__}] Content saved to cache: {cache_path}")
        except OSError as e:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Could not write cache file {cache_path}: {e}")

    async def _fetch(
        self,
        url: str,
        method: str = 'GET',
        is_json: bool = True,
        max_retries: Optional[int] = None,
        initial_delay: Optional[float] = None,
        headers: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None,
        use_cache: bool = True,
    ) -> Optional[Any]:
        """
        Fetches a URL with caching, retries, and exponential backoff.
        Handles both JSON and HTML content. Returns None when the source is unavailable.
        """
        max_retries = max_retries or self._max_retries
        initial_delay = self._initial_delay if initial_delay is None else initial_delay
        cache_key = url if method == 'GET' else f"{url}-{json.dumps(payload, sort_keys=True)}"
        cache_path = self._get_cache_path(cache_key, extension="json" if is_json else "html") if use_cache else None

        if self._is_cache_valid(cache_path):
            cached = self._read_cache(cache_path, is_json)
            if cached is not None:
                logger.debug(f"✅ [{self.__class__.__name__}] Loaded content from cache: {cache_path}")
                return cached

        logger.info(f"➡️ [{self.__class__.__name__}] Fetching from network: {url}")
        request_headers = headers or COMMON_HEADERS

        for attempt in range(max_retries):
            try:
                async with self._session.request(method, url, headers=request_headers, json=payload, timeout=self._timeout) as response:
                    response.raise_for_status()

                    if is_json:
                        # content_type=None handles non-standard API content-types
                        content = await response.json(content_type=None)
                    else:
                        content = await response.text()

                    self._write_cache(cache_path, content, is_json)
                    return content

            except aiohttp.ClientResponseError as e:
                logger.warning(f"⚠️ [{self.__class__.__name__}] HTTP error on {url} (Attempt {attempt + 1}/{max_retries}): Status {e.status}")
                if attempt >= max_retries - 1 or e.status not in RETRYABLE_STATUSES:
                    logger.error(f"❌ [{self.__class__.__name__}] Unrecoverable error on {url}. Giving up.")
                    return None
            except (asyncio.TimeoutError, aiohttp.ClientConnectionError) as e:
                logger.warning(f"⚠️ [{self.__class__.__name__}] Network error on {url} (Attempt {attempt + 1}/{max_retries}): {type(e).__name__}")
                if attempt >= max_retries - 1:
                    logger.error(f"❌ [{self.__class__.__name__}] Failed to connect to {url} after {max_retries} attempts.")
                    return None
            except (aiohttp.ContentTypeError, json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.error(f"❌ [{self.__class__.__name__}] Could not decode response from {url}: {e}")
                return None

            delay = initial_delay * (2 ** attempt) + random.uniform(0, 1)
            logger.info(f"Retrying request to {url} in {delay:.2f} seconds...")
            await asyncio.sleep(delay)

        return None
