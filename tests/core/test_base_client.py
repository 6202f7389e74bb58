"""BaseWebClient tests"""

from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from steamcompass.config import MAX_RETRIES, SIGNAL_TIMEOUT
from steamcompass.core.base_client import BaseWebClient
from steamcompass.enrichment.hltb_enricher import HowLongToBeatEnricher
from steamcompass.enrichment.metacritic_enricher import MetacriticEnricher
from steamcompass.enrichment.steam_reviews_enricher import SteamReviewsEnricher


def make_session(*responses):
    """Session whose request() context managers yield the given responses in order"""
    session = MagicMock()
    contexts = []
    for response in responses:
        context = MagicMock()
        context.__aenter__ = AsyncMock(return_value=response)
        context.__aexit__ = AsyncMock(return_value=False)
        contexts.append(context)
    session.request = MagicMock(side_effect=contexts)
    return session


def json_response(payload):
    response = MagicMock()
    response.raise_for_status = MagicMock()
    response.json = AsyncMock(return_value=payload)
    return response


def error_response(status):
    response = MagicMock()
    response.raise_for_status = MagicMock(side_effect=aiohttp.ClientResponseError(
        request_info=MagicMock(), history=(), status=status,
    ))
    return response


class TestCache:
    """File cache handling"""

    def test_no_cache_dir(self):
        client = BaseWebClient(MagicMock(), cache_dir=None, cache_ttl=60)
        assert client._get_cache_path("key") is None
        assert not client._is_cache_valid(None)

    @pytest.mark.asyncio
    async def test_success_is_cached(self, tmp_path):
        session = make_session(json_response({"ok": True}))
        client = BaseWebClient(session, cache_dir=str(tmp_path / "cache"), cache_ttl=60)

        first = await client._fetch("https://example.com/a")
        second = await client._fetch("https://example.com/a")

        assert first == second == {"ok": True}
        assert session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_expired_cache_refetches(self, tmp_path):
        session = make_session(json_response({"v": 1}), json_response({"v": 2}))
        client = BaseWebClient(session, cache_dir=str(tmp_path / "cache"), cache_ttl=-1)

        await client._fetch("https://example.com/a")
        assert await client._fetch("https://example.com/a") == {"v": 2}


class TestFetchRetries:
    """Retry and give-up behaviour"""

    @pytest.mark.asyncio
    async def test_not_found_is_not_retried(self):
        session = make_session(error_response(404))
        client = BaseWebClient(session, cache_dir=None, cache_ttl=60)

        assert await client._fetch("https://example.com/missing") is None
        assert session.request.call_count == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self):
        session = make_session(error_response(429), json_response({"ok": True}))
        client = BaseWebClient(session, cache_dir=None, cache_ttl=60)

        with patch("steamcompass.core.base_client.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await client._fetch("https://example.com/busy")

        assert result == {"ok": True}
        assert sleep.await_count == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        session = make_session(*(error_response(503) for _ in range(3)))
        client = BaseWebClient(session, cache_dir=None, cache_ttl=60)

        with patch("steamcompass.core.base_client.asyncio.sleep", new=AsyncMock()):
            result = await client._fetch("https://example.com/down", max_retries=3)

        assert result is None
        assert session.request.call_count == 3

    @pytest.mark.asyncio
    async def test_post_sends_payload(self):
        session = make_session(json_response({"data": []}))
        client = BaseWebClient(session, cache_dir=None, cache_ttl=60)

        await client._fetch("https://example.com/search", method="POST", payload={"q": "x"})

        assert session.request.call_args.args == ("POST", "https://example.com/search")
        assert session.request.call_args.kwargs["json"] == {"q": "x"}


class TestRetryBudget:
    """Provider retries fit inside the per-signal timeout"""

    def test_budget_formula(self):
        client = BaseWebClient(MagicMock(), cache_dir=None, cache_ttl=60, request_timeout=5, max_retries=3, initial_delay=1.0)
        # 3 attempts of 5s, backoff of at most 1+1 and 2+1 seconds
        assert client.retry_budget_seconds == 20

    @pytest.mark.parametrize("provider_class", [MetacriticEnricher, SteamReviewsEnricher, HowLongToBeatEnricher])
    def test_providers_fit_signal_timeout(self, provider_class):
        provider = provider_class(MagicMock())
        assert provider.retry_budget_seconds < SIGNAL_TIMEOUT

    @pytest.mark.asyncio
    async def test_default_attempts(self):
        session = make_session(*(error_response(503) for _ in range(MAX_RETRIES)))
        client = BaseWebClient(session, cache_dir=None, cache_ttl=60)

        with patch("steamcompass.core.base_client.asyncio.sleep", new=AsyncMock()) as sleep:
            result = await client._fetch("https://example.com/down")

        assert result is None
        assert session.request.call_count == MAX_RETRIES
        assert sleep.await_count == MAX_RETRIES - 1
