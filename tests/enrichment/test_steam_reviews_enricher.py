"""SteamReviewsEnricher tests"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from steamcompass.enrichment.steam_reviews_enricher import SteamReviewsEnricher, parse_review_summary
from steamcompass.models.game import ReviewSentiment
from steamcompass.models.signals import Success, Unavailable


@pytest.fixture
def reviews_response() -> dict:
    """Steam appreviews response with num_per_page=0"""
    return {
        "success": 1,
        "query_summary": {
            "num_reviews": 0,
            "review_score": 9,
            "review_score_desc": "Overwhelmingly Positive",
            "total_positive": 9000,
            "total_negative": 100,
            "total_reviews": 9100,
        },
        "reviews": [],
    }


class TestParseReviewSummary:
    """query_summary parsing"""

    def test_totals(self, reviews_response):
        assert parse_review_summary(reviews_response) == ReviewSentiment(positive=9000, negative=100)

    def test_no_reviews_is_valid(self):
        response = {"success": 1, "query_summary": {"total_positive": 0, "total_negative": 0}}
        assert parse_review_summary(response) == ReviewSentiment(0, 0)

    def test_unsuccessful_response(self, reviews_response):
        reviews_response["success"] = 0
        assert parse_review_summary(reviews_response) is None

    def test_missing_summary(self):
        assert parse_review_summary({"success": 1}) is None

    def test_garbage(self):
        assert parse_review_summary(None) is None
        assert parse_review_summary({"success": 1, "query_summary": {"total_positive": "lots"}}) is None


class TestFetchReviewSentiment:
    """Network flow with _fetch patched"""

    @pytest.mark.asyncio
    async def test_success(self, reviews_response):
        enricher = SteamReviewsEnricher(MagicMock())

        with patch.object(enricher, "_fetch", new=AsyncMock(return_value=reviews_response)) as fetch:
            result = await enricher.fetch_review_sentiment(620)

        assert result == Success(ReviewSentiment(9000, 100))
        assert "/appreviews/620?" in fetch.await_args.args[0]

    @pytest.mark.asyncio
    async def test_no_response(self):
        enricher = SteamReviewsEnricher(MagicMock())

        with patch.object(enricher, "_fetch", new=AsyncMock(return_value=None)):
            result = await enricher.fetch_review_sentiment(620)

        assert isinstance(result, Unavailable)
