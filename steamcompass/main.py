# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
import os
import sqlite3
from typing import List, Optional

import aiohttp

# --- Configuration ---
from steamcompass.config import (
    LOG_LEVEL, DATABASE_PATH, STEAM_API_KEY, STEAM_ID, USER_ID,
    BATCH_SIZE, BATCH_DELAY_MS, SIGNAL_TIMEOUT, RESOLVER_ATTEMPT_DELAY,
)

# --- Core Components ---
from steamcompass.core.database import MetricsDatabase

# --- Data Models ---
from steamcompass.models.game import BatchResult, GameIdentity

# --- Signal Providers ---
from steamcompass.enrichment.metacritic_enricher import MetacriticEnricher
from steamcompass.enrichment.steam_reviews_enricher import SteamReviewsEnricher
from steamcompass.enrichment.hltb_enricher import HowLongToBeatEnricher

# --- Library Source ---
from steamcompass.sources.steam_library import SteamLibrarySource

# --- Metrics Engine ---
from steamcompass.metrics.aggregator import MetricsAggregator
from steamcompass.metrics.scheduler import BatchScheduler
from steamcompass.metrics.stats import collection_stats

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)


def setup_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def build_aggregator(session: aiohttp.ClientSession) -> MetricsAggregator:
    """Wires the HTTP providers into an aggregator sharing one session."""
    metacritic = MetacriticEnricher(session)
    steam_reviews = SteamReviewsEnricher(session)
    hltb = HowLongToBeatEnricher(session)
    for provider in (metacritic, steam_reviews, hltb):
        if provider.retry_budget_seconds > SIGNAL_TIMEOUT:
            logger.warning(
                f"⚠️ [{provider.__class__.__name__}] Retries need up to {provider.retry_budget_seconds:.0f}s "
                f"but SIGNAL_TIMEOUT is {SIGNAL_TIMEOUT:.0f}s; later attempts will be cut off."
            )
    return MetricsAggregator(
        fetch_critic_scores=metacritic.fetch_scores,
        fetch_review_sentiment=steam_reviews.fetch_review_sentiment,
        fetch_completion_hours=hltb.fetch_completion_hours,
        signal_timeout=SIGNAL_TIMEOUT,
        resolver_delay=RESOLVER_ATTEMPT_DELAY,
    )


# ===== CORE BUSINESS LOGIC / PIPELINE =====
class MetricsPipeline:
    """Imports a user's library, aggregates metrics for every game and stores the results."""

    def __init__(self, db: MetricsDatabase, library: SteamLibrarySource, scheduler: BatchScheduler,
                 batch_size: int = BATCH_SIZE, batch_delay_ms: int = BATCH_DELAY_MS):
        self.db = db
        self.library = library
        self.scheduler = scheduler
        self.batch_size = batch_size
        self.batch_delay_ms = batch_delay_ms

    def _persist(self, user_id: str, result: BatchResult) -> int:
        """Upserts every aggregated game. Storage failures are logged, not retried."""
        saved = 0
        for metrics in result.succeeded:
            try:
                self.db.upsert_game_metrics(user_id, metrics)
                saved += 1
            except sqlite3.Error as e:
                logger.error(f"❌ Failed to store metrics for '{metrics.display_name}' ({metrics.external_id}): {e}", exc_info=True)
        return saved

    async def run(self, user_id: str, steam_id: str, games: Optional[List[GameIdentity]] = None) -> BatchResult:
        """Executes the complete metrics pipeline for one user."""
        logger.info("🚀 Starting metrics pipeline")

        if games is None:
            logger.info("--- Step 1: Importing owned games ---")
            games = await self.library.fetch_owned_games(steam_id)
        if not games:
            logger.info("No games to process. Exiting.")
            return BatchResult()

        logger.info(f"--- Step 2: Aggregating metrics for {len(games)} games ---")
        result = await self.scheduler.run_batch(games, self.batch_size, self.batch_delay_ms, keep_failed=True)

        logger.info("--- Step 3: Storing metrics ---")
        saved = self._persist(user_id, result)
        logger.info(f"💾 Stored {saved}/{len(result.succeeded)} game records for user {user_id}")

        stats = collection_stats(result.succeeded)
        logger.info(
            f"📊 {stats.total_games} games, average {stats.average_rating}⭐, average quality {stats.average_quality}, "
            f"{stats.games_with_critic_score} with Metacritic, {stats.games_with_reviews} with reviews, "
            f"{stats.degraded_games} degraded, {stats.completed_games} completed ({stats.completion_rate}%), "
            f"{stats.unplayed_games} unplayed, {stats.total_played_hours}h played"
        )
        for error in result.errors:
            logger.warning(f"⚠️ {error}")

        logger.info("🏁 Pipeline finished")
        return result


# ===== INITIALIZATION & STARTUP =====
async def main():
    """Initializes and runs the MetricsPipeline from environment settings."""
    setup_logging()
    if not STEAM_ID:
        logger.critical("STEAM_ID is not set. Nothing to do.")
        return

    db = MetricsDatabase(DATABASE_PATH)
    async with aiohttp.ClientSession() as session:
        pipeline = MetricsPipeline(
            db=db,
            library=SteamLibrarySource(session, STEAM_API_KEY),
            scheduler=BatchScheduler(build_aggregator(session)),
        )
        try:
            await pipeline.run(USER_ID, STEAM_ID)
        except Exception as e:
            logger.critical(f"🔥 A critical error occurred in the metrics pipeline: {e}", exc_info=True)


def run() -> None:
    if os.name == 'nt':
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(main())


if __name__ == "__main__":
    run()
