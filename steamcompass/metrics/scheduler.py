# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence

from steamcompass.metrics.aggregator import MetricsAggregator
from steamcompass.models.game import BatchResult, ChunkReport, GameIdentity, GameMetrics

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class BatchScheduler:
    """
    Drives the aggregator over a user's library in fixed-size chunks.

    Chunks run strictly one after another with a pause in between, which is the
    only rate limiting applied to the upstream sources.
    """

    def __init__(self, aggregator: MetricsAggregator, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep):
        self.aggregator = aggregator
        self._sleep = sleep

    @staticmethod
    def _chunk(games: Sequence[GameIdentity], size: int) -> List[Sequence[GameIdentity]]:
        return [games[i:i + size] for i in range(0, len(games), size)]

    async def _run_chunk(self, chunk: Sequence[GameIdentity]) -> list:
        tasks = [self.aggregator.aggregate(game) for game in chunk]
        return await asyncio.gather(*tasks, return_exceptions=True)

    async def run_batch(
        self,
        games: Sequence[GameIdentity],
        concurrency_per_batch: int,
        delay_between_batches_ms: int,
        keep_failed: bool = False,
    ) -> BatchResult:
        """
        Aggregates every game and collects the outcome. A game whose aggregation
        raises is recorded in `errors`; with `keep_failed` it is also returned
        with degraded fallback metrics. One game never aborts the run.
        """
        if concurrency_per_batch < 1:
            raise ValueError(f"concurrency_per_batch must be >= 1: {concurrency_per_batch}")
        if delay_between_batches_ms < 0:
            raise ValueError(f"delay_between_batches_ms must be >= 0: {delay_between_batches_ms}")

        games = list(games)
        chunks = self._chunk(games, concurrency_per_batch)
        result = BatchResult()
        logger.info(f"📊 [{self.__class__.__name__}] Starting batch: {len(games)} games in {len(chunks)} chunks of {concurrency_per_batch}")

        for index, chunk in enumerate(chunks, start=1):
            logger.info(f"🔄 [{self.__class__.__name__}] Processing chunk {index}/{len(chunks)} ({len(chunk)} games)")
            report = ChunkReport(index=index, size=len(chunk))
            outcomes = await self._run_chunk(chunk)

            for game, outcome in zip(chunk, outcomes):
                if isinstance(outcome, GameMetrics):
                    result.succeeded.append(outcome)
                    report.succeeded += 1
                    continue

                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                message = f"{game.display_name} ({game.external_id}): {outcome}"
                logger.error(f"❌ [{self.__class__.__name__}] Aggregation failed for {message}")
                result.errors.append(message)
                result.failed_count += 1
                report.failed += 1
                if keep_failed:
                    result.succeeded.append(GameMetrics.degraded(game))

            result.chunks.append(report)
            logger.info(f"✅ [{self.__class__.__name__}] Chunk {index}/{len(chunks)} done: {report.succeeded} ok, {report.failed} failed")

            if index < len(chunks) and delay_between_batches_ms > 0:
                logger.info(f"⏳ [{self.__class__.__name__}] Waiting {delay_between_batches_ms}ms before the next chunk...")
                await self._sleep(delay_between_batches_ms / 1000)

        logger.info(
            f"🏁 [{self.__class__.__name__}] Batch complete: {len(games) - result.failed_count}/{len(games)} games aggregated, "
            f"{result.failed_count} failed"
        )
        return result
