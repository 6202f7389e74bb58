# ===== IMPORTS & DEPENDENCIES =====
import asyncio
import logging
from datetime import datetime, timezone
from typing import List, Optional

from steamcompass.config import RESOLVER_ATTEMPT_DELAY, SIGNAL_TIMEOUT
from steamcompass.metrics import formulas
from steamcompass.metrics.resolver import fetch_signal, resolve
from steamcompass.models.game import (
    COMPLETION_HOURS, CRITIC_SCORES, REVIEW_SENTIMENT,
    CompletionHours, CriticScores, GameIdentity, GameMetrics, ReviewSentiment,
)
from steamcompass.models.signals import Signal, SignalFetcher, Success, Unavailable
from steamcompass.utils.name_variants import name_candidates

# ===== CONFIGURATION & CONSTANTS =====
logger = logging.getLogger(__name__)

# ===== CORE BUSINESS LOGIC =====
class MetricsAggregator:
    """Gathers every signal for one game and derives its ratings."""

    def __init__(
        self,
        fetch_critic_scores: SignalFetcher,
        fetch_review_sentiment: SignalFetcher,
        fetch_completion_hours: SignalFetcher,
        signal_timeout: Optional[float] = SIGNAL_TIMEOUT,
        resolver_delay: float = RESOLVER_ATTEMPT_DELAY,
    ):
        self._fetch_critic_scores = fetch_critic_scores
        self._fetch_review_sentiment = fetch_review_sentiment
        self._fetch_completion_hours = fetch_completion_hours
        self._signal_timeout = signal_timeout
        self._resolver_delay = resolver_delay

    async def _gather_signals(self, identity: GameIdentity) -> List[Signal]:
        """Runs the three lookups concurrently. One failing never cancels the others."""
        candidates = name_candidates(identity.display_name)
        results = await asyncio.gather(
            resolve(candidates, self._critic_lookup, self._resolver_delay, self._signal_timeout),
            fetch_signal(self._fetch_review_sentiment, identity.external_id, timeout=self._signal_timeout),
            resolve(candidates, self._fetch_completion_hours, self._resolver_delay, self._signal_timeout),
            return_exceptions=True,
        )

        signals: List[Signal] = []
        for result in results:
            if isinstance(result, BaseException):
                if isinstance(result, asyncio.CancelledError):
                    raise result
                logger.error(f"❌ [{self.__class__.__name__}] Signal lookup crashed for '{identity.display_name}': {result}", exc_info=result)
                signals.append(Unavailable(f"{type(result).__name__}: {result}"))
            else:
                signals.append(result)
        return signals

    async def _critic_lookup(self, name: str) -> Signal:
        """A critic lookup only counts as a match when it carries at least one score."""
        result = await self._fetch_critic_scores(name)
        scores = result.value if isinstance(result, Success) else result
        if isinstance(scores, CriticScores) and not scores.has_scores:
            return Unavailable(f"no scores on page for '{name}'")
        return result

    @staticmethod
    def _value_or_none(signal: Signal, expected_type: type):
        if isinstance(signal, Success) and isinstance(signal.value, expected_type):
            return signal.value
        return None

    async def aggregate(self, identity: GameIdentity) -> GameMetrics:
        """
        Builds a fresh GameMetrics for `identity`. Missing signals fall back to
        their defaults and are listed in `missing_signals`; this never raises
        because an upstream source failed.
        """
        logger.info(f"➡️ [{self.__class__.__name__}] Aggregating metrics for '{identity.display_name}' ({identity.external_id})")
        critic_signal, review_signal, hours_signal = await self._gather_signals(identity)

        missing: List[str] = []

        scores = self._value_or_none(critic_signal, CriticScores)
        if scores is None:
            missing.append(CRITIC_SCORES)
            scores = CriticScores()

        reviews = self._value_or_none(review_signal, ReviewSentiment)
        if reviews is None:
            missing.append(REVIEW_SENTIMENT)
            reviews = ReviewSentiment()

        completion = self._value_or_none(hours_signal, CompletionHours)
        if completion is None:
            missing.append(COMPLETION_HOURS)
            completion = CompletionHours()

        estimated_hours = completion.preferred()
        if estimated_hours is None:
            estimated_hours = formulas.playtime_hours(identity.owned_playtime_minutes)
            logger.debug(f"[{self.__class__.__name__}] No completion time for '{identity.display_name}', using playtime: {estimated_hours}h")

        quality = formulas.quality_score(scores.critic_score, scores.user_score, reviews.positive, reviews.negative)
        metrics = GameMetrics(
            external_id=identity.external_id,
            display_name=identity.display_name,
            critic_score=scores.critic_score,
            user_score=scores.user_score,
            review_positive=reviews.positive,
            review_negative=reviews.negative,
            estimated_hours=max(0.0, float(estimated_hours)),
            star_rating=formulas.star_rating(
                scores.critic_score, scores.user_score, reviews.positive, reviews.negative,
                estimated_hours, identity.display_name,
            ),
            quality_score=quality,
            value_rating=formulas.value_rating(quality, estimated_hours),
            computed_at=datetime.now(timezone.utc),
            owned_playtime_minutes=identity.owned_playtime_minutes,
            missing_signals=tuple(missing),
        )

        if missing:
            logger.warning(f"⚠️ [{self.__class__.__name__}] Degraded metrics for '{identity.display_name}': missing {', '.join(missing)}")
        logger.info(
            f"✅ [{self.__class__.__name__}] '{identity.display_name}': {metrics.star_rating}⭐ "
            f"quality={metrics.quality_score} value={metrics.value_rating} hours={metrics.estimated_hours}"
        )
        return metrics
