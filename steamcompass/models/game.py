# ===== TYPES & INTERFACES =====

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from steamcompass.metrics import formulas

CRITIC_SCORES = "critic_scores"
REVIEW_SENTIMENT = "review_sentiment"
COMPLETION_HOURS = "completion_hours"

# Share of the completion time a user must have played for a game to count as completed
COMPLETION_PLAYTIME_RATIO = 0.9


@dataclass(frozen=True)
class GameIdentity:
    """
    A game as imported from the user's library. Never mutated after import.

    Attributes:
        external_id (int): Steam App ID, the key for ID-keyed sources.
        display_name (str): Store name, the fuzzy key for name-keyed sources.
        owned_playtime_minutes (int): Minutes the user has played the game.
    """
    external_id: int
    display_name: str
    owned_playtime_minutes: int = 0


@dataclass(frozen=True)
class CriticScores:
    """Metacritic scores. critic_score is 0-100, user_score is 0-10."""
    critic_score: Optional[int] = None
    user_score: Optional[float] = None

    @property
    def has_scores(self) -> bool:
        return self.critic_score is not None or self.user_score is not None


@dataclass(frozen=True)
class ReviewSentiment:
    """Steam positive/negative recommendation counts."""
    positive: int = 0
    negative: int = 0

    def __post_init__(self):
        if self.positive < 0 or self.negative < 0:
            raise ValueError(f"review counts must be >= 0: +{self.positive} -{self.negative}")

    @property
    def total(self) -> int:
        return self.positive + self.negative

    @property
    def positive_percentage(self) -> Optional[float]:
        return formulas.positive_percentage(self.positive, self.negative)


@dataclass(frozen=True)
class CompletionHours:
    """HowLongToBeat estimates in hours. Any of them may be missing."""
    main: Optional[float] = None
    main_plus_extra: Optional[float] = None
    completionist: Optional[float] = None

    def preferred(self) -> Optional[float]:
        """Main story first, then main + extras, then completionist. Zero counts as missing."""
        for hours in (self.main, self.main_plus_extra, self.completionist):
            if hours:
                return hours
        return None


@dataclass(frozen=True)
class GameMetrics:
    """
    The aggregate produced for one game by one aggregation run.

    A later run fully replaces the stored record; the storage key is
    (user, external_id). Nullable score fields keep "missing" apart from "zero".

    Attributes:
        external_id (int): Steam App ID of the game.
        display_name (str): Name the game was imported with.
        critic_score (Optional[int]): Metacritic critic score (0-100).
        user_score (Optional[float]): Metacritic user score (0-10).
        review_positive (int): Positive Steam reviews, 0 when unavailable.
        review_negative (int): Negative Steam reviews, 0 when unavailable.
        estimated_hours (float): Chosen completion time, falls back to owned playtime.
        star_rating (float): Composite 0-5 rating, one decimal.
        quality_score (float): 0-100 composite of critic/review/user signals.
        value_rating (float): 0-10 quality adjusted for time cost.
        computed_at (datetime): UTC timestamp of the run.
        owned_playtime_minutes (int): Minutes the user has played the game.
        missing_signals (Tuple[str, ...]): Signals that were unavailable for this run.
    """
    external_id: int
    display_name: str
    critic_score: Optional[int]
    user_score: Optional[float]
    review_positive: int
    review_negative: int
    estimated_hours: float
    star_rating: float
    quality_score: float
    value_rating: float
    computed_at: datetime
    owned_playtime_minutes: int = 0
    missing_signals: Tuple[str, ...] = ()

    @classmethod
    def degraded(cls, identity: GameIdentity) -> "GameMetrics":
        """Metrics computed from no signals at all, used when aggregation itself failed."""
        hours = formulas.playtime_hours(identity.owned_playtime_minutes)
        quality = formulas.quality_score(None, None, 0, 0)
        return cls(
            external_id=identity.external_id,
            display_name=identity.display_name,
            critic_score=None,
            user_score=None,
            review_positive=0,
            review_negative=0,
            estimated_hours=hours,
            star_rating=formulas.star_rating(None, None, 0, 0, hours, identity.display_name),
            quality_score=quality,
            value_rating=formulas.value_rating(quality, hours),
            computed_at=datetime.now(timezone.utc),
            owned_playtime_minutes=identity.owned_playtime_minutes,
            missing_signals=(CRITIC_SCORES, REVIEW_SENTIMENT, COMPLETION_HOURS),
        )

    @property
    def is_degraded(self) -> bool:
        return bool(self.missing_signals)

    @property
    def total_reviews(self) -> int:
        return self.review_positive + self.review_negative

    @property
    def positive_percentage(self) -> Optional[float]:
        return formulas.positive_percentage(self.review_positive, self.review_negative)

    @property
    def display_positive_percentage(self) -> int:
        return formulas.display_percentage(self.review_positive, self.review_negative)

    @property
    def played_hours(self) -> float:
        return self.owned_playtime_minutes / 60

    @property
    def is_completed(self) -> bool:
        """True when playtime reaches 90% of a known completion time."""
        if COMPLETION_HOURS in self.missing_signals or self.estimated_hours <= 0:
            return False
        return self.played_hours >= self.estimated_hours * COMPLETION_PLAYTIME_RATIO

    @property
    def quality_per_hour(self) -> float:
        return formulas.quality_per_hour(self.quality_score, self.estimated_hours)

    @property
    def review_summary(self) -> str:
        return formulas.review_score_description(self.review_positive, self.review_negative)

    def to_record(self) -> Dict[str, Any]:
        """Flattens the metrics into a storage row."""
        return {
            "app_id": self.external_id,
            "name": self.display_name,
            "critic_score": self.critic_score,
            "user_score": self.user_score,
            "review_positive": self.review_positive,
            "review_negative": self.review_negative,
            "estimated_hours": self.estimated_hours,
            "star_rating": self.star_rating,
            "quality_score": self.quality_score,
            "value_rating": self.value_rating,
            "computed_at": self.computed_at.isoformat(),
            "owned_playtime_minutes": self.owned_playtime_minutes,
            "missing_signals": ",".join(self.missing_signals),
        }


@dataclass
class ChunkReport:
    """Counts for one chunk of a batch run."""
    index: int
    size: int
    succeeded: int = 0
    failed: int = 0


@dataclass
class BatchResult:
    """Outcome of one scheduled run across a list of games."""
    succeeded: List[GameMetrics] = field(default_factory=list)
    failed_count: int = 0
    errors: List[str] = field(default_factory=list)
    chunks: List[ChunkReport] = field(default_factory=list)

    @property
    def total_processed(self) -> int:
        return sum(chunk.size for chunk in self.chunks)

    @property
    def success(self) -> bool:
        """True when at least one game was aggregated without failing."""
        return self.total_processed - self.failed_count > 0
