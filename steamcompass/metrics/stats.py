# ===== IMPORTS & DEPENDENCIES =====
from dataclasses import dataclass, field
from typing import List, Sequence

from steamcompass.metrics.formulas import round_half_up
from steamcompass.models.game import GameMetrics

# ===== CONFIGURATION & CONSTANTS =====
TOP_RATED_MIN_STARS = 4.0
TOP_RATED_LIMIT = 10


@dataclass
class CollectionStats:
    """Summary of a user's aggregated library."""
    total_games: int = 0
    average_rating: float = 0.0
    average_quality: float = 0.0
    total_estimated_hours: float = 0.0
    average_completion_hours: float = 0.0
    games_with_critic_score: int = 0
    games_with_reviews: int = 0
    degraded_games: int = 0
    total_played_hours: float = 0.0
    completed_games: int = 0
    completion_rate: int = 0
    unplayed_games: int = 0
    top_rated: List[GameMetrics] = field(default_factory=list)


# ===== CORE BUSINESS LOGIC =====
def collection_stats(metrics: Sequence[GameMetrics]) -> CollectionStats:
    """Aggregates ratings, hours, completion and source coverage across a list of games."""
    if not metrics:
        return CollectionStats()

    count = len(metrics)
    total_hours = sum(game.estimated_hours for game in metrics)
    completed = sum(1 for game in metrics if game.is_completed)
    top_rated = sorted(
        (game for game in metrics if game.star_rating >= TOP_RATED_MIN_STARS),
        key=lambda game: game.star_rating,
        reverse=True,
    )[:TOP_RATED_LIMIT]

    return CollectionStats(
        total_games=count,
        average_rating=round(sum(game.star_rating for game in metrics) / count, 2),
        average_quality=round(sum(game.quality_score for game in metrics) / count, 2),
        total_estimated_hours=round(total_hours, 1),
        average_completion_hours=round(total_hours / count, 1),
        games_with_critic_score=sum(1 for game in metrics if game.critic_score is not None),
        games_with_reviews=sum(1 for game in metrics if game.total_reviews > 0),
        degraded_games=sum(1 for game in metrics if game.is_degraded),
        total_played_hours=float(round_half_up(sum(game.played_hours for game in metrics))),
        completed_games=completed,
        completion_rate=round_half_up(completed * 100 / count),
        unplayed_games=sum(1 for game in metrics if game.owned_playtime_minutes == 0),
        top_rated=top_rated,
    )
