"""
Derived-metric formulas: star rating, quality score and value rating.

Every function here is pure. Missing inputs are passed as None (scores) or as
zero review counts / zero hours, and each formula degrades to its documented
default instead of raising.
"""
# ===== IMPORTS & DEPENDENCIES =====
import math
from typing import Optional, Sequence, Tuple

from steamcompass.config import KNOWN_FRANCHISE_RATINGS, MIN_REVIEWS_FOR_SUMMARY, REVIEW_SCORE_LABELS

# ===== CONFIGURATION & CONSTANTS =====
NEUTRAL_STARS = 3.0
MIN_STARS = 1.0
MAX_STARS = 5.0

CRITIC_WEIGHT = 0.4
REVIEW_WEIGHT = 0.35
USER_WEIGHT = 0.15
DURATION_WEIGHT = 0.1
TOTAL_SIGNAL_WEIGHT = CRITIC_WEIGHT + REVIEW_WEIGHT + USER_WEIGHT

# (threshold, adjustment) pairs, checked top-down; the last entry catches everything below.
CRITIC_STEPS: Sequence[Tuple[float, float]] = (
    (90, 2.0), (85, 1.5), (80, 1.0), (75, 0.5), (70, 0.0), (65, -0.5), (60, -1.0), (0, -1.5),
)
REVIEW_STEPS: Sequence[Tuple[float, float]] = (
    (95, 2.0), (90, 1.5), (80, 1.0), (70, 0.5), (60, 0.0), (50, -0.5), (40, -1.0), (0, -1.5),
)
USER_STEPS: Sequence[Tuple[float, float]] = (
    (85, 1.0), (75, 0.5), (65, 0.0), (55, -0.5), (0, -1.0),
)

SHORT_GAME_HOURS = 3
LONG_GAME_HOURS = 80
IDEAL_HOURS_RANGE = (15, 50)

QUALITY_BASE = 50.0
QUALITY_CRITIC_WEIGHT = 0.5
QUALITY_REVIEW_WEIGHT = 0.3
QUALITY_USER_WEIGHT = 0.2

VALUE_IDEAL_HOURS_RANGE = (15, 40)
VALUE_IDEAL_BONUS = 1.2
VALUE_SHORT_HOURS = 5
VALUE_SHORT_PENALTY = 0.7
VALUE_LONG_HOURS = 80
VALUE_LONG_PENALTY = 0.8
MAX_VALUE = 10.0


# ===== HELPERS =====
def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Rounds halves upward: 2.5 -> 3, 0.5 -> 1."""
    return math.floor(value + 0.5)


def playtime_hours(minutes: int) -> float:
    """Owned playtime in whole hours, used when no completion time is known."""
    return float(round_half_up(max(0, minutes or 0) / 60))


def step_adjustment(value: float, steps: Sequence[Tuple[float, float]]) -> float:
    """Returns the adjustment of the first step whose threshold `value` reaches."""
    for threshold, adjustment in steps:
        if value >= threshold:
            return adjustment
    return steps[-1][1]


def normalize_user_score(user_score: Optional[float]) -> Optional[float]:
    """Maps a 0-10 user score onto the 0-100 scale used by critic scores."""
    if user_score is None:
        return None
    return user_score * 10


def positive_percentage(positive: int, negative: int) -> Optional[float]:
    """Share of positive reviews in percent, or None when there are no reviews."""
    total = positive + negative
    if total <= 0:
        return None
    return positive * 100 / total


def display_percentage(positive: int, negative: int) -> int:
    """Rounded positive percentage for display. 0 when there are no reviews."""
    percentage = positive_percentage(positive, negative)
    if percentage is None:
        return 0
    return round_half_up(percentage)


def review_score_description(positive: int, negative: int) -> str:
    """Steam-style review summary label."""
    total = positive + negative
    if total < MIN_REVIEWS_FOR_SUMMARY:
        return "No user reviews"
    percentage = display_percentage(positive, negative)
    for minimum, label in REVIEW_SCORE_LABELS:
        if percentage >= minimum:
            return label
    return REVIEW_SCORE_LABELS[-1][1]


def estimated_franchise_rating(display_name: str) -> float:
    """Known-franchise default for games with no score signal at all."""
    name = (display_name or "").lower()
    for keywords, rating in KNOWN_FRANCHISE_RATINGS:
        if any(keyword in name for keyword in keywords):
            return rating
    return NEUTRAL_STARS


def duration_adjustment(estimated_hours: float) -> float:
    """Small additive nudge for very short, very long or ideal-length games."""
    if not estimated_hours or estimated_hours <= 0:
        return 0.0
    if estimated_hours < SHORT_GAME_HOURS:
        return -0.5 * DURATION_WEIGHT
    if estimated_hours > LONG_GAME_HOURS:
        return -0.3 * DURATION_WEIGHT
    low, high = IDEAL_HOURS_RANGE
    if low <= estimated_hours <= high:
        return 0.3 * DURATION_WEIGHT
    return 0.0


# ===== CORE BUSINESS LOGIC =====
def star_rating(
    critic_score: Optional[int],
    user_score: Optional[float],
    review_positive: int,
    review_negative: int,
    estimated_hours: float,
    display_name: str = "",
) -> float:
    """
    Composite 1-5 star rating, one decimal.

    Critic, review and user factors each add `step * weight` to a 3.0 baseline.
    Missing factors are left out and the remaining ones are scaled up to the
    full signal weight, so a game with only a critic score is not pulled
    towards neutral. The duration nudge is added on top without scaling.
    With no factor at all the known-franchise table decides.
    """
    weighted = 0.0
    available_weight = 0.0

    if critic_score is not None:
        weighted += step_adjustment(critic_score, CRITIC_STEPS) * CRITIC_WEIGHT
        available_weight += CRITIC_WEIGHT

    review_percentage = positive_percentage(review_positive, review_negative)
    if review_percentage is not None:
        weighted += step_adjustment(review_percentage, REVIEW_STEPS) * REVIEW_WEIGHT
        available_weight += REVIEW_WEIGHT

    user_normalized = normalize_user_score(user_score)
    if user_normalized is not None:
        weighted += step_adjustment(user_normalized, USER_STEPS) * USER_WEIGHT
        available_weight += USER_WEIGHT

    if available_weight == 0:
        score = estimated_franchise_rating(display_name)
    else:
        score = NEUTRAL_STARS + weighted * (TOTAL_SIGNAL_WEIGHT / available_weight)
        score += duration_adjustment(estimated_hours)

    return round(_clamp(score, MIN_STARS, MAX_STARS), 1)


def quality_score(
    critic_score: Optional[int],
    user_score: Optional[float],
    review_positive: int,
    review_negative: int,
) -> float:
    """0-100 quality composite, independent of time investment. Integer valued."""
    score = QUALITY_BASE
    applied_weight = 0.0

    if critic_score is not None:
        score += (critic_score - 50) * QUALITY_CRITIC_WEIGHT
        applied_weight += QUALITY_CRITIC_WEIGHT

    review_percentage = positive_percentage(review_positive, review_negative)
    if review_percentage is not None:
        score += (review_percentage - 50) * QUALITY_REVIEW_WEIGHT
        applied_weight += QUALITY_REVIEW_WEIGHT

    user_normalized = normalize_user_score(user_score)
    if user_normalized is not None:
        score += (user_normalized - 50) * QUALITY_USER_WEIGHT
        applied_weight += QUALITY_USER_WEIGHT

    if 0 < applied_weight < 1.0:
        score = QUALITY_BASE + (score - QUALITY_BASE) / applied_weight

    return float(round(_clamp(score, 0.0, 100.0)))


def value_rating(quality: Optional[float], estimated_hours: Optional[float]) -> float:
    """0-10 quality-per-hour with an ideal-length bonus and short/long penalties."""
    if not quality or not estimated_hours or estimated_hours <= 0:
        return 0.0

    value = quality / estimated_hours
    low, high = VALUE_IDEAL_HOURS_RANGE
    if low <= estimated_hours <= high:
        value *= VALUE_IDEAL_BONUS
    elif estimated_hours < VALUE_SHORT_HOURS:
        value *= VALUE_SHORT_PENALTY
    elif estimated_hours > VALUE_LONG_HOURS:
        value *= VALUE_LONG_PENALTY

    return round(_clamp(value, 0.0, MAX_VALUE), 2)


def quality_per_hour(quality: Optional[float], estimated_hours: Optional[float]) -> float:
    """Plain quality / hours without length adjustments, for display next to value_rating."""
    if not quality or not estimated_hours or estimated_hours <= 0:
        return 0.0
    return round(quality / estimated_hours, 2)
