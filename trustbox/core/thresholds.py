"""Weights and thresholds shared by the trust scorer and the age recommender."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ScoringConfig:
    """Every numeric constant the scoring core depends on.

    Both ``trust.age_fit_factor`` and ``age.match_score`` read the age
    banding from here, so the two can never drift apart.
    """

    # Engagement factor
    play_time_full_minutes: float = 60.0
    play_time_weight: float = 0.4
    like_rate_weight: float = 0.4
    report_suppression_weight: float = 0.2

    # Age banding: (max distance in years from either bound, score),
    # checked tightest first; anything further gets age_fit_miss.
    age_fit_exact: float = 1.0
    age_fit_bands: tuple[tuple[int, float], ...] = ((1, 0.8), (2, 0.6))
    age_fit_miss: float = 0.3

    # Safety factor
    ads_multiplier: float = 0.7
    tracking_multiplier: float = 0.8
    external_links_multiplier: float = 0.9
    safety_floor: float = 0.5

    # Freshness factor: (max days since update, score)
    freshness_bands: tuple[tuple[int, float], ...] = ((7, 1.0), (30, 0.9), (90, 0.8))
    freshness_stale: float = 0.7

    # Tier lower bounds (closed)
    hall_threshold: float = 0.9
    featured_threshold: float = 0.75

    # Parent rating display
    exact_rating_min_count: int = 156
    range_rating_min_count: int = 20
    rating_range_spread: float = 0.3


DEFAULT_SCORING = ScoringConfig()
