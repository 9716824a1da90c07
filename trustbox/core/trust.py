"""Trust score computation and tiering for catalog items.

The score is the product of four factors, each bounded on its own:

    engagement (0-1) * age_fit (0.3-1) * safety (0.5-1) * freshness (0.7-1)

A weak factor caps the whole score; strength elsewhere cannot offset it.
"""

import math
from datetime import datetime, timezone
from typing import Iterable, Sequence

from trustbox.core.age import match_score
from trustbox.core.contracts import (
    ContentItem,
    ContentStats,
    SecurityFlags,
    TierConfig,
    TrustBreakdown,
    TrustPreferences,
    TrustTier,
)
from trustbox.core.thresholds import DEFAULT_SCORING, ScoringConfig
from trustbox.logging import get_logger

logger = get_logger(__name__)

NEW_CONTENT_LABEL = "New content"

TIER_CONFIGS: dict[TrustTier, TierConfig] = {
    TrustTier.VERIFIED: TierConfig(
        color="#10B981",
        icon="shield-check",
        label="Verified",
        description="Passed the basic safety review",
    ),
    TrustTier.FEATURED: TierConfig(
        color="#8B5CF6",
        icon="star",
        label="Expert pick",
        description="Endorsed by education experts",
    ),
    TrustTier.HALL: TierConfig(
        color="#F59E0B",
        icon="crown",
        label="Hall of fame",
        description="Widely praised by parents",
    ),
}


def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    if math.isnan(value):
        return low
    return max(low, min(high, value))


def engagement_factor(
    stats: ContentStats,
    *,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Weighted play-time, like-rate and report-suppression terms.

    With no opens the like rate is 0 and the report suppression is 1.
    """
    play_time = min(stats.avg_play_time_minutes / scoring.play_time_full_minutes, 1.0)

    if stats.opens > 0:
        like_rate = _clamp(stats.likes / stats.opens)
        report_rate = _clamp(stats.reports / stats.opens)
    else:
        like_rate = 0.0
        report_rate = 0.0

    return (
        play_time * scoring.play_time_weight
        + like_rate * scoring.like_rate_weight
        + (1.0 - report_rate) * scoring.report_suppression_weight
    )


def age_fit_factor(
    age_range: Iterable[int],
    user_age: int | None = None,
    *,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Age fit for the trust score; neutral when the user's age is unknown."""
    if user_age is None:
        return scoring.age_fit_exact
    return match_score(user_age, age_range, scoring=scoring)


def safety_factor(
    flags: SecurityFlags,
    *,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Multiplicative penalty for ads, tracking and external links.

    Moderation status does not move this factor; it is enforced by is_safe.
    """
    score = 1.0

    if flags.has_ads:
        score *= scoring.ads_multiplier
    if flags.has_tracking:
        score *= scoring.tracking_multiplier
    if flags.has_external_links:
        score *= scoring.external_links_multiplier

    return max(score, scoring.safety_floor)


def freshness_factor(
    last_updated: datetime | None,
    *,
    now: datetime | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Step function over days since the last update."""
    now = now or datetime.now(timezone.utc)
    last_updated = last_updated or now

    # Naive timestamps are treated as UTC
    if last_updated.tzinfo is None:
        last_updated = last_updated.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    days = (now - last_updated).total_seconds() / 86400

    for max_days, score in scoring.freshness_bands:
        if days <= max_days:
            return score

    return scoring.freshness_stale


def classify_tier(score: float, *, scoring: ScoringConfig = DEFAULT_SCORING) -> TrustTier:
    """Map a trust score to its tier. Lower bounds are inclusive."""
    if score >= scoring.hall_threshold:
        return TrustTier.HALL
    if score >= scoring.featured_threshold:
        return TrustTier.FEATURED
    return TrustTier.VERIFIED


def tier_config(tier: TrustTier) -> TierConfig:
    return TIER_CONFIGS[TrustTier(tier)]


def score_breakdown(
    stats: ContentStats,
    flags: SecurityFlags,
    age_range: Iterable[int],
    last_updated: datetime | None = None,
    user_age: int | None = None,
    *,
    now: datetime | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> TrustBreakdown:
    """Compute every trust factor along with the combined score and tier.

    Args:
        stats: Usage counters
        flags: Safety flags
        age_range: Item's (min, max) age band
        last_updated: Last content update, defaults to now
        user_age: Target user's age, if known
        now: Reference time for freshness
        scoring: Weights and thresholds

    Returns:
        TrustBreakdown with the product score in [0, 1]
    """
    engagement = engagement_factor(stats, scoring=scoring)
    age_fit = age_fit_factor(age_range, user_age, scoring=scoring)
    safety = safety_factor(flags, scoring=scoring)
    freshness = freshness_factor(last_updated, now=now, scoring=scoring)

    score = _clamp(engagement * age_fit * safety * freshness)

    return TrustBreakdown(
        engagement=engagement,
        age_fit=age_fit,
        safety=safety,
        freshness=freshness,
        score=score,
        tier=classify_tier(score, scoring=scoring),
    )


def compute_trust_score(
    stats: ContentStats,
    flags: SecurityFlags,
    age_range: Iterable[int],
    last_updated: datetime | None = None,
    user_age: int | None = None,
    *,
    now: datetime | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Trust score in [0, 1]; see score_breakdown."""
    return score_breakdown(
        stats,
        flags,
        age_range,
        last_updated,
        user_age,
        now=now,
        scoring=scoring,
    ).score


def score_item(
    item: ContentItem,
    user_age: int | None = None,
    *,
    now: datetime | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> TrustBreakdown:
    return score_breakdown(
        item.stats,
        item.flags,
        item.age_range,
        item.last_updated,
        user_age,
        now=now,
        scoring=scoring,
    )


def is_safe(flags: SecurityFlags, strict: bool = False) -> bool:
    """Boolean safety gate, independent of the numeric safety factor.

    Unmoderated content is never safe. Strict mode also rejects ads and
    tracking.
    """
    if not flags.content_moderated:
        return False

    if strict and (flags.has_ads or flags.has_tracking):
        return False

    return True


def rating_display(
    rating: float,
    total_ratings: int,
    *,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> str:
    """Parent rating text, with precision matched to the sample size."""
    if total_ratings >= scoring.exact_rating_min_count:
        return f"{rating:.1f} ({total_ratings} parent ratings)"

    if total_ratings >= scoring.range_rating_min_count:
        spread = scoring.rating_range_spread
        return f"{rating - spread:.1f}-{rating + spread:.1f}"

    return NEW_CONTENT_LABEL


def rank(
    items: Sequence[ContentItem],
    limit: int = 10,
    user_age: int | None = None,
    *,
    now: datetime | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> list[ContentItem]:
    """Top ``limit`` items by descending trust score.

    The sort is stable: items with equal scores keep their input order.
    """
    now = now or datetime.now(timezone.utc)
    scored = [
        (score_item(item, user_age, now=now, scoring=scoring).score, item)
        for item in items
    ]
    scored.sort(key=lambda pair: pair[0], reverse=True)

    logger.debug(f"Ranked {len(scored)} items, returning top {max(limit, 0)}")
    return [item for _, item in scored[: max(limit, 0)]]


def passes_preferences(
    item: ContentItem,
    prefs: TrustPreferences,
    *,
    user_age: int | None = None,
    now: datetime | None = None,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> bool:
    """Check an item against a parent's trust preferences."""
    if prefs.block_ads and item.flags.has_ads:
        return False
    if prefs.block_tracking and item.flags.has_tracking:
        return False
    if prefs.require_verified and not is_safe(item.flags):
        return False

    score = score_item(item, user_age, now=now, scoring=scoring).score
    return score >= prefs.min_trust_score
