"""Core module containing the trust scorer, age recommender and domain types."""

from trustbox.core.contracts import (
    AgeGroupConfig,
    AgeRange,
    ContentItem,
    ContentStats,
    InteractionRecord,
    SecurityFlags,
    TierConfig,
    TrustBreakdown,
    TrustPreferences,
    TrustTier,
    UserHistory,
)
from trustbox.core.thresholds import DEFAULT_SCORING, ScoringConfig
from trustbox.core.trust import (
    NEW_CONTENT_LABEL,
    classify_tier,
    compute_trust_score,
    is_safe,
    passes_preferences,
    rank,
    rating_display,
    score_breakdown,
    score_item,
    tier_config,
)
from trustbox.core.age import (
    AGE_GROUPS,
    DEFAULT_AGE_RANGE,
    HISTORY_CAPACITY,
    age_color,
    age_key,
    age_label,
    match_score,
    parse_age_key,
    recommend,
    recommend_by_age,
    record_age_selection,
    record_interaction,
)

__all__ = [
    # Contracts/Types
    "AgeGroupConfig",
    "AgeRange",
    "ContentItem",
    "ContentStats",
    "InteractionRecord",
    "SecurityFlags",
    "TierConfig",
    "TrustBreakdown",
    "TrustPreferences",
    "TrustTier",
    "UserHistory",
    # Thresholds
    "DEFAULT_SCORING",
    "ScoringConfig",
    # Trust scoring
    "NEW_CONTENT_LABEL",
    "classify_tier",
    "compute_trust_score",
    "is_safe",
    "passes_preferences",
    "rank",
    "rating_display",
    "score_breakdown",
    "score_item",
    "tier_config",
    # Age recommendation
    "AGE_GROUPS",
    "DEFAULT_AGE_RANGE",
    "HISTORY_CAPACITY",
    "age_color",
    "age_key",
    "age_label",
    "match_score",
    "parse_age_key",
    "recommend",
    "recommend_by_age",
    "record_age_selection",
    "record_interaction",
]
