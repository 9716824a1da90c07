"""Domain contracts and type definitions."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import NamedTuple


class TrustTier(str, Enum):
    """Trust badge tiers, least to most trusted."""

    VERIFIED = "verified"
    FEATURED = "featured"
    HALL = "hall"


class AgeRange(NamedTuple):
    """Inclusive recommended age band. ``12+`` is stored as (12, 99)."""

    min_age: int
    max_age: int

    def contains(self, age: int) -> bool:
        return self.min_age <= age <= self.max_age


@dataclass(frozen=True)
class ContentStats:
    """Usage counters for one content item."""

    likes: int = 0
    opens: int = 0
    reports: int = 0
    avg_play_time_minutes: float = 0.0

    def __post_init__(self) -> None:
        for name in ("likes", "opens", "reports", "avg_play_time_minutes"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number")


@dataclass(frozen=True)
class SecurityFlags:
    """Safety flags for one content item."""

    has_ads: bool = False
    has_tracking: bool = False
    has_external_links: bool = False
    content_moderated: bool = False


@dataclass(frozen=True)
class ContentItem:
    """A catalog entry with everything needed to score it."""

    id: str
    age_range: AgeRange
    stats: ContentStats = field(default_factory=ContentStats)
    flags: SecurityFlags = field(default_factory=SecurityFlags)
    title: str = ""
    last_updated: datetime | None = None
    parent_rating: float = 0.0
    total_ratings: int = 0


@dataclass(frozen=True)
class TrustBreakdown:
    """Per-factor view of a trust score."""

    engagement: float
    age_fit: float
    safety: float
    freshness: float
    score: float
    tier: TrustTier

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "engagement": self.engagement,
            "age_fit": self.age_fit,
            "safety": self.safety,
            "freshness": self.freshness,
            "score": self.score,
            "tier": self.tier.value,
        }


@dataclass(frozen=True)
class TierConfig:
    """Badge presentation for a trust tier."""

    color: str
    icon: str
    label: str
    description: str


@dataclass(frozen=True)
class TrustPreferences:
    """Parent-controlled filters applied on top of the trust score."""

    min_trust_score: float = 0.6
    require_verified: bool = False
    block_ads: bool = True
    block_tracking: bool = True


@dataclass(frozen=True)
class InteractionRecord:
    """One play (or explicit age selection) in a user's history."""

    content_id: str
    age_range: AgeRange
    played_at: datetime


@dataclass(frozen=True)
class UserHistory:
    """Snapshot of a user's recent interactions, newest first."""

    recent_games: tuple[InteractionRecord, ...] = ()
    preferred_age: AgeRange | None = None


@dataclass(frozen=True)
class AgeGroupConfig:
    """Display settings for a canonical age band."""

    label: str
    color: str
    default: bool = False
