"""Rank a catalog snapshot by trust score and log the leaderboard.

Usage::

    python -m trustbox.jobs [catalog.json] [--limit N] [--age N]

The snapshot path defaults to ``CATALOG_PATH``.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from trustbox.catalog import load_catalog
from trustbox.config import config
from trustbox.core import is_safe, rank, rating_display, score_item
from trustbox.core.contracts import TrustTier
from trustbox.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RankedEntry:
    """One leaderboard row."""

    position: int
    item_id: str
    title: str
    score: float
    tier: TrustTier
    safe: bool
    rating: str


@dataclass
class RankSummary:
    """Result of a ranking run."""

    total_items: int = 0
    entries: list[RankedEntry] = field(default_factory=list)
    tier_counts: dict[str, int] = field(default_factory=dict)


def run_rank_catalog(
    path: str | Path | None = None,
    limit: int | None = None,
    user_age: int | None = None,
    strict: bool | None = None,
    now: datetime | None = None,
) -> RankSummary:
    """Load a snapshot, rank it and log the top entries.

    Args:
        path: Snapshot path, defaults to config.catalog_path
        limit: Number of entries, defaults to config.rank_default_limit
        user_age: Optional target age for the age-fit factor
        strict: Strict safety gate, defaults to config.strict_mode_default
        now: Reference time for freshness

    Returns:
        RankSummary with the leaderboard and per-tier counts
    """
    path = path or config.catalog_path
    if not path:
        raise ValueError("No catalog snapshot given and CATALOG_PATH is not set")

    limit = limit if limit is not None else config.rank_default_limit
    strict = config.strict_mode_default if strict is None else strict
    now = now or datetime.now(timezone.utc)

    items = load_catalog(path)
    summary = RankSummary(total_items=len(items))

    for item in items:
        tier = score_item(item, user_age, now=now).tier
        summary.tier_counts[tier.value] = summary.tier_counts.get(tier.value, 0) + 1

    for position, item in enumerate(rank(items, limit, user_age, now=now), start=1):
        breakdown = score_item(item, user_age, now=now)
        entry = RankedEntry(
            position=position,
            item_id=item.id,
            title=item.title,
            score=breakdown.score,
            tier=breakdown.tier,
            safe=is_safe(item.flags, strict),
            rating=rating_display(item.parent_rating, item.total_ratings),
        )
        summary.entries.append(entry)
        logger.info(
            f"#{entry.position} {entry.item_id} score={entry.score:.3f} "
            f"tier={entry.tier.value} safe={entry.safe} rating={entry.rating}"
        )

    logger.info(
        f"rank_catalog: ranked {summary.total_items} items, "
        f"tiers={summary.tier_counts}"
    )
    return summary
