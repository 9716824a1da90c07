"""HTTP entrypoint exposing the scoring core over FastAPI."""

from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from trustbox.config import config
from trustbox.core import (
    AGE_GROUPS,
    AgeRange,
    ContentItem,
    ContentStats,
    InteractionRecord,
    SecurityFlags,
    UserHistory,
    age_color,
    age_key,
    age_label,
    is_safe,
    match_score,
    parse_age_key,
    rank,
    rating_display,
    recommend,
    recommend_by_age,
    score_item,
    tier_config,
)
from trustbox.logging import get_logger, setup_logging

setup_logging(config.log_level)
logger = get_logger(__name__)


app = FastAPI(
    title="Trustbox",
    version="0.1.0",
)


class StatsPayload(BaseModel):
    """Usage counters for an item."""

    likes: int = Field(0, ge=0)
    opens: int = Field(0, ge=0)
    reports: int = Field(0, ge=0)
    avg_play_time_minutes: float = Field(0.0, ge=0, allow_inf_nan=False)


class FlagsPayload(BaseModel):
    """Safety flags for an item."""

    has_ads: bool = False
    has_tracking: bool = False
    has_external_links: bool = False
    content_moderated: bool = False


class ItemPayload(BaseModel):
    """A catalog item as sent by the catalog source."""

    id: str
    title: str = ""
    age: str  # "6-9" or "12+"
    stats: StatsPayload = StatsPayload()
    flags: FlagsPayload = FlagsPayload()
    last_updated: datetime | None = None
    parent_rating: float = 0.0
    total_ratings: int = Field(0, ge=0)


class ScorePayload(BaseModel):
    """Request body for /trust/score."""

    item: ItemPayload
    user_age: int | None = Field(None, ge=0)


class RankPayload(BaseModel):
    """Request body for /trust/rank."""

    items: list[ItemPayload]
    limit: int | None = Field(None, ge=0)
    user_age: int | None = Field(None, ge=0)


class InteractionPayload(BaseModel):
    """One entry of a user's recent history."""

    content_id: str
    age: str
    played_at: datetime | None = None


class HistoryPayload(BaseModel):
    """Request body for /age/recommend."""

    recent_games: list[InteractionPayload] = []
    preferred_age: str | None = None


def _require_age(key: str) -> AgeRange:
    age_range = parse_age_key(key)
    if age_range is None:
        raise HTTPException(status_code=400, detail=f"Not a valid age key: {key!r}")
    return age_range


def _to_item(payload: ItemPayload) -> ContentItem:
    return ContentItem(
        id=payload.id,
        title=payload.title,
        age_range=_require_age(payload.age),
        stats=ContentStats(**payload.stats.model_dump()),
        flags=SecurityFlags(**payload.flags.model_dump()),
        last_updated=payload.last_updated,
        parent_rating=payload.parent_rating,
        total_ratings=payload.total_ratings,
    )


def _to_history(payload: HistoryPayload) -> UserHistory:
    now = datetime.now(timezone.utc)
    records = []
    for entry in payload.recent_games:
        age_range = parse_age_key(entry.age)
        if age_range is None:
            # Unparsable entries are ignored, not rejected
            logger.debug(f"Ignoring history entry {entry.content_id}: bad age key")
            continue
        records.append(
            InteractionRecord(
                content_id=entry.content_id,
                age_range=age_range,
                played_at=entry.played_at or now,
            )
        )

    preferred = parse_age_key(payload.preferred_age) if payload.preferred_age else None
    return UserHistory(recent_games=tuple(records), preferred_age=preferred)


def _age_body(age_range: AgeRange) -> dict:
    return {
        "min_age": age_range.min_age,
        "max_age": age_range.max_age,
        "key": age_key(age_range),
        "label": age_label(age_range),
        "color": age_color(age_range),
    }


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"ok": True}


@app.post("/trust/score")
async def score_endpoint(payload: ScorePayload) -> dict:
    """Score a single item and return its badge data."""
    item = _to_item(payload.item)
    breakdown = score_item(item, payload.user_age)
    badge = tier_config(breakdown.tier)

    return {
        "ok": True,
        "id": item.id,
        **breakdown.to_dict(),
        "safe": is_safe(item.flags, config.strict_mode_default),
        "strict_safe": is_safe(item.flags, strict=True),
        "rating": rating_display(item.parent_rating, item.total_ratings),
        "badge": {
            "color": badge.color,
            "icon": badge.icon,
            "label": badge.label,
            "description": badge.description,
        },
    }


@app.post("/trust/rank")
async def rank_endpoint(payload: RankPayload) -> dict:
    """Rank items by trust score, highest first."""
    items = [_to_item(p) for p in payload.items]
    limit = payload.limit if payload.limit is not None else config.rank_default_limit
    now = datetime.now(timezone.utc)

    ranked = rank(items, limit, payload.user_age, now=now)
    logger.info(f"Ranked {len(items)} items (limit={limit})")

    results = []
    for item in ranked:
        breakdown = score_item(item, payload.user_age, now=now)
        results.append({
            "id": item.id,
            "title": item.title,
            "score": breakdown.score,
            "tier": breakdown.tier.value,
        })

    return {"ok": True, "items": results}


@app.post("/age/recommend")
async def recommend_endpoint(payload: HistoryPayload) -> dict:
    """Recommend an age band from a user's history."""
    return {"ok": True, **_age_body(recommend(_to_history(payload)))}


@app.get("/age/groups")
async def age_groups() -> dict:
    """Canonical age bands with display settings."""
    return {
        "ok": True,
        "groups": [
            {
                "key": key,
                "label": group.label,
                "color": group.color,
                "default": group.default,
            }
            for key, group in AGE_GROUPS.items()
        ],
    }


@app.get("/age/match")
async def age_match(user_age: int, key: str) -> dict:
    """Match quality between a user's age and an age band."""
    age_range = _require_age(key)
    return {"ok": True, "key": age_key(age_range), "score": match_score(user_age, age_range)}


@app.get("/age/by-age/{child_age}")
async def age_by_child_age(child_age: int) -> dict:
    """Canonical band for a known child age."""
    return {"ok": True, **_age_body(recommend_by_age(child_age))}


def main() -> None:
    """Run the API server."""
    logger.info(f"Starting FastAPI server on {config.host}:{config.port}")
    uvicorn.run(
        "trustbox.main:app",
        host=config.host,
        port=config.port,
        reload=False,
    )


if __name__ == "__main__":
    main()
