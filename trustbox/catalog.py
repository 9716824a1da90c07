"""Load read-only catalog snapshots into scoring inputs.

A snapshot is a JSON document, either a list of item objects or an object
with an ``items`` list::

    {"items": [{"id": "g1", "title": "Counting Farm", "age": "3-6",
                "stats": {"likes": 40, "opens": 100, "reports": 1,
                          "avg_play_time_minutes": 12},
                "flags": {"content_moderated": true},
                "last_updated": "2026-10-01T00:00:00Z",
                "parent_rating": 4.6, "total_ratings": 210}]}

Rows that cannot be read are logged and skipped; loading never raises.
"""

import json
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from trustbox.core.age import parse_age_key
from trustbox.core.contracts import AgeRange, ContentItem, ContentStats, SecurityFlags
from trustbox.logging import get_logger

logger = get_logger(__name__)


def safe_json_loads(text: str | None, default: list | None = None) -> Any:
    """Decode snapshot text, returning default on failure.

    Args:
        text: Snapshot file contents
        default: Value returned for empty or invalid text (defaults to an
            empty item list)

    Returns:
        Decoded snapshot or default value
    """
    if default is None:
        default = []

    if not text:
        return default

    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError, ValueError) as e:
        logger.warning(f"Failed to parse catalog snapshot: {e}")
        return default


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds into an aware datetime."""
    if value is None or value == "":
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    return None


def parse_flag(value: Any) -> bool:
    """Read a flag from a JSON boolean, number or ``"true"``/``"false"`` string."""
    return str(value).strip().lower() in ("true", "1", "yes")


def parse_age_range(raw: dict[str, Any]) -> AgeRange | None:
    """Read the age band from ``age`` (key string) or ``age_range`` (pair)."""
    if "age" in raw:
        return parse_age_key(raw.get("age"))

    pair = raw.get("age_range")
    if isinstance(pair, (list, tuple)) and len(pair) == 2:
        try:
            min_age, max_age = int(pair[0]), int(pair[1])
        except (TypeError, ValueError):
            return None
        if min_age > max_age:
            return None
        return AgeRange(min_age, max_age)

    if isinstance(pair, str):
        return parse_age_key(pair)

    return None


def parse_item(raw: Any) -> ContentItem | None:
    """Build a ContentItem from one snapshot row.

    Returns:
        ContentItem, or None if the row is unusable
    """
    if not isinstance(raw, dict) or not raw.get("id"):
        logger.warning("Skipping catalog row without id")
        return None

    item_id = str(raw["id"])

    age_range = parse_age_range(raw)
    if age_range is None:
        logger.warning(f"Skipping {item_id}: not a valid age key")
        return None

    stats_raw = raw.get("stats") or {}
    flags_raw = raw.get("flags") or {}
    if not isinstance(stats_raw, dict) or not isinstance(flags_raw, dict):
        logger.warning(f"Skipping {item_id}: stats and flags must be objects")
        return None

    try:
        stats = ContentStats(
            likes=int(stats_raw.get("likes", 0)),
            opens=int(stats_raw.get("opens", 0)),
            reports=int(stats_raw.get("reports", 0)),
            avg_play_time_minutes=float(stats_raw.get("avg_play_time_minutes", 0.0)),
        )
        parent_rating = float(raw.get("parent_rating", 0.0))
        total_ratings = int(raw.get("total_ratings", 0))
        if not math.isfinite(parent_rating):
            raise ValueError("parent_rating must be finite")
    except (TypeError, ValueError) as e:
        logger.warning(f"Skipping {item_id}: bad stats ({e})")
        return None

    flags = SecurityFlags(
        has_ads=parse_flag(flags_raw.get("has_ads", False)),
        has_tracking=parse_flag(flags_raw.get("has_tracking", False)),
        has_external_links=parse_flag(flags_raw.get("has_external_links", False)),
        content_moderated=parse_flag(flags_raw.get("content_moderated", False)),
    )

    return ContentItem(
        id=item_id,
        title=str(raw.get("title", "")),
        age_range=age_range,
        stats=stats,
        flags=flags,
        last_updated=parse_timestamp(raw.get("last_updated")),
        parent_rating=parent_rating,
        total_ratings=total_ratings,
    )


def parse_catalog(data: Any) -> list[ContentItem]:
    """Convert a decoded snapshot into items, preserving order."""
    if isinstance(data, dict):
        rows = data.get("items", [])
    else:
        rows = data

    if not isinstance(rows, list):
        logger.warning("Catalog snapshot has no item list")
        return []

    items = []
    for raw in rows:
        item = parse_item(raw)
        if item is not None:
            items.append(item)

    skipped = len(rows) - len(items)
    if skipped:
        logger.info(f"Loaded {len(items)} catalog items, skipped {skipped}")

    return items


def load_catalog(path: str | Path) -> list[ContentItem]:
    """Read and parse a catalog snapshot file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to read catalog snapshot {path}: {e}")
        return []

    return parse_catalog(safe_json_loads(text))
