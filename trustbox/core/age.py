"""Age-band recommendation from interaction history."""

import re
from datetime import datetime, timezone
from typing import Iterable

from trustbox.core.contracts import AgeGroupConfig, AgeRange, InteractionRecord, UserHistory
from trustbox.core.thresholds import DEFAULT_SCORING, ScoringConfig
from trustbox.logging import get_logger

logger = get_logger(__name__)

OPEN_ENDED_MAX_AGE = 99
HISTORY_CAPACITY = 50
AGE_SELECTION_CONTENT_ID = "age-selection"

DEFAULT_AGE_RANGE = AgeRange(6, 9)
DEFAULT_AGE_COLOR = "#3B82F6"

AGE_GROUPS: dict[str, AgeGroupConfig] = {
    "3-6": AgeGroupConfig(label="Ages 3-6", color="#10B981"),
    "6-9": AgeGroupConfig(label="Ages 6-9", color="#3B82F6", default=True),
    "9-12": AgeGroupConfig(label="Ages 9-12", color="#8B5CF6"),
    "12+": AgeGroupConfig(label="Ages 12+", color="#F59E0B"),
}

_RANGE_KEY = re.compile(r"^(\d+)-(\d+)$")
_OPEN_KEY = re.compile(r"^(\d+)\+$")


def parse_age_key(key: str | None) -> AgeRange | None:
    """Parse an age key such as ``"6-9"`` or ``"12+"``.

    Args:
        key: Age key string

    Returns:
        AgeRange, or None if the key is not a valid age key
    """
    if not isinstance(key, str):
        return None

    key = key.strip()

    match = _RANGE_KEY.match(key)
    if match:
        min_age, max_age = int(match.group(1)), int(match.group(2))
        if min_age > max_age:
            return None
        return AgeRange(min_age, max_age)

    match = _OPEN_KEY.match(key)
    if match:
        return AgeRange(int(match.group(1)), OPEN_ENDED_MAX_AGE)

    return None


def age_key(age_range: Iterable[int]) -> str:
    """Build the canonical key for an age range (inverse of parse_age_key)."""
    min_age, max_age = age_range
    if max_age >= OPEN_ENDED_MAX_AGE:
        return f"{min_age}+"
    return f"{min_age}-{max_age}"


def age_label(age_range: Iterable[int]) -> str:
    key = age_key(age_range)
    group = AGE_GROUPS.get(key)
    return group.label if group else f"Ages {key}"


def age_color(age_range: Iterable[int]) -> str:
    group = AGE_GROUPS.get(age_key(age_range))
    return group.color if group else DEFAULT_AGE_COLOR


def match_score(
    user_age: int,
    age_range: Iterable[int],
    *,
    scoring: ScoringConfig = DEFAULT_SCORING,
) -> float:
    """Score how well a user's age fits an item's age band.

    Exact containment scores highest; otherwise the distance to the nearer
    bound is checked against the configured bands, tightest first.

    Args:
        user_age: User's age in years
        age_range: (min, max) inclusive band
        scoring: Thresholds to use

    Returns:
        Match score in [age_fit_miss, age_fit_exact]
    """
    min_age, max_age = age_range

    if min_age <= user_age <= max_age:
        return scoring.age_fit_exact

    distance = min(abs(user_age - min_age), abs(user_age - max_age))
    for max_distance, score in scoring.age_fit_bands:
        if distance <= max_distance:
            return score

    return scoring.age_fit_miss


def most_common_age_range(records: Iterable[InteractionRecord]) -> AgeRange | None:
    """Return the most frequent age band among the records.

    Counting is a single pass in the given (newest-first) order. A band
    replaces the current leader only when its count strictly exceeds the
    leader's, so among tied bands the first one to reach the top count wins.
    """
    counts: dict[AgeRange, int] = {}
    best: AgeRange | None = None
    best_count = 0

    for record in records:
        band = AgeRange(*record.age_range)
        counts[band] = counts.get(band, 0) + 1
        if counts[band] > best_count:
            best = band
            best_count = counts[band]

    return best


def recommend(history: UserHistory | None) -> AgeRange:
    """Recommend an age band for a user.

    A user with no recent games gets the default band. Otherwise an explicit
    ``preferred_age`` wins, then the most frequent band in recent history.
    """
    if history is None or not history.recent_games:
        return DEFAULT_AGE_RANGE

    if history.preferred_age is not None:
        return history.preferred_age

    return most_common_age_range(history.recent_games) or DEFAULT_AGE_RANGE


def recommend_by_age(child_age: int) -> AgeRange:
    """Bucket a known age into a canonical band.

    Shared boundary ages (6, 9, 12) resolve to the lower band; ages under 3
    fall back to the youngest band.
    """
    if child_age <= 6:
        return AgeRange(3, 6)
    if child_age <= 9:
        return AgeRange(6, 9)
    if child_age <= 12:
        return AgeRange(9, 12)
    return AgeRange(12, OPEN_ENDED_MAX_AGE)


def record_interaction(
    history: UserHistory | None,
    content_id: str,
    age_range: Iterable[int],
    played_at: datetime,
    *,
    capacity: int = HISTORY_CAPACITY,
) -> UserHistory:
    """Return a new history with the interaction prepended.

    The oldest records are dropped once ``capacity`` is exceeded.
    """
    history = history or UserHistory()
    record = InteractionRecord(
        content_id=content_id,
        age_range=AgeRange(*age_range),
        played_at=played_at,
    )
    recent = (record,) + history.recent_games[: max(capacity - 1, 0)]
    return UserHistory(recent_games=recent, preferred_age=history.preferred_age)


def record_age_selection(
    history: UserHistory | None,
    age_range: Iterable[int],
    *,
    now: datetime | None = None,
) -> UserHistory:
    """Return a new history with ``age_range`` as the explicit preference."""
    selected = AgeRange(*age_range)
    updated = record_interaction(
        history,
        AGE_SELECTION_CONTENT_ID,
        selected,
        now or datetime.now(timezone.utc),
    )
    logger.debug(f"Recorded age selection {age_key(selected)}")
    return UserHistory(recent_games=updated.recent_games, preferred_age=selected)
