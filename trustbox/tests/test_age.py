"""Tests for the age recommender."""

from datetime import timedelta

import pytest

from trustbox.core import (
    AGE_GROUPS,
    DEFAULT_AGE_RANGE,
    HISTORY_CAPACITY,
    AgeRange,
    InteractionRecord,
    UserHistory,
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
from trustbox.core.age import most_common_age_range


def _history(now, *bands, preferred=None) -> UserHistory:
    """Build a newest-first history from (min, max) pairs."""
    records = tuple(
        InteractionRecord(
            content_id=f"game-{i}",
            age_range=AgeRange(*band),
            played_at=now - timedelta(hours=i),
        )
        for i, band in enumerate(bands)
    )
    return UserHistory(recent_games=records, preferred_age=preferred)


# ---------------------------------------------------------------------------
# parse_age_key / age_key
# ---------------------------------------------------------------------------


class TestParseAgeKey:
    """Accepts "<min>-<max>" and "<n>+", nothing else."""

    def test_range(self):
        assert parse_age_key("6-9") == (6, 9)
        assert parse_age_key("3-6") == AgeRange(3, 6)

    def test_open_ended(self):
        assert parse_age_key("12+") == (12, 99)

    @pytest.mark.parametrize(
        "key",
        ["abc", "", "6", "6-", "-9", "6-9-12", "12+3", "+12", "6 - 9", "9-6", "a-b", None, 69],
    )
    def test_invalid_returns_none(self, key):
        assert parse_age_key(key) is None

    def test_surrounding_whitespace_ignored(self):
        assert parse_age_key(" 9-12 ") == (9, 12)

    def test_filtering_none_results(self):
        keys = ["3-6", "oops", "12+", "??"]
        parsed = [r for r in (parse_age_key(k) for k in keys) if r is not None]

        assert parsed == [(3, 6), (12, 99)]

    @pytest.mark.parametrize("key", ["3-6", "6-9", "9-12", "12+"])
    def test_age_key_inverse(self, key):
        assert age_key(parse_age_key(key)) == key


class TestAgeGroups:
    """Display lookups keyed by canonical band."""

    def test_groups_cover_canonical_bands(self):
        assert list(AGE_GROUPS) == ["3-6", "6-9", "9-12", "12+"]
        assert [k for k, g in AGE_GROUPS.items() if g.default] == ["6-9"]

    def test_known_band(self):
        assert age_label((6, 9)) == "Ages 6-9"
        assert age_color((6, 9)) == "#3B82F6"
        assert age_label((12, 99)) == "Ages 12+"
        assert age_color((3, 6)) == "#10B981"

    def test_unknown_band_falls_back(self):
        assert age_label((4, 7)) == "Ages 4-7"
        assert age_color((4, 7)) == "#3B82F6"


# ---------------------------------------------------------------------------
# match_score
# ---------------------------------------------------------------------------


class TestMatchScore:
    """Four-tier banding around an age range."""

    @pytest.mark.parametrize(
        "user_age,expected",
        [
            (6, 1.0),
            (8, 1.0),
            (9, 1.0),
            (5, 0.8),
            (10, 0.8),
            (4, 0.6),
            (11, 0.6),
            (3, 0.3),
            (12, 0.3),
            (30, 0.3),
        ],
    )
    def test_bands(self, user_age, expected):
        assert match_score(user_age, (6, 9)) == expected

    def test_tightest_band_wins(self):
        assert match_score(2, (3, 4)) == 0.8
        assert match_score(1, (3, 4)) == 0.6

    def test_open_ended_band(self):
        assert match_score(50, (12, 99)) == 1.0
        assert match_score(10, (12, 99)) == 0.6


# ---------------------------------------------------------------------------
# recommend
# ---------------------------------------------------------------------------


class TestRecommend:
    """History-based recommendation."""

    def test_no_history(self):
        assert recommend(None) == DEFAULT_AGE_RANGE == (6, 9)

    def test_empty_history(self):
        assert recommend(UserHistory()) == (6, 9)

    def test_preference_without_games_gets_default(self):
        history = UserHistory(preferred_age=AgeRange(9, 12))

        assert recommend(history) == DEFAULT_AGE_RANGE

    def test_preferred_age_wins(self, now):
        history = _history(now, (3, 6), (3, 6), (3, 6), preferred=AgeRange(9, 12))

        assert recommend(history) == (9, 12)

    def test_preferred_age_returned_unchanged(self, now):
        preferred = AgeRange(4, 7)
        history = _history(now, (6, 9), preferred=preferred)

        assert recommend(history) is preferred

    def test_most_frequent_band(self, now):
        history = _history(now, (3, 6), (9, 12), (9, 12), (6, 9))

        assert recommend(history) == (9, 12)

    def test_tie_goes_to_first_band_reaching_max(self, now):
        # (6, 9) reaches 2 first during the newest-first pass
        history = _history(now, (3, 6), (6, 9), (6, 9), (3, 6))

        assert recommend(history) == (6, 9)

    def test_single_occurrence_tie_goes_to_newest(self, now):
        history = _history(now, (9, 12), (3, 6))

        assert recommend(history) == (9, 12)

    def test_most_common_of_nothing(self):
        assert most_common_age_range([]) is None


# ---------------------------------------------------------------------------
# recommend_by_age
# ---------------------------------------------------------------------------


class TestRecommendByAge:
    """Direct bucketing, shared boundaries go to the lower band."""

    @pytest.mark.parametrize(
        "age,band",
        [
            (0, (3, 6)),
            (2, (3, 6)),
            (3, (3, 6)),
            (6, (3, 6)),
            (7, (6, 9)),
            (9, (6, 9)),
            (10, (9, 12)),
            (12, (9, 12)),
            (13, (12, 99)),
            (15, (12, 99)),
        ],
    )
    def test_buckets(self, age, band):
        assert recommend_by_age(age) == band


# ---------------------------------------------------------------------------
# History updates
# ---------------------------------------------------------------------------


class TestRecordInteraction:
    """Newest-first, bounded history."""

    def test_prepends(self, now):
        history = _history(now, (3, 6))

        updated = record_interaction(history, "new", (9, 12), now)

        assert [r.content_id for r in updated.recent_games] == ["new", "game-0"]
        assert updated.recent_games[0].age_range == (9, 12)

    def test_does_not_mutate_input(self, now):
        history = _history(now, (3, 6))

        record_interaction(history, "new", (9, 12), now)

        assert len(history.recent_games) == 1

    def test_evicts_oldest_beyond_capacity(self, now):
        history = _history(now, *[(6, 9)] * HISTORY_CAPACITY)
        oldest = history.recent_games[-1].content_id

        updated = record_interaction(history, "latest", (3, 6), now)

        assert len(updated.recent_games) == HISTORY_CAPACITY == 50
        assert updated.recent_games[0].content_id == "latest"
        assert oldest not in {r.content_id for r in updated.recent_games}

    def test_keeps_preference(self, now):
        history = _history(now, (3, 6), preferred=AgeRange(9, 12))

        updated = record_interaction(history, "x", (3, 6), now)

        assert updated.preferred_age == (9, 12)

    def test_from_nothing(self, now):
        updated = record_interaction(None, "first", (6, 9), now)

        assert len(updated.recent_games) == 1
        assert updated.preferred_age is None


class TestRecordAgeSelection:
    """Explicit selection becomes the preference."""

    def test_sets_preference_and_logs_record(self, now):
        history = _history(now, (3, 6), (3, 6))

        updated = record_age_selection(history, (9, 12), now=now)

        assert updated.preferred_age == (9, 12)
        assert updated.recent_games[0].content_id == "age-selection"
        assert updated.recent_games[0].played_at == now
        assert recommend(updated) == (9, 12)
        assert history.preferred_age is None

    def test_without_history(self, now):
        updated = record_age_selection(None, (12, 99), now=now)

        assert updated.preferred_age == AgeRange(12, 99)
        assert len(updated.recent_games) == 1
