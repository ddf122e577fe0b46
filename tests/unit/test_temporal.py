"""
Unit tests for dependent date resolution.

Tests cover:
- Future anchors: result always in [now, anchor)
- Past anchors: result in the year before now, unrelated to the anchor
- Strict mode: result never after a past anchor
- Naive datetimes treated as UTC
"""

import random
from datetime import UTC, datetime, timedelta

from database.seeds.temporal import (
    PAST_WINDOW,
    as_utc,
    random_datetime_between,
    resolve_dependent_date,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class TestFutureAnchor:
    def test_result_between_now_and_anchor(self):
        rng = random.Random(42)
        anchor = NOW + timedelta(days=10)

        for _ in range(500):
            result = resolve_dependent_date(anchor, rng, now=NOW)
            assert NOW <= result < anchor

    def test_anchor_one_microsecond_ahead(self):
        anchor = NOW + timedelta(microseconds=1)

        result = resolve_dependent_date(anchor, random.Random(1), now=NOW)

        assert result == NOW

    def test_strict_flag_does_not_change_future_branch(self):
        rng = random.Random(5)
        anchor = NOW + timedelta(hours=3)

        for _ in range(100):
            result = resolve_dependent_date(anchor, rng, now=NOW, strict=True)
            assert NOW <= result < anchor


class TestPastAnchor:
    def test_result_is_in_the_past_year(self):
        rng = random.Random(42)
        anchor = NOW - timedelta(days=30)

        for _ in range(500):
            result = resolve_dependent_date(anchor, rng, now=NOW)
            assert NOW - PAST_WINDOW <= result < NOW

    def test_result_may_follow_anchor(self):
        """Without strict mode the anchor does not bound the result."""
        rng = random.Random(42)
        anchor = NOW - timedelta(days=300)

        results = [resolve_dependent_date(anchor, rng, now=NOW) for _ in range(200)]

        assert any(result > anchor for result in results)

    def test_anchor_equal_to_now_uses_past_branch(self):
        rng = random.Random(3)

        for _ in range(100):
            result = resolve_dependent_date(NOW, rng, now=NOW)
            assert result < NOW

    def test_strict_keeps_result_before_anchor(self):
        rng = random.Random(42)
        anchor = NOW - timedelta(days=300)

        for _ in range(500):
            result = resolve_dependent_date(anchor, rng, now=NOW, strict=True)
            assert anchor - PAST_WINDOW <= result <= anchor


class TestTimezones:
    def test_naive_anchor_treated_as_utc(self):
        anchor = datetime(2025, 6, 11, 12, 0)

        result = resolve_dependent_date(anchor, random.Random(0), now=NOW)

        assert result.tzinfo is not None
        assert NOW <= result < anchor.replace(tzinfo=UTC)

    def test_as_utc_converts_offsets(self):
        from datetime import timezone

        plus_two = datetime(2025, 6, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))

        assert as_utc(plus_two) == NOW
        assert as_utc(plus_two).utcoffset() == timedelta(0)

    def test_default_now_is_current_time(self):
        anchor = datetime.now(UTC) + timedelta(days=1)

        result = resolve_dependent_date(anchor, random.Random(0))

        assert result < anchor


class TestRandomDatetimeBetween:
    def test_empty_range_returns_start(self):
        assert random_datetime_between(NOW, NOW, random.Random(0)) == NOW

    def test_within_range(self):
        rng = random.Random(9)
        end = NOW + timedelta(minutes=1)

        for _ in range(100):
            assert NOW <= random_datetime_between(NOW, end, rng) < end
