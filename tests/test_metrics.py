"""Tests for typespeed.core.metrics – WPM, accuracy and character accounting."""

from __future__ import annotations

import pytest

from typespeed.core.metrics import (
    CharacterCounts,
    Metrics,
    compute,
    count_characters,
    count_correct,
    round_half_up,
)

MINUTE = 60000


# ---------------------------------------------------------------------------
# round_half_up
# ---------------------------------------------------------------------------

class TestRoundHalfUp:
    def test_half_goes_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_below_half_goes_down(self):
        assert round_half_up(2.49) == 2

    def test_integers_unchanged(self):
        assert round_half_up(5.0) == 5

    def test_negative_half(self):
        assert round_half_up(-2.5) == -2


# ---------------------------------------------------------------------------
# compute – not started
# ---------------------------------------------------------------------------

class TestComputeNotStarted:
    def test_none_start_returns_defaults(self):
        assert compute(None, 123456, "abc", "abc") == Metrics(wpm=0, raw_wpm=0, accuracy=100)

    def test_defaults_dataclass(self):
        m = Metrics()
        assert (m.wpm, m.raw_wpm, m.accuracy) == (0, 0, 100)


# ---------------------------------------------------------------------------
# compute – speed
# ---------------------------------------------------------------------------

class TestComputeSpeed:
    def test_25_correct_in_one_minute_is_5_wpm(self):
        text = "a" * 25
        m = compute(0, MINUTE, text, text)
        assert m.wpm == 5
        assert m.raw_wpm == 5

    def test_wpm_counts_only_correct(self):
        # 10 typed, 5 correct over one minute
        m = compute(0, MINUTE, "aaaaaxxxxx", "aaaaaaaaaa")
        assert m.wpm == 1
        assert m.raw_wpm == 2

    def test_half_minute_doubles_rate(self):
        text = "a" * 25
        m = compute(1000, 1000 + MINUTE // 2, text, text)
        assert m.wpm == 10

    def test_rounding_boundary_half_up(self):
        # 25 chars in 2 minutes -> 2.5 WPM -> 3
        text = "a" * 25
        m = compute(0, 2 * MINUTE, text, text)
        assert m.wpm == 3

    def test_zero_elapsed_is_zero_not_infinite(self):
        m = compute(5000, 5000, "abc", "abc")
        assert m.wpm == 0
        assert m.raw_wpm == 0

    def test_negative_elapsed_is_zero(self):
        m = compute(5000, 4000, "abc", "abc")
        assert m.wpm == 0
        assert m.raw_wpm == 0

    def test_pure(self):
        args = (0, 12345, "hello wrld", "hello world")
        assert compute(*args) == compute(*args)


# ---------------------------------------------------------------------------
# compute – accuracy
# ---------------------------------------------------------------------------

class TestComputeAccuracy:
    def test_empty_typed_is_100(self):
        assert compute(0, MINUTE, "", "abc").accuracy == 100

    def test_perfect(self):
        assert compute(0, MINUTE, "abc", "abc").accuracy == 100

    def test_partial(self):
        # 2 of 3 -> 66.67 -> 67
        assert compute(0, MINUTE, "abX", "abc").accuracy == 67

    def test_all_wrong(self):
        assert compute(0, MINUTE, "xyz", "abc").accuracy == 0


# ---------------------------------------------------------------------------
# count_correct / count_characters
# ---------------------------------------------------------------------------

class TestCountCharacters:
    def test_count_correct(self):
        assert count_correct("abXde", "abcde") == 4

    def test_one_substitution(self):
        assert count_characters("abXde", "abcde") == CharacterCounts(
            correct=4, incorrect=1, extra=0, missed=0, total=5
        )

    def test_extra_characters(self):
        counts = count_characters("a" * 13, "a" * 10)
        assert counts.extra == 3
        assert counts.missed == 0
        assert counts.correct == 10
        assert counts.incorrect == 0
        assert counts.total == 10

    def test_missed_characters(self):
        counts = count_characters("ab", "abcde")
        assert counts.missed == 3
        assert counts.extra == 0
        assert counts.correct == 2

    def test_nothing_typed(self):
        counts = count_characters("", "abc")
        assert counts == CharacterCounts(correct=0, incorrect=0, extra=0, missed=3, total=3)

    @pytest.mark.parametrize(
        "typed, target",
        [("abXde", "abcde"), ("a" * 13, "a" * 10), ("xy", "abcd"), ("", "")],
    )
    def test_correct_plus_incorrect_plus_missed_covers_target(self, typed, target):
        c = count_characters(typed, target)
        assert c.correct + c.incorrect + c.missed == c.total
