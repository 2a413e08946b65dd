"""Tests for typespeed.core.results – result persistence and leaderboard."""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import pytest

from typespeed.core.results import (
    ANONYMOUS,
    SAVE_FAILED,
    SAVED,
    SIGN_IN_TO_SAVE,
    Leaderboard,
    LeaderboardEntry,
    ResultSaveError,
    ResultStore,
    persist_result,
    timeframe_start,
)
from typespeed.core.session import Result

NOW = datetime(2024, 3, 31, 15, 30, tzinfo=timezone.utc)


def _result(wpm: int = 50, duration: int = 30, created_at: datetime = NOW, user_id: Optional[str] = "u1") -> Result:
    return Result(
        user_id=user_id,
        wpm=wpm,
        accuracy=95,
        raw_wpm=wpm + 5,
        correct_characters=100,
        incorrect_characters=5,
        extra_characters=0,
        missed_characters=20,
        total_characters=125,
        duration=duration,
        test_text="the be to",
        typed_text="the be",
        created_at=created_at,
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def store(tmp_path: Path) -> ResultStore:
    """ResultStore backed by a temp file so tests don't touch ~/.typespeed."""
    return ResultStore(tmp_path / "results.json")


@pytest.fixture()
def board(store: ResultStore) -> Leaderboard:
    return Leaderboard(store, now=lambda: NOW)


# ---------------------------------------------------------------------------
# ResultStore
# ---------------------------------------------------------------------------

class TestResultStoreFresh:
    def test_no_file_is_empty(self, store: ResultStore):
        assert store.all() == []


class TestResultStoreSave:
    def test_save_appends_record(self, store: ResultStore):
        store.save(_result(wpm=42), username="ana")
        records = store.all()
        assert len(records) == 1
        assert records[0]["wpm"] == 42
        assert records[0]["username"] == "ana"
        assert records[0]["mode"] == "time"
        assert records[0]["id"]

    def test_persists_to_disk(self, store: ResultStore):
        store.save(_result())
        data = json.loads(store._file_path.read_text(encoding="utf-8"))
        assert len(data["tests"]) == 1
        assert data["tests"][0]["created_at"] == NOW.isoformat()

    def test_reload_from_disk(self, tmp_path: Path):
        f = tmp_path / "results.json"
        ResultStore(f).save(_result(wpm=61))
        assert ResultStore(f).all()[0]["wpm"] == 61

    def test_ids_are_unique(self, store: ResultStore):
        store.save(_result())
        store.save(_result())
        ids = {r["id"] for r in store.all()}
        assert len(ids) == 2

    def test_all_returns_copies(self, store: ResultStore):
        store.save(_result())
        store.all()[0]["wpm"] = 0
        assert store.all()[0]["wpm"] == 50

    def test_write_failure_raises_and_rolls_back(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        s = ResultStore(blocker / "results.json")
        with pytest.raises(ResultSaveError):
            s.save(_result())
        assert s.all() == []

    def test_save_error_is_oserror(self):
        assert issubclass(ResultSaveError, OSError)


# ---------------------------------------------------------------------------
# persist_result
# ---------------------------------------------------------------------------

class TestPersistResult:
    def test_signed_in_result_is_saved(self, store: ResultStore):
        assert persist_result(_result(wpm=70), store, "ana") == SAVED
        records = store.all()
        assert len(records) == 1
        assert records[0]["wpm"] == 70
        assert records[0]["username"] == "ana"

    def test_guest_result_is_not_saved(self, store: ResultStore):
        assert persist_result(_result(user_id=None), store, None) == SIGN_IN_TO_SAVE
        assert store.all() == []
        assert not store._file_path.exists()

    def test_write_failure_is_reported(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        s = ResultStore(blocker / "results.json")
        assert persist_result(_result(), s, "ana") == SAVE_FAILED
        assert s.all() == []


class TestResultStoreLoadEdgeCases:
    def test_corrupt_json(self, tmp_path: Path):
        f = tmp_path / "results.json"
        f.write_text("NOT VALID JSON", encoding="utf-8")
        assert ResultStore(f).all() == []

    def test_payload_not_dict(self, tmp_path: Path):
        f = tmp_path / "results.json"
        f.write_text(json.dumps([1, 2]), encoding="utf-8")
        assert ResultStore(f).all() == []

    def test_tests_not_list(self, tmp_path: Path):
        f = tmp_path / "results.json"
        f.write_text(json.dumps({"tests": "bad"}), encoding="utf-8")
        assert ResultStore(f).all() == []

    def test_non_dict_records_dropped(self, tmp_path: Path):
        f = tmp_path / "results.json"
        f.write_text(json.dumps({"tests": [{"wpm": 1}, "junk", 3]}), encoding="utf-8")
        assert ResultStore(f).all() == [{"wpm": 1}]


# ---------------------------------------------------------------------------
# timeframe_start
# ---------------------------------------------------------------------------

class TestTimeframeStart:
    def test_all_is_unbounded(self):
        assert timeframe_start("all", NOW) is None

    def test_today_is_midnight(self):
        assert timeframe_start("today", NOW) == datetime(2024, 3, 31, tzinfo=timezone.utc)

    def test_week(self):
        assert timeframe_start("week", NOW) == NOW - timedelta(days=7)

    def test_month_clamps_day(self):
        # March 31 -> February 29 (leap year)
        assert timeframe_start("month", NOW) == datetime(2024, 2, 29, 15, 30, tzinfo=timezone.utc)

    def test_month_across_year(self):
        jan = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert timeframe_start("month", jan) == datetime(2023, 12, 15, tzinfo=timezone.utc)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown timeframe"):
            timeframe_start("year", NOW)


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

class TestLeaderboard:
    def test_empty(self, board: Leaderboard):
        assert board.top() == []

    def test_sorted_by_wpm_desc_with_ranks(self, store: ResultStore, board: Leaderboard):
        for wpm in (40, 90, 65):
            store.save(_result(wpm=wpm), username=f"p{wpm}")
        entries = board.top()
        assert [e.wpm for e in entries] == [90, 65, 40]
        assert [e.rank for e in entries] == [1, 2, 3]
        assert entries[0].username == "p90"
        assert isinstance(entries[0], LeaderboardEntry)

    def test_ties_earlier_first(self, store: ResultStore, board: Leaderboard):
        store.save(_result(wpm=70, created_at=NOW - timedelta(hours=1)), username="later")
        store.save(_result(wpm=70, created_at=NOW - timedelta(hours=2)), username="earlier")
        assert [e.username for e in board.top()] == ["earlier", "later"]

    def test_limit(self, store: ResultStore, board: Leaderboard):
        for wpm in range(20):
            store.save(_result(wpm=wpm))
        entries = board.top(limit=5)
        assert [e.wpm for e in entries] == [19, 18, 17, 16, 15]

    def test_invalid_limit(self, board: Leaderboard):
        with pytest.raises(ValueError):
            board.top(limit=0)

    def test_duration_filter(self, store: ResultStore, board: Leaderboard):
        store.save(_result(wpm=80, duration=15))
        store.save(_result(wpm=60, duration=60))
        assert [e.wpm for e in board.top(duration=60)] == [60]
        assert len(board.top(duration="all")) == 2

    def test_invalid_duration_filter(self, board: Leaderboard):
        with pytest.raises(ValueError):
            board.top(duration=45)

    def test_timeframe_filter(self, store: ResultStore, board: Leaderboard):
        store.save(_result(wpm=10, created_at=NOW - timedelta(hours=1)))
        store.save(_result(wpm=20, created_at=NOW - timedelta(days=3)))
        store.save(_result(wpm=30, created_at=NOW - timedelta(days=20)))
        store.save(_result(wpm=40, created_at=NOW - timedelta(days=90)))
        assert [e.wpm for e in board.top(timeframe="today")] == [10]
        assert [e.wpm for e in board.top(timeframe="week")] == [20, 10]
        assert [e.wpm for e in board.top(timeframe="month")] == [30, 20, 10]
        assert [e.wpm for e in board.top(timeframe="all")] == [40, 30, 20, 10]

    def test_missing_username_is_anonymous(self, store: ResultStore, board: Leaderboard):
        store.save(_result(), username=None)
        assert board.top()[0].username == ANONYMOUS

    def test_unreadable_records_skipped(self, tmp_path: Path):
        f = tmp_path / "results.json"
        good = _result(wpm=55).to_record()
        good.update(id="ok", username="x")
        payload = {"tests": [good, {"id": "bad", "wpm": "fast"}, {"id": "nodate", "wpm": 1, "duration": 30}]}
        f.write_text(json.dumps(payload), encoding="utf-8")
        entries = Leaderboard(ResultStore(f), now=lambda: NOW).top()
        assert [e.id for e in entries] == ["ok"]

    def test_naive_timestamps_treated_as_utc(self, tmp_path: Path):
        f = tmp_path / "results.json"
        record = _result().to_record()
        record.update(id="n", created_at="2024-03-31T10:00:00")
        f.write_text(json.dumps({"tests": [record]}), encoding="utf-8")
        entries = Leaderboard(ResultStore(f), now=lambda: NOW).top(timeframe="today")
        assert entries[0].created_at.tzinfo is not None
