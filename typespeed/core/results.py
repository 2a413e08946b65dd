from __future__ import annotations

import calendar
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Union

from typespeed.core.passage import DURATIONS
from typespeed.core.session import Result

logger = logging.getLogger(__name__)

TIMEFRAMES = ("today", "week", "month", "all")
ANONYMOUS = "Anonymous"

SIGN_IN_TO_SAVE = "Sign in to save your results"
SAVE_FAILED = "Failed to save test result"
SAVED = "Test result saved!"


class ResultSaveError(OSError):
    """Raised when a finalized result could not be written."""


class ResultSink(Protocol):
    def save(self, result: Result, username: Optional[str] = None) -> None: ...


class ResultStore:
    """Stores finalized test results in ``results.json``.

    A missing or unreadable file loads as an empty store; write failures are
    raised as :class:`ResultSaveError` so the caller can tell the user.
    """

    def __init__(self, file_path: Path) -> None:
        self._file_path = Path(file_path)
        self._records: List[Dict[str, Any]] = self._load()

    def all(self) -> List[Dict[str, Any]]:
        return [dict(record) for record in self._records]

    def save(self, result: Result, username: Optional[str] = None) -> None:
        record = result.to_record()
        record["id"] = uuid.uuid4().hex
        record["username"] = username
        self._records.append(record)
        try:
            self._save()
        except OSError as e:
            self._records.pop()
            raise ResultSaveError(f"Could not save result to {self._file_path}: {e}") from e
        logger.info("Saved %d WPM result (%ds)", result.wpm, result.duration)

    def _load(self) -> List[Dict[str, Any]]:
        if not self._file_path.exists():
            return []
        try:
            payload = json.loads(self._file_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not load results from %s: %s", self._file_path, e)
            return []
        tests = payload.get("tests", []) if isinstance(payload, dict) else []
        if not isinstance(tests, list):
            return []
        return [record for record in tests if isinstance(record, dict)]

    def _save(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"tests": self._records}
        self._file_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def persist_result(result: Result, sink: ResultSink, username: Optional[str] = None) -> str:
    """Save a finalized result for a signed-in user and return the notice to show.

    Guest results (no ``user_id``) are never written. A failed write is logged
    and reported through the notice rather than raised.
    """
    if result.user_id is None:
        return SIGN_IN_TO_SAVE
    try:
        sink.save(result, username=username)
    except ResultSaveError as e:
        logger.warning("Error saving test result: %s", e)
        return SAVE_FAILED
    return SAVED


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    id: str
    username: str
    wpm: int
    accuracy: float
    raw_wpm: int
    duration: int
    created_at: datetime


def _local_now() -> datetime:
    return datetime.now().astimezone()


def _one_month_before(moment: datetime) -> datetime:
    year, month = moment.year, moment.month - 1
    if month == 0:
        year, month = year - 1, 12
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def timeframe_start(timeframe: str, now: datetime) -> Optional[datetime]:
    """Earliest ``created_at`` included by *timeframe*; ``None`` means no bound."""
    if timeframe == "all":
        return None
    if timeframe == "today":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if timeframe == "week":
        return now - timedelta(days=7)
    if timeframe == "month":
        return _one_month_before(now)
    raise ValueError(f"Unknown timeframe {timeframe!r}; expected one of {TIMEFRAMES}")


def _parse_created_at(value: Any) -> datetime:
    moment = datetime.fromisoformat(str(value))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


class Leaderboard:
    """Ranks stored results by WPM, highest first; earlier results win ties."""

    def __init__(self, store: ResultStore, *, now: Optional[Callable[[], datetime]] = None) -> None:
        self._store = store
        self._now = now or _local_now

    def top(
        self,
        timeframe: str = "all",
        duration: Union[int, str] = "all",
        limit: int = 10,
    ) -> List[LeaderboardEntry]:
        if duration != "all" and duration not in DURATIONS:
            raise ValueError(f"Unknown duration filter {duration!r}")
        if limit < 1:
            raise ValueError("limit must be at least 1")
        since = timeframe_start(timeframe, self._now())

        candidates = []
        for record in self._store.all():
            try:
                created_at = _parse_created_at(record["created_at"])
                row = (
                    int(record["wpm"]),
                    created_at,
                    str(record.get("id", "")),
                    record.get("username") or ANONYMOUS,
                    float(record["accuracy"]),
                    int(record.get("raw_wpm", 0)),
                    int(record["duration"]),
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping unreadable result %r: %s", record.get("id"), e)
                continue
            if since is not None and created_at < since:
                continue
            if duration != "all" and row[6] != duration:
                continue
            candidates.append(row)

        candidates.sort(key=lambda row: (-row[0], row[1]))
        return [
            LeaderboardEntry(
                rank=rank,
                id=entry_id,
                username=username,
                wpm=wpm,
                accuracy=accuracy,
                raw_wpm=raw_wpm,
                duration=entry_duration,
                created_at=created_at,
            )
            for rank, (wpm, created_at, entry_id, username, accuracy, raw_wpm, entry_duration) in enumerate(
                candidates[:limit], start=1
            )
        ]
