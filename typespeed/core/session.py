from __future__ import annotations

import enum
import logging
import time
from dataclasses import asdict, dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from typespeed.core import metrics
from typespeed.core.passage import PassageGenerator, validate_duration

logger = logging.getLogger(__name__)

MODE = "time"
DIFFICULTY = "normal"
LANGUAGE = "english"


class SessionStatus(enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Result:
    """Finalized outcome of a session, handed to the caller for persistence."""

    user_id: Optional[str]
    wpm: int
    accuracy: int
    raw_wpm: int
    correct_characters: int
    incorrect_characters: int
    extra_characters: int
    missed_characters: int
    total_characters: int
    duration: int
    test_text: str
    typed_text: str
    created_at: datetime
    mode: str = MODE
    difficulty: str = DIFFICULTY
    language: str = LANGUAGE

    def to_record(self) -> Dict[str, Any]:
        record = asdict(self)
        record["created_at"] = self.created_at.isoformat()
        return record


@dataclass(frozen=True)
class Session:
    """One bounded attempt at typing a passage.

    Sessions are values: every engine transition returns a new instance and
    leaves the old one untouched.
    """

    target_text: str
    duration: int
    time_remaining: int
    typed_text: str = ""
    status: SessionStatus = SessionStatus.IDLE
    start_timestamp: Optional[float] = None
    wpm: int = 0
    raw_wpm: int = 0
    accuracy: int = 100
    result: Optional[Result] = field(default=None, compare=False)

    @property
    def cursor_index(self) -> int:
        return len(self.typed_text)

    @property
    def is_idle(self) -> bool:
        return self.status is SessionStatus.IDLE

    @property
    def is_active(self) -> bool:
        return self.status is SessionStatus.ACTIVE

    @property
    def is_completed(self) -> bool:
        return self.status is SessionStatus.COMPLETED

    @property
    def metrics(self) -> metrics.Metrics:
        return metrics.Metrics(wpm=self.wpm, raw_wpm=self.raw_wpm, accuracy=self.accuracy)


def enforce_word_boundary(value: str, target_text: str) -> str:
    """Drop a trailing space unless it closes a correctly typed word.

    The word being closed is the last space-separated piece of the input; it
    must equal the target word at the same index for the space to stand.
    """
    if not value.endswith(" "):
        return value
    pieces = value[:-1].split(" ")
    index = len(pieces) - 1
    target_words = target_text.split(" ")
    if index < len(target_words) and pieces[-1] == target_words[index]:
        return value
    return value[:-1]


def _epoch_ms() -> float:
    return time.time() * 1000.0


class SessionEngine:
    """Drives sessions through Idle -> Active -> Completed.

    All mutation goes through :meth:`apply_input`, :meth:`tick` and
    :meth:`finalize`. A completed session is terminal: further input and ticks
    return it unchanged, and a second :meth:`finalize` returns no result.

    ``clock`` returns epoch milliseconds. ``identity`` returns the current user
    id (or ``None``) and is read once, at finalization. ``on_finalized`` is
    called with every newly produced :class:`Result`, whichever trigger
    (timeout or full match) produced it.
    """

    def __init__(
        self,
        generator: PassageGenerator,
        *,
        clock: Optional[Callable[[], float]] = None,
        identity: Optional[Callable[[], Optional[str]]] = None,
        on_finalized: Optional[Callable[[Result], None]] = None,
    ) -> None:
        self._generator = generator
        self._clock = clock or _epoch_ms
        self._identity = identity or (lambda: None)
        self._on_finalized = on_finalized

    def create(self, duration: int) -> Session:
        """Idle session with a freshly generated passage for *duration* seconds."""
        validate_duration(duration)
        text = self._generator.generate(duration)
        logger.info("New %ds session (%d characters)", duration, len(text))
        return Session(target_text=text, duration=duration, time_remaining=duration)

    def restart(self, session: Session) -> Session:
        """Fresh session with the same duration ("try again")."""
        return self.create(session.duration)

    def change_duration(self, session: Session, duration: int) -> Session:
        """New idle session for *duration*; not allowed while a test is running."""
        if session.is_active:
            raise RuntimeError("Cannot change the duration of an active session")
        return self.create(duration)

    def apply_input(self, session: Session, raw_value: str) -> Session:
        """Accept the input box value, starting the test and finishing it on a full match."""
        if session.is_completed:
            return session

        target = session.target_text
        candidate = enforce_word_boundary(raw_value, target)
        if candidate != raw_value:
            logger.debug("Blocked space after incomplete word at index %d", len(candidate))
        accepted = candidate[: len(target)]
        if len(accepted) < len(candidate):
            logger.debug("Discarded %d characters past end of passage", len(candidate) - len(accepted))

        now = self._clock()
        status = session.status
        start = session.start_timestamp
        if status is SessionStatus.IDLE and accepted:
            status = SessionStatus.ACTIVE
            start = now
            logger.info("Session started")

        updated = replace(session, typed_text=accepted, status=status, start_timestamp=start)
        if status is SessionStatus.ACTIVE:
            live = metrics.compute(start, now, accepted, target)
            updated = replace(updated, wpm=live.wpm, raw_wpm=live.raw_wpm, accuracy=live.accuracy)

        if len(accepted) == len(target):
            updated, _ = self._finalize(updated, now)
        return updated

    def tick(self, session: Session) -> Session:
        """Count one second down on an active session; finalize when time runs out."""
        if not session.is_active:
            return session
        remaining = max(0, session.time_remaining - 1)
        updated = replace(session, time_remaining=remaining)
        if remaining == 0:
            updated, _ = self._finalize(updated, self._clock())
        return updated

    def finalize(self, session: Session) -> Tuple[Session, Optional[Result]]:
        """Complete the session; the Result is ``None`` if it was already completed."""
        return self._finalize(session, self._clock())

    def _finalize(self, session: Session, now: float) -> Tuple[Session, Optional[Result]]:
        if session.is_completed:
            return session, None

        final = metrics.compute(session.start_timestamp, now, session.typed_text, session.target_text)
        counts = metrics.count_characters(session.typed_text, session.target_text)
        result = Result(
            user_id=self._identity(),
            wpm=final.wpm,
            accuracy=final.accuracy,
            raw_wpm=final.raw_wpm,
            correct_characters=counts.correct,
            incorrect_characters=counts.incorrect,
            extra_characters=counts.extra,
            missed_characters=counts.missed,
            total_characters=counts.total,
            duration=session.duration,
            test_text=session.target_text,
            typed_text=session.typed_text,
            created_at=datetime.fromtimestamp(now / 1000.0, tz=timezone.utc),
        )
        completed = replace(
            session,
            status=SessionStatus.COMPLETED,
            time_remaining=max(0, session.time_remaining),
            wpm=final.wpm,
            raw_wpm=final.raw_wpm,
            accuracy=final.accuracy,
            result=result,
        )
        logger.info(
            "Session completed: %d WPM, %d%% accuracy, %d raw WPM",
            result.wpm,
            result.accuracy,
            result.raw_wpm,
        )
        if self._on_finalized is not None:
            try:
                self._on_finalized(result)
            except Exception:
                logger.exception("on_finalized callback failed")
        return completed, result
