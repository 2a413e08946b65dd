from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Metrics:
    """Live speed/accuracy snapshot for a session."""

    wpm: int = 0
    raw_wpm: int = 0
    accuracy: int = 100


@dataclass(frozen=True)
class CharacterCounts:
    correct: int
    incorrect: int
    extra: int
    missed: int
    total: int


CHARS_PER_WORD = 5
MS_PER_MINUTE = 60000


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def count_correct(typed_text: str, target_text: str) -> int:
    """Number of positions where the typed character matches the target."""
    return sum(1 for a, b in zip(typed_text, target_text) if a == b)


def _per_minute(chars: int, elapsed_minutes: float) -> int:
    if elapsed_minutes <= 0:
        return 0
    value = chars / CHARS_PER_WORD / elapsed_minutes
    if not math.isfinite(value):
        return 0
    return round_half_up(value)


def compute(
    start_timestamp: Optional[float],
    now: float,
    typed_text: str,
    target_text: str,
) -> Metrics:
    """Compute WPM, raw WPM and accuracy.

    Timestamps are epoch milliseconds. Speed metrics follow the usual
    five-characters-per-word convention:
      * **WPM** – correct characters / 5 / elapsed minutes.
      * **Raw WPM** – all typed characters / 5 / elapsed minutes.
      * **Accuracy** – correct / typed as a percentage; 100 when nothing typed.

    A session that has not started (``start_timestamp is None``) reports the
    zero-activity defaults. Zero or negative elapsed time yields 0 WPM rather
    than an infinite rate.
    """
    if start_timestamp is None:
        return Metrics()
    elapsed_minutes = (now - start_timestamp) / MS_PER_MINUTE
    correct = count_correct(typed_text, target_text)
    typed = len(typed_text)
    accuracy = 100 if typed == 0 else round_half_up(correct / typed * 100)
    return Metrics(
        wpm=_per_minute(correct, elapsed_minutes),
        raw_wpm=_per_minute(typed, elapsed_minutes),
        accuracy=accuracy,
    )


def count_characters(typed_text: str, target_text: str) -> CharacterCounts:
    """Per-character accounting of a typed buffer against its target."""
    overlap = min(len(typed_text), len(target_text))
    correct = count_correct(typed_text, target_text)
    return CharacterCounts(
        correct=correct,
        incorrect=overlap - correct,
        extra=max(0, len(typed_text) - len(target_text)),
        missed=max(0, len(target_text) - len(typed_text)),
        total=len(target_text),
    )
