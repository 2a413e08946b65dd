from __future__ import annotations

import logging
import random
from typing import Optional, Sequence

from typespeed.core.words import WordList

logger = logging.getLogger(__name__)

DURATIONS = (15, 30, 60, 120)
WORDS_PER_SECOND = 3
MIN_WORDS = 50


def validate_duration(duration: int) -> int:
    if duration not in DURATIONS:
        raise ValueError(f"Unsupported duration {duration!r}; expected one of {DURATIONS}")
    return duration


def word_target(duration: int) -> int:
    """Number of words a passage for *duration* seconds should contain."""
    return max(duration * WORDS_PER_SECOND, MIN_WORDS)


class PassageGenerator:
    """Builds the passage a session is typed against.

    The vocabulary is shuffled once per passage (``random.Random.shuffle`` is a
    Fisher-Yates shuffle) and then cycled until the word target is reached, so
    repeats are expected for longer durations.
    """

    def __init__(self, words: Sequence[str] | WordList, rng: Optional[random.Random] = None) -> None:
        vocabulary = words.words if isinstance(words, WordList) else tuple(words)
        if not vocabulary:
            raise ValueError("PassageGenerator needs a non-empty word list")
        self._words = tuple(vocabulary)
        self._rng = rng or random.Random()

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    def generate(self, duration: int) -> str:
        count = word_target(validate_duration(duration))
        shuffled = list(self._words)
        self._rng.shuffle(shuffled)
        selected = [shuffled[i % len(shuffled)] for i in range(count)]
        logger.debug("Generated %d-word passage for %ds", count, duration)
        return " ".join(selected)
