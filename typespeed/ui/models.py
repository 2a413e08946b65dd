"""Data models used by the UI."""

from __future__ import annotations

import enum
import html
from dataclasses import dataclass
from typing import List

from typespeed.core.results import LeaderboardEntry


class CharState(enum.Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    CURRENT = "current"
    PENDING = "pending"


@dataclass(frozen=True)
class PassageChar:
    char: str
    state: CharState


def char_states(target_text: str, typed_text: str) -> List[PassageChar]:
    """Classify every passage character against what has been typed so far."""
    cursor = len(typed_text)
    chars: List[PassageChar] = []
    for index, char in enumerate(target_text):
        if index < cursor:
            state = CharState.CORRECT if typed_text[index] == char else CharState.INCORRECT
        elif index == cursor:
            state = CharState.CURRENT
        else:
            state = CharState.PENDING
        chars.append(PassageChar(char=char, state=state))
    return chars


def passage_html(chars: List[PassageChar], styles: dict[CharState, str]) -> str:
    """Render classified characters as rich text; *styles* maps state -> CSS."""
    parts: List[str] = []
    for item in chars:
        text = "&nbsp;" if item.char == " " else html.escape(item.char)
        parts.append(f'<span style="{styles[item.state]}">{text}</span>')
    return "".join(parts)


def wpm_tier(wpm: int) -> str:
    if wpm >= 80:
        return "high"
    if wpm >= 60:
        return "mid"
    return "low"


def rank_label(rank: int) -> str:
    return {1: "🏆", 2: "🥈", 3: "🥉"}.get(rank, str(rank))


@dataclass
class LeaderboardRow:
    """Display strings for one leaderboard entry."""

    rank: str
    username: str
    initial: str
    details: str
    wpm: str
    tier: str

    @classmethod
    def from_entry(cls, entry: LeaderboardEntry) -> "LeaderboardRow":
        return cls(
            rank=rank_label(entry.rank),
            username=entry.username,
            initial=(entry.username[:1] or "?").upper(),
            details=f"{entry.duration}s · {entry.accuracy:.1f}%",
            wpm=f"{entry.wpm} WPM",
            tier=wpm_tier(entry.wpm),
        )
