"""Leaderboard UI: ranked rows with duration/timeframe filters."""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QButtonGroup,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from typespeed.core.passage import DURATIONS
from typespeed.core.results import TIMEFRAMES, Leaderboard
from typespeed.ui.colors import ThemeColors, badge_color, blend_hex, rank_color
from typespeed.ui.models import LeaderboardRow

logger = logging.getLogger(__name__)

_TIMEFRAME_LABELS = {"today": "Today", "week": "Week", "month": "Month", "all": "All time"}


def _chip_style() -> str:
    return f"""
        QPushButton {{
            background: transparent;
            color: {ThemeColors.TEXT_SECONDARY};
            border: 1px solid {ThemeColors.BORDER};
            border-radius: 10px;
            padding: 3px 10px;
            font-size: 12px;
        }}
        QPushButton:checked {{
            background: {ThemeColors.PRIMARY};
            color: {ThemeColors.BG};
            border-color: {ThemeColors.PRIMARY};
            font-weight: 700;
        }}
    """


class LeaderboardRowCard(QWidget):
    """Single ranked entry: rank glyph, avatar initial, name/details, WPM badge."""

    def __init__(self, row: LeaderboardRow, rank: int, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setObjectName("leaderboardRow")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setAttribute(Qt.WidgetAttribute.WA_Hover, True)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        layout.setSpacing(12)

        rank_label = QLabel(row.rank)
        rank_label.setFixedWidth(32)
        rank_label.setAlignment(Qt.AlignCenter)
        rank_label.setStyleSheet(f"color: {rank_color(rank)}; font-weight: 800;")
        layout.addWidget(rank_label)

        avatar = QLabel(row.initial)
        avatar.setFixedSize(32, 32)
        avatar.setAlignment(Qt.AlignCenter)
        avatar.setStyleSheet(
            f"background: {ThemeColors.BORDER}; color: {ThemeColors.TEXT_PRIMARY};"
            " border-radius: 16px; font-weight: 800;"
        )
        layout.addWidget(avatar)

        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        name = QLabel(row.username)
        name.setStyleSheet(f"color: {ThemeColors.TEXT_PRIMARY}; font-weight: 600;")
        details = QLabel(row.details)
        details.setStyleSheet(f"color: {ThemeColors.TEXT_MUTED}; font-size: 11px;")
        text_col.addWidget(name)
        text_col.addWidget(details)
        layout.addLayout(text_col, 1)

        badge = QLabel(f"⚡ {row.wpm}")
        badge.setStyleSheet(
            f"""
            background: {badge_color(row.tier)};
            color: {ThemeColors.TEXT_PRIMARY};
            border: 1px solid {ThemeColors.BORDER};
            border-radius: 10px;
            padding: 3px 10px;
            font-weight: 700;
            """
        )
        layout.addWidget(badge, 0, Qt.AlignRight)

        hover = blend_hex(ThemeColors.BG_CARD, "#FFFFFF", 0.05)
        self.setStyleSheet(
            f"""
            QWidget#leaderboardRow {{ border-radius: 10px; }}
            QWidget#leaderboardRow:hover {{ background: {hover}; }}
            """
        )


class LeaderboardPanel(QWidget):
    """Filter chips plus a scrollable list backed by :class:`Leaderboard`."""

    def __init__(self, leaderboard: Leaderboard, limit: int = 10, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._leaderboard = leaderboard
        self._limit = limit
        self._timeframe = "all"
        self._duration: Union[int, str] = "all"

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(12)

        title = QLabel("🏆  Leaderboard")
        title.setStyleSheet(f"color: {ThemeColors.TEXT_PRIMARY}; font-size: 18px; font-weight: 800;")
        layout.addWidget(title)

        self._duration_group = QButtonGroup(self)
        duration_row = QHBoxLayout()
        duration_row.setSpacing(6)
        for value in ("all", *DURATIONS):
            chip = self._make_chip("All" if value == "all" else f"{value}s", value == self._duration)
            chip.clicked.connect(lambda _checked=False, v=value: self._set_duration(v))
            self._duration_group.addButton(chip)
            duration_row.addWidget(chip)
        duration_row.addStretch(1)
        layout.addLayout(duration_row)

        self._timeframe_group = QButtonGroup(self)
        timeframe_row = QHBoxLayout()
        timeframe_row.setSpacing(6)
        for value in TIMEFRAMES:
            chip = self._make_chip(_TIMEFRAME_LABELS[value], value == self._timeframe)
            chip.clicked.connect(lambda _checked=False, v=value: self._set_timeframe(v))
            self._timeframe_group.addButton(chip)
            timeframe_row.addWidget(chip)
        timeframe_row.addStretch(1)
        layout.addLayout(timeframe_row)

        self._rows_host = QWidget()
        self._rows_layout = QVBoxLayout(self._rows_host)
        self._rows_layout.setContentsMargins(0, 0, 0, 0)
        self._rows_layout.setSpacing(4)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        scroll.setWidget(self._rows_host)
        layout.addWidget(scroll, 1)

    def _make_chip(self, text: str, checked: bool) -> QPushButton:
        chip = QPushButton(text)
        chip.setCheckable(True)
        chip.setChecked(checked)
        chip.setCursor(Qt.PointingHandCursor)
        chip.setStyleSheet(_chip_style())
        return chip

    def _set_duration(self, value: Union[int, str]) -> None:
        self._duration = value
        self.refresh()

    def _set_timeframe(self, value: str) -> None:
        self._timeframe = value
        self.refresh()

    def refresh(self) -> None:
        """Re-run the query for the current filters and rebuild the rows."""
        while self._rows_layout.count():
            item = self._rows_layout.takeAt(0)
            w = item.widget()
            if w is not None:
                w.setParent(None)
                w.deleteLater()

        entries = self._leaderboard.top(timeframe=self._timeframe, duration=self._duration, limit=self._limit)
        logger.debug("Leaderboard %s/%s: %d entries", self._timeframe, self._duration, len(entries))
        if not entries:
            empty = QLabel("No results found for the selected criteria")
            empty.setAlignment(Qt.AlignCenter)
            empty.setStyleSheet(f"color: {ThemeColors.TEXT_MUTED}; padding: 32px;")
            self._rows_layout.addWidget(empty)
        else:
            cards: List[LeaderboardRowCard] = [
                LeaderboardRowCard(LeaderboardRow.from_entry(entry), entry.rank) for entry in entries
            ]
            for card in cards:
                self._rows_layout.addWidget(card)
        self._rows_layout.addStretch(1)
