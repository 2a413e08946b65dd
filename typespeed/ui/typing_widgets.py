"""Typing test UI: passage view and stat badges."""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QMouseEvent
from PySide6.QtWidgets import QLabel, QSizePolicy, QWidget

from typespeed.ui.colors import ThemeColors
from typespeed.ui.models import CharState, char_states, passage_html

_CHAR_STYLES = {
    CharState.CORRECT: f"color: {ThemeColors.CHAR_CORRECT}; background: {ThemeColors.CHAR_CORRECT_BG};",
    CharState.INCORRECT: f"color: {ThemeColors.CHAR_INCORRECT}; background: {ThemeColors.CHAR_INCORRECT_BG};",
    CharState.CURRENT: f"color: {ThemeColors.CHAR_CURRENT}; text-decoration: underline;",
    CharState.PENDING: f"color: {ThemeColors.CHAR_PENDING};",
}


class PassageView(QLabel):
    """Monospace passage with per-character correct/incorrect/current colouring.

    Clicking the view emits ``clicked`` so the window can refocus its hidden
    input field.
    """

    clicked = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setTextFormat(Qt.RichText)
        self.setWordWrap(True)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setMinimumHeight(160)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setCursor(Qt.IBeamCursor)
        font = QFont("monospace")
        font.setStyleHint(QFont.Monospace)
        font.setPointSize(16)
        self.setFont(font)
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {ThemeColors.BG_CARD};
                border: 1px solid {ThemeColors.BORDER};
                border-radius: 14px;
                padding: 24px;
            }}
            """
        )

    def set_passage(self, target_text: str, typed_text: str) -> None:
        self.setText(passage_html(char_states(target_text, typed_text), _CHAR_STYLES))

    def mousePressEvent(self, event: QMouseEvent) -> None:
        super().mousePressEvent(event)
        self.clicked.emit()


class StatBadge(QLabel):
    """Pill showing a single live stat, e.g. ``"42 WPM"``."""

    def __init__(self, icon: str, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._icon = icon
        self.setAlignment(Qt.AlignCenter)
        self.setMinimumWidth(96)
        self.setStyleSheet(
            f"""
            QLabel {{
                background: {ThemeColors.BG_CARD};
                color: {ThemeColors.TEXT_PRIMARY};
                border: 1px solid {ThemeColors.BORDER};
                border-radius: 12px;
                padding: 4px 12px;
                font-weight: 700;
            }}
            """
        )

    def set_value(self, text: str) -> None:
        self.setText(f"{self._icon}  {text}")
