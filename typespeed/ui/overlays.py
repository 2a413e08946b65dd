"""Custom in-window overlays (test complete, sign in)."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt, QEvent, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from typespeed.core.session import Result
from typespeed.ui.colors import ThemeColors


def _themed_card_container(radius: int = 20, object_name: str = "overlayContainer") -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(400)
    container.setMaximumWidth(480)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: {ThemeColors.BG_CARD};
            border: 1px solid {ThemeColors.BORDER};
            border-radius: {radius}px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(20)
    shadow.setOffset(0, 6)
    shadow.setColor(QColor(0, 0, 0, 90))
    container.setGraphicsEffect(shadow)
    return container


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.55);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.setCursor(Qt.CursorShape.ArrowCursor)
    overlay_bg.setMinimumSize(1, 1)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def _secondary_button_style() -> str:
    return f"""
        QPushButton {{
            background: transparent;
            color: {ThemeColors.TEXT_PRIMARY};
            padding: 10px 16px;
            border: 1px solid {ThemeColors.BORDER};
            border-radius: 12px;
            font-weight: 600;
            font-size: 13px;
        }}
        QPushButton:hover {{
            border-color: {ThemeColors.PRIMARY};
            color: {ThemeColors.PRIMARY_LIGHT};
        }}
    """


def primary_button_style() -> str:
    return f"""
        QPushButton {{
            background: qlineargradient(x1:0, y1:0, x2:1, y2:1,
                stop:0 {ThemeColors.PRIMARY_LIGHT}, stop:1 {ThemeColors.PRIMARY});
            color: {ThemeColors.BG};
            padding: 10px 16px;
            border: none;
            border-radius: 12px;
            font-weight: 700;
            font-size: 13px;
        }}
        QPushButton:hover {{ background: {ThemeColors.PRIMARY}; }}
        QPushButton:disabled {{ background: {ThemeColors.BORDER}; color: {ThemeColors.TEXT_MUTED}; }}
    """


class _Overlay(QWidget):
    """Full-window overlay that tracks its parent's size while visible."""

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.hide()

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        self._update_geometry()

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)


class TestCompleteOverlay(_Overlay):
    """Summary shown when a test finishes; "Try Again" emits ``retry``."""

    retry = Signal()

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)

        overlay_bg = _overlay_background(self, lambda: None)
        main_layout.addWidget(overlay_bg, 0, 0)

        container = _themed_card_container(object_name="testCompleteContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(28, 24, 28, 24)
        content.setSpacing(12)

        title = QLabel("Test Complete!")
        title.setAlignment(Qt.AlignCenter)
        title.setStyleSheet(f"color: {ThemeColors.TEXT_PRIMARY}; font-size: 22px; font-weight: 800;")
        content.addWidget(title)

        self._wpm_label = QLabel("")
        self._wpm_label.setAlignment(Qt.AlignCenter)
        self._wpm_label.setStyleSheet(f"color: {ThemeColors.PRIMARY_LIGHT}; font-size: 34px; font-weight: 900;")
        content.addWidget(self._wpm_label)

        self._accuracy_label = QLabel("")
        self._accuracy_label.setAlignment(Qt.AlignCenter)
        self._accuracy_label.setStyleSheet(f"color: {ThemeColors.TEXT_PRIMARY}; font-size: 16px;")
        content.addWidget(self._accuracy_label)

        self._raw_label = QLabel("")
        self._raw_label.setAlignment(Qt.AlignCenter)
        self._raw_label.setStyleSheet(f"color: {ThemeColors.TEXT_SECONDARY}; font-size: 13px;")
        content.addWidget(self._raw_label)

        self._chars_label = QLabel("")
        self._chars_label.setAlignment(Qt.AlignCenter)
        self._chars_label.setStyleSheet(f"color: {ThemeColors.TEXT_MUTED}; font-size: 12px;")
        content.addWidget(self._chars_label)

        self._notice_label = QLabel("")
        self._notice_label.setAlignment(Qt.AlignCenter)
        self._notice_label.setWordWrap(True)
        self._notice_label.setStyleSheet(f"color: {ThemeColors.GOLD}; font-size: 13px;")
        content.addWidget(self._notice_label)

        retry_btn = QPushButton("↻  Try Again")
        retry_btn.setStyleSheet(primary_button_style())
        retry_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        retry_btn.clicked.connect(lambda: (self.hide(), self.retry.emit()))
        content.addWidget(retry_btn)

        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)

    def show_result(self, result: Result, notice: str = "") -> None:
        self._wpm_label.setText(f"{result.wpm} WPM")
        self._accuracy_label.setText(f"Accuracy: {result.accuracy}%")
        self._raw_label.setText(f"Raw WPM: {result.raw_wpm}")
        self._chars_label.setText(
            f"{result.correct_characters} correct · {result.incorrect_characters} incorrect · "
            f"{result.missed_characters} missed · {result.total_characters} total"
        )
        self.set_notice(notice)
        self.show()
        self.raise_()

    def set_notice(self, notice: str) -> None:
        self._notice_label.setText(notice)
        self._notice_label.setVisible(bool(notice))


class SignInOverlay(_Overlay):
    """Username prompt. Emits ``closed`` with the entered name, or "" when cancelled."""

    closed = Signal(str)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)

        overlay_bg = _overlay_background(self, self._cancel)
        main_layout.addWidget(overlay_bg, 0, 0)

        container = _themed_card_container(object_name="signInContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(28, 24, 28, 24)
        content.setSpacing(16)

        title = QLabel("Sign in")
        title.setStyleSheet(f"color: {ThemeColors.PRIMARY_LIGHT}; font-size: 18px; font-weight: 800;")
        content.addWidget(title)

        self._name_input = QLineEdit()
        self._name_input.setPlaceholderText("Username")
        self._name_input.setStyleSheet(
            f"""
            QLineEdit {{
                background: {ThemeColors.BG};
                color: {ThemeColors.TEXT_PRIMARY};
                border: 1px solid {ThemeColors.BORDER};
                border-radius: 10px;
                padding: 8px 10px;
                font-size: 14px;
            }}
            """
        )
        self._name_input.returnPressed.connect(self._confirm)
        content.addWidget(self._name_input)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(10)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.setStyleSheet(_secondary_button_style())
        cancel_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        cancel_btn.clicked.connect(self._cancel)
        btn_row.addWidget(cancel_btn, 1)

        confirm_btn = QPushButton("Sign in")
        confirm_btn.setStyleSheet(primary_button_style())
        confirm_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        confirm_btn.clicked.connect(self._confirm)
        btn_row.addWidget(confirm_btn, 1)

        content.addLayout(btn_row)
        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)

    def open(self) -> None:
        self._name_input.clear()
        self.show()
        self.raise_()
        self._name_input.setFocus()

    def _cancel(self) -> None:
        self.hide()
        self.closed.emit("")

    def _confirm(self) -> None:
        name = self._name_input.text().strip()
        if not name:
            return
        self.hide()
        self.closed.emit(name)
