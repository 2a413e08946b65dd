from __future__ import annotations

import logging
from typing import Dict, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QButtonGroup,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from typespeed.config import Settings
from typespeed.core.identity import Identity
from typespeed.core.passage import DURATIONS, PassageGenerator
from typespeed.core.results import Leaderboard, ResultStore, persist_result
from typespeed.core.session import Result, Session, SessionEngine
from typespeed.ui.colors import ThemeColors
from typespeed.ui.leaderboard_view import LeaderboardPanel
from typespeed.ui.overlays import SignInOverlay, TestCompleteOverlay, primary_button_style
from typespeed.ui.typing_widgets import PassageView, StatBadge

logger = logging.getLogger(__name__)


def _tab_style() -> str:
    return f"""
        QPushButton {{
            background: transparent;
            color: {ThemeColors.TEXT_SECONDARY};
            border: 1px solid {ThemeColors.BORDER};
            border-radius: 10px;
            padding: 6px 16px;
            font-weight: 600;
        }}
        QPushButton:checked {{
            background: {ThemeColors.PRIMARY};
            color: {ThemeColors.BG};
            border-color: {ThemeColors.PRIMARY};
        }}
        QPushButton:disabled {{ color: {ThemeColors.TEXT_MUTED}; }}
    """


class MainWindow(QMainWindow):
    """Typing test window with a leaderboard tab.

    The window owns the current :class:`Session` value and replaces it with
    whatever the engine returns: text edits go through
    :meth:`SessionEngine.apply_input`, a one-second ``QTimer`` drives
    :meth:`SessionEngine.tick` while the test is active, and finalized results
    arrive once through the engine's ``on_finalized`` hook.
    """

    def __init__(
        self,
        generator: PassageGenerator,
        identity: Identity,
        store: ResultStore,
        settings: Settings,
    ) -> None:
        super().__init__()
        self._identity = identity
        self._store = store
        self._settings = settings
        self._engine = SessionEngine(
            generator,
            identity=lambda: self._identity.user_id,
            on_finalized=self._on_result,
        )
        self._session: Session = self._engine.create(settings.default_duration)

        self._stack: Optional[QStackedWidget] = None
        self._leaderboard_stack: Optional[QStackedWidget] = None
        self._leaderboard_panel: Optional[LeaderboardPanel] = None
        self._leaderboard_locked: Optional[QWidget] = None
        self._test_tab_btn: Optional[QPushButton] = None
        self._leaderboard_tab_btn: Optional[QPushButton] = None
        self._auth_button: Optional[QPushButton] = None
        self._duration_buttons: Dict[int, QPushButton] = {}
        self._time_badge: Optional[StatBadge] = None
        self._wpm_badge: Optional[StatBadge] = None
        self._accuracy_badge: Optional[StatBadge] = None
        self._passage_view: Optional[PassageView] = None
        self._instructions_label: Optional[QLabel] = None
        self.input_box: Optional[QLineEdit] = None
        self._complete_overlay: Optional[TestCompleteOverlay] = None
        self._sign_in_overlay: Optional[SignInOverlay] = None

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(1000)
        self._tick_timer.timeout.connect(self._on_tick)

        self.setWindowTitle("TypeSpeed")
        self.resize(1000, 680)
        self._build_ui()
        self._refresh_auth()
        self._refresh_test_view()

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        root = QWidget()
        root.setObjectName("root")
        root.setStyleSheet(f"QWidget#root {{ background: {ThemeColors.BG}; }}")
        root_layout = QVBoxLayout(root)
        root_layout.setContentsMargins(32, 20, 32, 24)
        root_layout.setSpacing(18)

        header = QHBoxLayout()
        title = QLabel("⌨  TypeSpeed")
        title.setStyleSheet(f"color: {ThemeColors.GOLD}; font-size: 24px; font-weight: 900;")
        header.addWidget(title)
        header.addStretch(1)
        self._auth_button = QPushButton("")
        self._auth_button.setStyleSheet(_tab_style())
        self._auth_button.setCursor(Qt.PointingHandCursor)
        self._auth_button.clicked.connect(self._toggle_auth)
        header.addWidget(self._auth_button)
        root_layout.addLayout(header)

        tabs = QHBoxLayout()
        tabs.addStretch(1)
        tab_group = QButtonGroup(self)
        self._test_tab_btn = QPushButton("⏱  Typing Test")
        self._leaderboard_tab_btn = QPushButton("🏆  Leaderboard")
        for btn in (self._test_tab_btn, self._leaderboard_tab_btn):
            btn.setCheckable(True)
            btn.setStyleSheet(_tab_style())
            btn.setCursor(Qt.PointingHandCursor)
            tab_group.addButton(btn)
            tabs.addWidget(btn)
        self._test_tab_btn.setChecked(True)
        self._test_tab_btn.clicked.connect(self._show_test_tab)
        self._leaderboard_tab_btn.clicked.connect(self._show_leaderboard_tab)
        tabs.addStretch(1)
        root_layout.addLayout(tabs)

        self._stack = QStackedWidget()
        self._stack.addWidget(self._build_test_tab())
        self._stack.addWidget(self._build_leaderboard_tab())
        root_layout.addWidget(self._stack, 1)

        self.setCentralWidget(root)

        self._complete_overlay = TestCompleteOverlay(root)
        self._complete_overlay.retry.connect(self._retry)
        self._sign_in_overlay = SignInOverlay(root)
        self._sign_in_overlay.closed.connect(self._on_sign_in_closed)

    def _build_test_tab(self) -> QWidget:
        tab = QWidget()
        layout = QVBoxLayout(tab)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(16)

        durations = QHBoxLayout()
        durations.addStretch(1)
        group = QButtonGroup(self)
        for duration in DURATIONS:
            btn = QPushButton(f"{duration}s")
            btn.setCheckable(True)
            btn.setMinimumWidth(64)
            btn.setStyleSheet(_tab_style())
            btn.setCursor(Qt.PointingHandCursor)
            btn.setChecked(duration == self._session.duration)
            btn.clicked.connect(lambda _checked=False, d=duration: self._select_duration(d))
            group.addButton(btn)
            durations.addWidget(btn)
            self._duration_buttons[duration] = btn
        durations.addStretch(1)
        layout.addLayout(durations)

        stats = QHBoxLayout()
        stats.addStretch(1)
        self._time_badge = StatBadge("⏱")
        self._wpm_badge = StatBadge("🏆")
        self._accuracy_badge = StatBadge("🎯")
        for badge in (self._time_badge, self._wpm_badge, self._accuracy_badge):
            stats.addWidget(badge)
        stats.addStretch(1)
        layout.addLayout(stats)

        self._passage_view = PassageView()
        self._passage_view.clicked.connect(self._focus_input)
        layout.addWidget(self._passage_view, 1)

        # Captures keystrokes; the passage view is what the user sees.
        self.input_box = QLineEdit(tab)
        self.input_box.setFixedSize(1, 1)
        self.input_box.setAttribute(Qt.WA_InputMethodEnabled, False)
        self.input_box.setStyleSheet("background: transparent; border: none; color: transparent;")
        self.input_box.textEdited.connect(self._on_text_edited)
        layout.addWidget(self.input_box)

        self._instructions_label = QLabel("Click on the text area and start typing to begin the test")
        self._instructions_label.setAlignment(Qt.AlignCenter)
        self._instructions_label.setStyleSheet(f"color: {ThemeColors.TEXT_MUTED};")
        layout.addWidget(self._instructions_label)
        return tab

    def _build_leaderboard_tab(self) -> QWidget:
        self._leaderboard_stack = QStackedWidget()

        leaderboard = Leaderboard(self._store)
        self._leaderboard_panel = LeaderboardPanel(leaderboard, limit=self._settings.leaderboard_limit)
        self._leaderboard_stack.addWidget(self._leaderboard_panel)

        locked = QWidget()
        locked_layout = QVBoxLayout(locked)
        locked_layout.addStretch(1)
        icon = QLabel("🏆")
        icon.setAlignment(Qt.AlignCenter)
        icon.setStyleSheet(f"color: {ThemeColors.GOLD}; font-size: 40px;")
        heading = QLabel("Sign in to view the global leaderboard")
        heading.setAlignment(Qt.AlignCenter)
        heading.setStyleSheet(f"color: {ThemeColors.TEXT_PRIMARY}; font-size: 20px; font-weight: 800;")
        sub = QLabel("Login to see your ranking and compete with others.")
        sub.setAlignment(Qt.AlignCenter)
        sub.setStyleSheet(f"color: {ThemeColors.TEXT_SECONDARY};")
        sign_in_btn = QPushButton("Sign in")
        sign_in_btn.setStyleSheet(primary_button_style())
        sign_in_btn.setCursor(Qt.PointingHandCursor)
        sign_in_btn.clicked.connect(self._toggle_auth)
        for w in (icon, heading, sub):
            locked_layout.addWidget(w)
        locked_layout.addWidget(sign_in_btn, 0, Qt.AlignHCenter)
        locked_layout.addStretch(1)
        self._leaderboard_locked = locked
        self._leaderboard_stack.addWidget(locked)
        return self._leaderboard_stack

    # ------------------------------------------------------------------
    # Session events
    # ------------------------------------------------------------------

    def _on_text_edited(self, value: str) -> None:
        previous = self._session
        self._session = self._engine.apply_input(previous, value)
        if self.input_box is not None and self.input_box.text() != self._session.typed_text:
            self.input_box.setText(self._session.typed_text)
        if previous.is_idle and self._session.is_active:
            self._tick_timer.start()
        self._refresh_test_view()

    def _on_tick(self) -> None:
        self._session = self._engine.tick(self._session)
        self._refresh_test_view()

    def _on_result(self, result: Result) -> None:
        """Called once per session by the engine, from either completion trigger."""
        self._tick_timer.stop()
        notice = persist_result(result, self._store, self._identity.username)
        if self._complete_overlay is not None:
            self._complete_overlay.show_result(result, notice)

    def _select_duration(self, duration: int) -> None:
        try:
            self._session = self._engine.change_duration(self._session, duration)
        except RuntimeError:
            logger.debug("Ignoring duration change while a test is running")
            return
        self._reset_input()

    def _retry(self) -> None:
        self._session = self._engine.restart(self._session)
        self._reset_input()

    def _reset_input(self) -> None:
        self._tick_timer.stop()
        if self._complete_overlay is not None:
            self._complete_overlay.hide()
        if self.input_box is not None:
            self.input_box.setText("")
        self._refresh_test_view()
        self._focus_input()

    def _focus_input(self) -> None:
        if self.input_box is not None and self.input_box.isEnabled():
            self.input_box.setFocus()

    def _refresh_test_view(self) -> None:
        session = self._session
        if self._time_badge is not None:
            self._time_badge.set_value(f"{session.time_remaining}s")
        if self._wpm_badge is not None:
            self._wpm_badge.set_value(f"{session.wpm} WPM")
        if self._accuracy_badge is not None:
            self._accuracy_badge.set_value(f"{session.accuracy}%")
        if self._passage_view is not None:
            self._passage_view.set_passage(session.target_text, session.typed_text)
        if self.input_box is not None:
            self.input_box.setEnabled(not session.is_completed)
        for duration, btn in self._duration_buttons.items():
            btn.setEnabled(not session.is_active)
            btn.setChecked(duration == session.duration)
        if self._instructions_label is not None:
            self._instructions_label.setVisible(session.is_idle)

    # ------------------------------------------------------------------
    # Tabs and identity
    # ------------------------------------------------------------------

    def _show_test_tab(self) -> None:
        if self._stack is not None:
            self._stack.setCurrentIndex(0)
        self._focus_input()

    def _show_leaderboard_tab(self) -> None:
        if self._stack is not None:
            self._stack.setCurrentIndex(1)
        self._refresh_leaderboard()

    def _refresh_leaderboard(self) -> None:
        if self._leaderboard_stack is None or self._leaderboard_panel is None:
            return
        if self._identity.is_signed_in():
            self._leaderboard_stack.setCurrentWidget(self._leaderboard_panel)
            self._leaderboard_panel.refresh()
        else:
            self._leaderboard_stack.setCurrentWidget(self._leaderboard_locked)

    def _toggle_auth(self) -> None:
        if self._identity.is_signed_in():
            self._identity.sign_out()
            self._refresh_auth()
        elif self._sign_in_overlay is not None:
            self._sign_in_overlay.open()

    def _on_sign_in_closed(self, name: str) -> None:
        if name:
            self._identity.sign_in(name)
        self._refresh_auth()
        self._focus_input()

    def _refresh_auth(self) -> None:
        if self._auth_button is not None:
            if self._identity.is_signed_in():
                self._auth_button.setText(f"👤 {self._identity.username}  ·  Sign out")
            else:
                self._auth_button.setText("Sign in")
        self._refresh_leaderboard()

    def closeEvent(self, event: QCloseEvent) -> None:
        self._tick_timer.stop()
        super().closeEvent(event)
