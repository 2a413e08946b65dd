"""Application entry point and setup for the TypeSpeed typing test."""

import logging
import sys

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from typespeed.config import load_settings
from typespeed.core.identity import Identity
from typespeed.core.passage import PassageGenerator
from typespeed.core.results import ResultStore
from typespeed.core.words import WordList
from typespeed.ui.main_window import MainWindow


def configure_logging(level: str = "INFO") -> None:
    """Configure application-wide logging with a standard format."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger().setLevel(numeric)


def run() -> None:
    """Load settings and vocabulary, then start the main window."""
    configure_logging()
    settings = load_settings()
    configure_logging(settings.log_level)
    app = QApplication(sys.argv)
    app.setApplicationName("TypeSpeed")
    app.setApplicationDisplayName("TypeSpeed")

    words = WordList.load(settings.words_file)
    logging.info("Loaded %d %s words", len(words), words.language)
    generator = PassageGenerator(words)
    identity = Identity(settings.identity_file)
    store = ResultStore(settings.results_file)

    window = MainWindow(generator=generator, identity=identity, store=store, settings=settings)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.move(geometry.center() - window.rect().center())
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
