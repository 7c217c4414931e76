"""LayoutManager: Manages main window layout and splitter behavior."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QMainWindow,
    QSplitter,
    QVBoxLayout,
    QWidget,
)


class LayoutManager:
    """Lays out studios | videos | metadata in one horizontal splitter."""

    STUDIOS_STRETCH_FACTOR = 2
    VIDEOS_STRETCH_FACTOR = 6
    METADATA_STRETCH_FACTOR = 3
    WINDOW_SIZE_RATIO = 0.6

    def __init__(self, main_window: QMainWindow) -> None:
        self.window = main_window
        self.splitter: QSplitter | None = None

    def create_section(self) -> tuple[QWidget, QVBoxLayout]:
        """Create an empty section widget with a vertical layout."""
        widget = QWidget()
        layout = QVBoxLayout(widget)
        return widget, layout

    def setup_main_layout(
        self, studios_widget: QWidget, videos_widget: QWidget, metadata_widget: QWidget
    ) -> QWidget:
        """Create the main horizontal splitter layout and return the central widget."""
        central = QWidget(self.window)
        root = QHBoxLayout(central)

        self.splitter = QSplitter(Qt.Horizontal)
        self.splitter.addWidget(studios_widget)
        self.splitter.addWidget(videos_widget)
        self.splitter.addWidget(metadata_widget)
        self.splitter.setStretchFactor(0, self.STUDIOS_STRETCH_FACTOR)
        self.splitter.setStretchFactor(1, self.VIDEOS_STRETCH_FACTOR)
        self.splitter.setStretchFactor(2, self.METADATA_STRETCH_FACTOR)

        root.addWidget(self.splitter)
        return central

    def setup_initial_window_size(self) -> None:
        """Setup initial window size based on screen dimensions."""
        screen = QApplication.primaryScreen()
        if screen is None:
            return
        rect = screen.availableGeometry()
        self.window.resize(
            int(rect.width() * self.WINDOW_SIZE_RATIO), int(rect.height() * self.WINDOW_SIZE_RATIO)
        )
