"""MenuController: Manages menu creation and action connections."""

from __future__ import annotations

from collections.abc import Callable

from PySide6.QtGui import QAction
from PySide6.QtWidgets import QMainWindow, QMenuBar

from infrastructure.logging import open_latest_log, open_log_directory


class MenuController:
    """Manages main window menu creation and action connections."""

    def __init__(self, main_window: QMainWindow) -> None:
        """Initialize with main window reference.

        Args:
            main_window: The QMainWindow to create menus for
        """
        self.window = main_window
        self.actions: dict[str, QAction] = {}

    def setup_menus(self) -> dict[str, QAction]:
        """Create all menus and return action references."""
        menubar = QMenuBar(self.window)

        file_menu = menubar.addMenu("File")
        self.actions["request_access"] = file_menu.addAction("Request Library Access")
        file_menu.addSeparator()
        self.actions["exit"] = file_menu.addAction("Exit")

        log_menu = menubar.addMenu("Log")
        self.actions["open_latest_log"] = log_menu.addAction("Open Latest Log")
        log_menu.addSeparator()
        self.actions["open_log_directory"] = log_menu.addAction("Open Log Directory")

        self.window.setMenuBar(menubar)
        return self.actions

    def connect_actions(self, handlers: dict[str, Callable]) -> None:
        """Connect menu actions to their handler methods.

        Log actions are always wired to the logging helpers; other actions are
        connected only when a handler is supplied.
        """
        for name, handler in handlers.items():
            action = self.actions.get(name)
            if action is not None:
                action.triggered.connect(handler)

        self.actions["open_latest_log"].triggered.connect(open_latest_log)
        self.actions["open_log_directory"].triggered.connect(open_log_directory)

    def set_access_enabled(self, enabled: bool) -> None:
        action = self.actions.get("request_access")
        if action is not None:
            action.setEnabled(enabled)
