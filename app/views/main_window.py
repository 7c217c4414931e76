"""Main window: studios list, video grid for the selected studio, metadata pane.

All view-model setters are called from slots connected to `TaskSignals`, so
observable state only changes on the UI thread.
"""

from __future__ import annotations

from typing import Any

from PySide6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QMainWindow, QStackedWidget
from loguru import logger

from app.viewmodels.main_vm import (
    EVENT_ASSET_SELECTED,
    EVENT_ASSETS,
    EVENT_AUTHORIZATION,
    EVENT_METADATA,
    EVENT_STUDIO_SELECTED,
    MainVM,
)
from app.views.components.menu_controller import MenuController
from app.views.constants import (
    DEFAULT_THUMB_SIZE,
    MSG_DENIED,
    MSG_EMPTY,
    MSG_LOADING,
    MSG_REQUESTING,
    STUDIO_ROLE,
    WINDOW_TITLE,
)
from app.views.layout.layout_manager import LayoutManager
from app.views.library_tasks import LibraryTaskRunner, TaskSignals
from app.views.metadata_pane import MetadataPane
from app.views.video_grid import VideoGrid
from core.models import AuthorizationStatus, MediaAsset, Studio

_PAGE_MESSAGE = 0
_PAGE_GRID = 1


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, vm: MainVM, settings: Any | None = None) -> None:
        """Initialize the window.

        Args:
            vm: ViewModel owning the application state
            settings: Settings instance for configuration
        """
        super().__init__()
        self._vm = vm
        self._settings = settings
        self._access_requested = False

        self._thumb_size: int = DEFAULT_THUMB_SIZE
        if self._settings is not None:
            try:
                self._thumb_size = int(self._settings.get("thumbnail_size", DEFAULT_THUMB_SIZE))
            except (TypeError, ValueError):
                self._thumb_size = DEFAULT_THUMB_SIZE

        self.signals = TaskSignals(self)
        self._runner = LibraryTaskRunner(vm=self._vm, signals=self.signals)
        self.menu_controller = MenuController(self)
        self.layout_manager = LayoutManager(self)

        self._setup_ui()
        self._connect_signals()
        self._vm.subscribe(self._on_vm_event)
        self._render_authorization(self._vm.authorization)

    def _setup_ui(self) -> None:
        self.setWindowTitle(WINDOW_TITLE)

        studios_widget, studios_layout = self.layout_manager.create_section()
        studios_layout.addWidget(QLabel("Studios"))
        self.studio_list = QListWidget()
        studios_layout.addWidget(self.studio_list)

        videos_widget, videos_layout = self.layout_manager.create_section()
        self._videos_title = QLabel("")
        videos_layout.addWidget(self._videos_title)
        self._stack = QStackedWidget()
        self._message = QLabel(MSG_REQUESTING)
        self._message.setWordWrap(True)
        self.grid = VideoGrid(None, self._runner.request_thumbnail, thumb_size=self._thumb_size)
        self._stack.addWidget(self._message)
        self._stack.addWidget(self.grid)
        videos_layout.addWidget(self._stack)

        self.metadata_pane = MetadataPane()

        central = self.layout_manager.setup_main_layout(
            studios_widget, videos_widget, self.metadata_pane
        )
        self.setCentralWidget(central)
        self.layout_manager.setup_initial_window_size()
        self.menu_controller.setup_menus()

    def _connect_signals(self) -> None:
        self.menu_controller.connect_actions(
            {"request_access": self.request_access, "exit": self.close}
        )
        self.studio_list.currentItemChanged.connect(self._on_studio_changed)
        self.grid.currentItemChanged.connect(self._on_asset_changed)

        # Slots bound to QObjects on the UI thread, so delivery is queued there
        self.signals.accessResolved.connect(self._on_access_resolved)
        self.signals.assetsLoaded.connect(self._on_assets_loaded)
        self.signals.thumbnailLoaded.connect(self.grid.apply_thumbnail)
        self.signals.metadataLoaded.connect(self._on_metadata_loaded)

    # Lifecycle
    def showEvent(self, event: Any) -> None:  # noqa: N802  # pylint: disable=invalid-name
        super().showEvent(event)
        if not self._access_requested:
            self.request_access()

    def request_access(self) -> None:
        self._access_requested = True
        self.menu_controller.set_access_enabled(False)
        self._show_message(MSG_REQUESTING)
        self._runner.request_access()

    # Task results
    def _on_access_resolved(self, status: Any) -> None:
        if isinstance(status, AuthorizationStatus):
            self._vm.on_access_result(status)
        else:
            self._vm.on_access_result(AuthorizationStatus.DENIED)

    def _on_assets_loaded(self, studio: Studio, assets: Any) -> None:
        self._vm.on_assets_loaded(studio, assets)

    def _on_metadata_loaded(self, report: Any) -> None:
        self._vm.on_metadata_loaded(report)

    # View-model events
    def _on_vm_event(self, event: str, payload: Any) -> None:
        if event == EVENT_AUTHORIZATION:
            self._render_authorization(payload)
        elif event == EVENT_STUDIO_SELECTED:
            self._videos_title.setText(payload.name)
            self.metadata_pane.clear()
            self._show_message(MSG_LOADING)
        elif event == EVENT_ASSETS:
            studio, assets = payload
            self._render_assets(studio, assets)
        elif event == EVENT_ASSET_SELECTED:
            self.metadata_pane.show_loading(payload)
        elif event == EVENT_METADATA:
            self.metadata_pane.show_report(payload)

    def _render_authorization(self, status: AuthorizationStatus) -> None:
        self.studio_list.clear()
        # a granted library needs no further requests
        self.menu_controller.set_access_enabled(status is not AuthorizationStatus.AUTHORIZED)
        if status is AuthorizationStatus.AUTHORIZED:
            for studio in self._vm.studios:
                item = QListWidgetItem(studio.name)
                item.setData(STUDIO_ROLE, studio)
                item.setToolTip(
                    f"{studio.latitude:.6f}, {studio.longitude:.6f} "
                    f"(radius {studio.radius_m:.0f} m)"
                )
                self.studio_list.addItem(item)
            self._show_message("Select a studio.")
            self.statusBar().showMessage(f"{len(self._vm.studios)} studios", 3000)
        elif status is AuthorizationStatus.DENIED:
            self._show_message(MSG_DENIED)
        else:
            self._show_message(MSG_REQUESTING)

    def _render_assets(self, studio: Studio, assets: tuple[MediaAsset, ...]) -> None:
        if self._vm.selected_studio is None or self._vm.selected_studio != studio:
            return
        if not assets:
            self._show_message(MSG_EMPTY)
            return
        self.grid.show_assets(studio, assets)
        self._stack.setCurrentIndex(_PAGE_GRID)
        self.statusBar().showMessage(f"{len(assets)} videos at {studio.name}", 3000)

    def _show_message(self, text: str) -> None:
        self._message.setText(text)
        self._stack.setCurrentIndex(_PAGE_MESSAGE)

    # Selection handlers
    def _on_studio_changed(self, current: QListWidgetItem | None, _previous: Any = None) -> None:
        if current is None:
            return
        studio = current.data(STUDIO_ROLE)
        if not isinstance(studio, Studio):
            return
        logger.info("Studio selected: {}", studio.name)
        if self._vm.select_studio(studio):
            self._runner.request_studio_assets(studio)

    def _on_asset_changed(self, current: QListWidgetItem | None, _previous: Any = None) -> None:
        asset = self.grid.selected_asset() if current is not None else None
        if asset is None:
            return
        self._vm.select_asset(asset)
        self._runner.request_metadata(asset)
