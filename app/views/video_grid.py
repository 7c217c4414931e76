from __future__ import annotations

from collections.abc import Callable

from PySide6.QtCore import QSize
from PySide6.QtGui import QIcon, QImage, QPixmap
from PySide6.QtWidgets import QListView, QListWidget, QListWidgetItem, QWidget

from app.viewmodels.asset_vm import AssetVM
from app.views.constants import ASSET_ROLE, DEFAULT_THUMB_SIZE, GRID_SPACING_PX
from core.models import MediaAsset, Studio


class VideoGrid(QListWidget):
    """Icon grid of a studio's videos; thumbnails are filled in as they arrive."""

    def __init__(
        self,
        parent: QWidget | None,
        request_thumbnail: Callable[[MediaAsset, int], str],
        thumb_size: int | None = None,
    ) -> None:
        super().__init__(parent)
        self._request_thumbnail = request_thumbnail
        self._thumb_size = int(thumb_size or DEFAULT_THUMB_SIZE)
        self._items_by_token: dict[str, QListWidgetItem] = {}

        self.setViewMode(QListView.IconMode)
        self.setResizeMode(QListView.Adjust)
        self.setMovement(QListView.Static)
        self.setSpacing(GRID_SPACING_PX)
        self.setUniformItemSizes(True)
        self.setIconSize(QSize(self._thumb_size, self._thumb_size))
        self.setWordWrap(True)

    def show_assets(self, studio: Studio, assets: tuple[MediaAsset, ...]) -> None:
        self.clear()
        self._items_by_token.clear()
        center = studio.center
        for asset in assets:
            vm = AssetVM(asset, center)
            item = QListWidgetItem(vm.caption)
            item.setData(ASSET_ROLE, asset)
            item.setToolTip(f"{asset.file_path}\n{vm.distance_text} from {studio.name}")
            self.addItem(item)
            token = self._request_thumbnail(asset, self._thumb_size)
            self._items_by_token[token] = item

    def apply_thumbnail(self, token: str, image: object) -> None:
        """Set the icon for the tile that requested `token`; ignores stale tokens."""
        item = self._items_by_token.pop(token, None)
        if item is None or not isinstance(image, QImage) or image.isNull():
            return
        item.setIcon(QIcon(QPixmap.fromImage(image)))

    def selected_asset(self) -> MediaAsset | None:
        item = self.currentItem()
        if item is None:
            return None
        return item.data(ASSET_ROLE)
