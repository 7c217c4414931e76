from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal
from loguru import logger

from core.models import MediaAsset, Studio


class TaskSignals(QObject):
    """Signals emitted by background tasks.

    The instance lives on the UI thread, so every connected slot runs there
    through a queued connection regardless of which worker emits.
    """

    accessResolved = Signal(object)  # AuthorizationStatus
    assetsLoaded = Signal(object, object)  # Studio, tuple[MediaAsset, ...] | None
    thumbnailLoaded = Signal(str, object)  # token, QImage | None
    metadataLoaded = Signal(object)  # MetadataReport


class _Task(QRunnable):
    """QRunnable calling `work()` and forwarding its result to `deliver`."""

    def __init__(self, name: str, work: Callable[[], Any], deliver: Callable[[Any], None]) -> None:
        super().__init__()
        self._name = name
        self._work = work
        self._deliver = deliver

    def run(self) -> None:  # type: ignore[override]
        try:
            result = self._work()
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.exception("Task {} failed: {}", self._name, ex)
            result = None
        self._deliver(result)


class LibraryTaskRunner:
    """Dispatches library work to the global thread pool.

    Thumbnail tokens have the form "thumb|{asset_id}|{side}".
    """

    def __init__(self, *, vm: Any, signals: TaskSignals) -> None:
        self._vm = vm
        self._signals = signals
        self._pool = QThreadPool.globalInstance()

    def request_access(self) -> None:
        self._pool.start(
            _Task("access", self._vm.compute_access, self._signals.accessResolved.emit)
        )

    def request_studio_assets(self, studio: Studio) -> None:
        self._pool.start(
            _Task(
                f"assets:{studio.name}",
                lambda: self._vm.compute_assets(studio),
                lambda assets: self._signals.assetsLoaded.emit(studio, assets),
            )
        )

    def request_thumbnail(self, asset: MediaAsset, side: int) -> str:
        """Request a thumbnail for `asset`. Returns the token string."""
        token = f"thumb|{asset.asset_id}|{side}"
        self._pool.start(
            _Task(
                token,
                lambda: self._vm.compute_thumbnail(asset, side),
                lambda img: self._signals.thumbnailLoaded.emit(token, img),
            )
        )
        return token

    def request_metadata(self, asset: MediaAsset) -> None:
        self._pool.start(
            _Task(
                f"metadata:{asset.asset_id}",
                lambda: self._vm.compute_metadata(asset),
                self._deliver_metadata,
            )
        )

    def _deliver_metadata(self, report: Any) -> None:
        if report is not None:
            self._signals.metadataLoaded.emit(report)
