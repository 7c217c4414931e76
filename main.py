from __future__ import annotations

import argparse
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.main_vm import MainVM
from app.views.main_window import MainWindow
from core.services.asset_filter import AssetFilterCache
from core.services.permission import LibraryPermission
from core.services.studio_registry import StudioRegistry
from infrastructure.local_library import LocalMediaLibrary
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings, acceptance_window_from_settings
from infrastructure.thumbnail_service import ThumbnailService

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse videos recorded near your studios.")
    parser.add_argument(
        "--settings", default=str(BASE_DIR / "settings.json"), help="settings.json path"
    )
    parser.add_argument("--library", default=None, help="video library folder (overrides settings)")
    parser.add_argument("--log-dir", default=None, help="log directory")
    args, _qt_args = parser.parse_known_args(argv)
    return args


def build_vm(settings: JsonSettings) -> MainVM:
    """Wire library, registry, permission and filter cache into a view model."""
    thumbs = ThumbnailService(settings)
    library = LocalMediaLibrary.from_settings(settings, thumbnails=thumbs)
    registry = StudioRegistry.from_settings(settings)
    permission = LibraryPermission()
    window = acceptance_window_from_settings(settings)
    cache = AssetFilterCache(permission, window)
    logger.info(
        "Library {} | {} studios | acceptance {}", library.root, len(registry), window.describe()
    )
    return MainVM(library, registry, permission=permission, asset_cache=cache)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    settings = JsonSettings(args.settings)
    init_logging(args.log_dir, level=str(settings.get("logging.level", "INFO") or "INFO"))
    if args.library:
        settings.set("library.root", args.library)

    app = QApplication(sys.argv)
    vm = build_vm(settings)
    win = MainWindow(vm=vm, settings=settings)
    win.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
