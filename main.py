from __future__ import annotations

from pathlib import Path
import sys

from PySide6.QtWidgets import QApplication
from loguru import logger

from app.viewmodels.gallery_vm import GalleryVM
from app.views.main_window import MainWindow
from infrastructure.catalog_repository import JsonCatalogRepository, parse_flag
from infrastructure.image_service import ImageService
from infrastructure.logging import init_logging
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _optional_flag(settings: JsonSettings, key: str) -> bool | None:
    raw = settings.get(key)
    return None if raw is None else parse_flag(raw, True)


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv if argv is None else argv)
    init_logging()
    settings = JsonSettings.load_or_default(BASE_DIR / "settings.json")

    app = QApplication(argv)

    catalog_path = argv[1] if len(argv) > 1 else settings.get("gallery.catalog_path")
    if catalog_path and not Path(catalog_path).is_absolute() and len(argv) <= 1:
        catalog_path = str(BASE_DIR / catalog_path)
    vm = GalleryVM(
        JsonCatalogRepository(),
        show_username=_optional_flag(settings, "gallery.show_username"),
        show_date=_optional_flag(settings, "gallery.show_date"),
    )
    try:
        vm.load(catalog_path)
    except ValueError as ex:
        logger.error("Could not read catalog {}: {}", catalog_path, ex)

    img = ImageService(settings)
    win = MainWindow(vm=vm, image_service=img, settings=settings)
    win.show()

    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
