from __future__ import annotations

from functools import partial
from pathlib import Path
import sys
from typing import Dict, Optional, Sequence

from loguru import logger
from PySide6 import QtCore, QtGui, QtWidgets

from catalog import CatalogEntry, PROJECT_ROOT, catalog_names, load_catalog, load_config, save_config
from log import configure_logging
from presenter import PosterPresenter, Resolver
from resolver import ImageHandle, resolve


APP_NAME = "Poster Viewer"
ORG_NAME = "PosterViewer"
APP_SPACING = 10


class PosterView(QtWidgets.QGraphicsView):
    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setRenderHints(QtGui.QPainter.Antialiasing | QtGui.QPainter.SmoothPixmapTransform)
        self.setHorizontalScrollBarPolicy(QtCore.Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(QtCore.Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setFrameShape(QtWidgets.QFrame.Shape.NoFrame)
        self.setScene(QtWidgets.QGraphicsScene(self))
        self._pixmap_item: Optional[QtWidgets.QGraphicsPixmapItem] = None
        self._pixmap: Optional[QtGui.QPixmap] = None

    @property
    def pixmap(self) -> Optional[QtGui.QPixmap]:
        return self._pixmap

    def set_image(self, image: Optional[ImageHandle]) -> None:
        if image is None or image.isNull():
            self.set_pixmap(None)
            return
        self.set_pixmap(QtGui.QPixmap.fromImage(image))

    def set_pixmap(self, pixmap: Optional[QtGui.QPixmap]) -> None:
        self.scene().clear()
        self._pixmap = pixmap if pixmap and not pixmap.isNull() else None
        if self._pixmap:
            self._pixmap_item = self.scene().addPixmap(self._pixmap)
            self._pixmap_item.setTransformationMode(QtCore.Qt.TransformationMode.SmoothTransformation)
            self.setSceneRect(QtCore.QRectF(self._pixmap.rect()))
            self.fit_to_window()
        else:
            self._pixmap_item = None
            self.setSceneRect(QtCore.QRectF())

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:
        super().resizeEvent(event)
        if self._pixmap_item and self._pixmap:
            self.fit_to_window()

    def fit_to_window(self) -> None:
        if self._pixmap_item is None:
            return
        self.resetTransform()
        self.fitInView(self.sceneRect(), QtCore.Qt.AspectRatioMode.KeepAspectRatio)


class MainWindow(QtWidgets.QMainWindow):
    def __init__(
        self,
        config: Dict,
        catalog: Optional[Sequence[CatalogEntry]] = None,
        resolver: Optional[Resolver] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(APP_NAME)

        self.config = config
        self.catalog = tuple(catalog) if catalog is not None else load_catalog(config)
        if resolver is None:
            resolver = partial(resolve, debug=bool(config.get("debug", False)))

        self._build_ui()
        window = config.get("window", {})
        self.resize(window.get("width", 800), window.get("height", 400))

        self.presenter = PosterPresenter(
            self.catalog,
            image_sink=self.poster_view.set_image,
            text_sink=self.poster_label.setText,
            resolver=resolver,
            busy_callback=self._set_busy,
        )
        self.poster_combo.currentIndexChanged.connect(self._on_poster_selected)
        self.presenter.start()

    def _build_ui(self) -> None:
        central = QtWidgets.QWidget()

        self.poster_combo = QtWidgets.QComboBox()
        self.poster_combo.setEditable(False)
        self.poster_combo.setPlaceholderText("Select a Poster")
        self.poster_combo.setSizeAdjustPolicy(QtWidgets.QComboBox.SizeAdjustPolicy.AdjustToContents)
        self.poster_combo.addItems(catalog_names(self.catalog))
        self.poster_combo.setCurrentIndex(0)

        self.poster_view = PosterView()
        self.poster_view.setSizePolicy(
            QtWidgets.QSizePolicy.Policy.Expanding, QtWidgets.QSizePolicy.Policy.Expanding
        )
        self.poster_label = QtWidgets.QLabel("")
        self.poster_label.setObjectName("posterLabel")
        self.poster_label.setBuddy(self.poster_view)
        self.poster_label.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.poster_label.setWordWrap(True)
        self.poster_label.setTextInteractionFlags(QtCore.Qt.TextInteractionFlag.TextSelectableByMouse)

        poster_column = QtWidgets.QVBoxLayout()
        poster_column.setSpacing(APP_SPACING)
        poster_column.addWidget(self.poster_label)
        poster_column.addWidget(self.poster_view, stretch=1)

        controls_column = QtWidgets.QVBoxLayout()
        controls_column.setSpacing(APP_SPACING)
        controls_column.addStretch(1)
        controls_column.addWidget(self.poster_combo)
        controls_column.addStretch(1)

        layout = QtWidgets.QHBoxLayout(central)
        layout.setContentsMargins(APP_SPACING, APP_SPACING, APP_SPACING, APP_SPACING)
        layout.setSpacing(APP_SPACING)
        layout.addLayout(controls_column)
        layout.addLayout(poster_column, stretch=1)
        self.setCentralWidget(central)

    def _on_poster_selected(self, index: int) -> None:
        if index < 0:
            return
        self.presenter.select(index)

    def _set_busy(self, busy: bool) -> None:
        app = QtWidgets.QApplication.instance()
        if app is None:
            return
        if busy:
            QtWidgets.QApplication.setOverrideCursor(QtCore.Qt.CursorShape.WaitCursor)
        else:
            QtWidgets.QApplication.restoreOverrideCursor()


def _config_path() -> Path:
    location = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppConfigLocation)
    if location:
        config_dir = Path(location)
    else:
        config_dir = PROJECT_ROOT
    return config_dir / "config.json"


def _log_dir() -> Optional[Path]:
    location = QtCore.QStandardPaths.writableLocation(QtCore.QStandardPaths.AppLocalDataLocation)
    if not location:
        return None
    return Path(location) / "logs"


def main() -> None:
    app = QtWidgets.QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(ORG_NAME)
    QtCore.QLoggingCategory.setFilterRules("qt.gui.imageio=false\n")

    config_path = _config_path()
    config = load_config(config_path)
    configure_logging(debug=config["debug"], level=config["log_level"], log_dir=_log_dir())
    if not config_path.exists():
        try:
            save_config(config_path, config)
        except OSError as exc:
            logger.warning(f"Could not write default config to {config_path}: {exc}")
    logger.info(f"Starting {APP_NAME} with config {config_path}")

    window = MainWindow(config)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
