from __future__ import annotations

from PySide6.QtWidgets import (
    QHeaderView,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from app.views.constants import (
    COL_COMMON_KEY,
    COL_FORMAT,
    COL_KEY,
    COL_VALUE,
    METADATA_HEADERS,
)
from core.models import MediaAsset, MetadataReport


class MetadataPane(QWidget):
    """Shows the common-key metadata of the selected video."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self._title = QLabel("Metadata")
        root.addWidget(self._title)

        self._table = QTableWidget(0, len(METADATA_HEADERS))
        self._table.setHorizontalHeaderLabels(METADATA_HEADERS)
        self._table.horizontalHeader().setSectionResizeMode(COL_VALUE, QHeaderView.Stretch)
        self._table.verticalHeader().setVisible(False)
        self._table.setEditTriggers(QTableWidget.NoEditTriggers)
        root.addWidget(self._table)

        self._status = QLabel("")
        self._status.setWordWrap(True)
        root.addWidget(self._status)

    def show_loading(self, asset: MediaAsset) -> None:
        self._title.setText(f"Metadata: {asset.file_name}")
        self._table.setRowCount(0)
        self._status.setText("Loading metadata...")

    def show_report(self, report: MetadataReport) -> None:
        self._title.setText(f"Metadata: {report.asset.file_name}")
        self._table.setRowCount(0)
        if not report.ok:
            self._status.setText(f"Metadata unavailable: {report.error}")
            return
        self._table.setRowCount(len(report.items))
        for row, item in enumerate(report.items):
            self._table.setItem(row, COL_FORMAT, QTableWidgetItem(item.format))
            self._table.setItem(row, COL_COMMON_KEY, QTableWidgetItem(item.common_key))
            self._table.setItem(row, COL_KEY, QTableWidgetItem(item.key))
            self._table.setItem(row, COL_VALUE, QTableWidgetItem(item.value))
        lines = [f"{len(report.items)} items"]
        for fmt, reason in report.format_errors:
            lines.append(f"{fmt}: {reason}")
        self._status.setText("\n".join(lines))

    def clear(self) -> None:
        self._title.setText("Metadata")
        self._table.setRowCount(0)
        self._status.setText("")
