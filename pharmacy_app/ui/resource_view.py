"""Table page shared by medicines, suppliers, sales, purchases and users."""

from __future__ import annotations

from typing import Any

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pharmacy_app.models import Role
from pharmacy_app.ui.pages import ResourcePage
from pharmacy_app.ui.widgets import fill_table, make_table


class ResourceView(QWidget):
    refresh_requested = pyqtSignal()
    create_requested = pyqtSignal()
    edit_requested = pyqtSignal(object)
    delete_requested = pyqtSignal(object)

    def __init__(self, page: ResourcePage, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.page = page
        self._records: list[Any] = []
        self._visible: list[Any] = []
        self._build_ui()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(12)

        header = QFrame()
        header.setObjectName("HeaderBar")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(14, 12, 14, 12)
        header_layout.setSpacing(8)

        title_box = QVBoxLayout()
        title = QLabel(self.page.title)
        title.setObjectName("SectionTitle")
        hint = QLabel(self.page.hint)
        hint.setObjectName("SectionHint")
        title_box.addWidget(title)
        title_box.addWidget(hint)
        header_layout.addLayout(title_box, 1)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search")
        self.search_input.setMinimumWidth(200)
        self.search_input.textChanged.connect(self._apply_filter)
        header_layout.addWidget(self.search_input, 0)

        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.setObjectName("SecondaryButton")
        self.refresh_button.clicked.connect(self.refresh_requested.emit)
        header_layout.addWidget(self.refresh_button, 0)

        self.edit_button = QPushButton("Edit")
        self.edit_button.setObjectName("SecondaryButton")
        self.edit_button.clicked.connect(self._emit_edit)
        header_layout.addWidget(self.edit_button, 0)

        self.delete_button = QPushButton("Delete")
        self.delete_button.setObjectName("SecondaryButton")
        self.delete_button.clicked.connect(self._emit_delete)
        header_layout.addWidget(self.delete_button, 0)

        self.create_button = QPushButton(self.page.create_label)
        self.create_button.setObjectName("PrimaryButton")
        self.create_button.clicked.connect(self.create_requested.emit)
        header_layout.addWidget(self.create_button, 0)

        root.addWidget(header, 0)

        self.status_message = QLabel("")
        self.status_message.setObjectName("SectionHint")
        self.status_message.hide()
        root.addWidget(self.status_message, 0)

        self.table = make_table(
            [column.header for column in self.page.columns],
            [column.width for column in self.page.columns],
        )
        root.addWidget(self.table, 1)

    def set_role(self, role: Role | None) -> None:
        self.create_button.setVisible(self.page.can_create(role))
        self.edit_button.setVisible(self.page.can_edit(role))
        self.delete_button.setVisible(self.page.can_delete(role))

    def set_records(self, records: list[Any]) -> None:
        self._records = list(records)
        self._apply_filter()

    def set_loading(self, loading: bool, message: str | None = None) -> None:
        for button in (self.refresh_button, self.create_button, self.edit_button, self.delete_button):
            button.setDisabled(loading)
        if loading and message:
            self.set_status_message(message, is_error=False)

    def set_status_message(self, message: str, *, is_error: bool) -> None:
        if not message:
            self.status_message.hide()
            self.status_message.clear()
            return
        self.status_message.setStyleSheet("color: #c63f57;" if is_error else "color: #4d5a86;")
        self.status_message.setText(message)
        self.status_message.show()

    def _apply_filter(self, *_: object) -> None:
        query = self.search_input.text().strip().lower()
        rows = []
        self._visible = []
        for record in self._records:
            cells = [column.render(record) for column in self.page.columns]
            if query and not any(query in cell.lower() for cell in cells):
                continue
            self._visible.append(record)
            rows.append(cells)
        fill_table(self.table, rows)

    def selected_record(self) -> Any | None:
        row = self.table.currentRow()
        if 0 <= row < len(self._visible):
            return self._visible[row]
        return None

    def _emit_edit(self) -> None:
        record = self.selected_record()
        if record is None:
            self.set_status_message("Select a row first.", is_error=True)
            return
        self.edit_requested.emit(record)

    def _emit_delete(self) -> None:
        record = self.selected_record()
        if record is None:
            self.set_status_message("Select a row first.", is_error=True)
            return
        answer = QMessageBox.question(
            self,
            f"Delete from {self.page.title.lower()}",
            "Are you sure you want to delete the selected record?",
        )
        if answer == QMessageBox.StandardButton.Yes:
            self.delete_requested.emit(record)
