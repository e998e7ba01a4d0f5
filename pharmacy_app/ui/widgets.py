"""Reusable UI widgets."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from pharmacy_app.models import ROLE_LABELS, STOCK_STATUS_LABELS, User
from pharmacy_app.routing import NavItem, Route

NOTICE_TIMEOUT_MS = 5000


def stock_status_label(status: str) -> str:
    return STOCK_STATUS_LABELS.get(status, status)


class StatusBadge(QLabel):
    def __init__(self, text: str, status: str, parent: QWidget | None = None) -> None:
        super().__init__(text, parent)
        self.setObjectName("StatusBadge")
        self.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.set_status(status, text)

    def set_status(self, status: str, text: str | None = None) -> None:
        self.setProperty("status", status)
        if text is not None:
            self.setText(text)
        self.style().unpolish(self)
        self.style().polish(self)


class MetricCard(QFrame):
    def __init__(self, title: str, value: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("MetricCard")
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)
        self.setMinimumHeight(96)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 14, 16, 14)
        layout.setSpacing(4)

        self.title_label = QLabel(title)
        self.title_label.setObjectName("MetricTitle")
        self.value_label = QLabel(value)
        self.value_label.setObjectName("MetricValue")

        layout.addWidget(self.title_label)
        layout.addWidget(self.value_label)
        layout.addStretch(1)

    def set_value(self, value: str) -> None:
        self.value_label.setText(value)


class NoticeBanner(QFrame):
    """Transient notice strip; hides itself after a few seconds."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("NoticeBanner")
        layout = QHBoxLayout(self)
        layout.setContentsMargins(14, 8, 8, 8)
        layout.setSpacing(8)

        self.text_label = QLabel("")
        self.text_label.setObjectName("NoticeText")
        self.text_label.setWordWrap(True)
        layout.addWidget(self.text_label, 1)

        close_button = QPushButton("×")
        close_button.setObjectName("NoticeClose")
        close_button.setFixedWidth(32)
        close_button.clicked.connect(self.hide)
        layout.addWidget(close_button, 0)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.hide)
        self.hide()

    def show_notice(self, level: str, text: str) -> None:
        self.setProperty("level", level)
        self.style().unpolish(self)
        self.style().polish(self)
        self.text_label.setText(text)
        self.show()
        self._timer.start(NOTICE_TIMEOUT_MS)


class Sidebar(QFrame):
    navigate_requested = pyqtSignal(str)
    logout_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("Sidebar")
        self.setFixedWidth(220)
        self._buttons: dict[Route, QPushButton] = {}

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(12, 14, 12, 14)
        self._layout.setSpacing(10)

        brand = QLabel("PharmacyMS")
        brand.setObjectName("BrandLabel")
        self._layout.addWidget(brand)

        self._nav_container = QWidget()
        self._nav_layout = QVBoxLayout(self._nav_container)
        self._nav_layout.setContentsMargins(0, 0, 0, 0)
        self._nav_layout.setSpacing(6)
        self._layout.addWidget(self._nav_container)
        self._layout.addStretch(1)

        self.user_label = QLabel("-")
        self.user_label.setObjectName("SidebarUser")
        self.role_label = QLabel("-")
        self.role_label.setObjectName("SectionHint")
        self.logout_button = QPushButton("Logout")
        self.logout_button.setObjectName("SecondaryButton")
        self.logout_button.clicked.connect(self.logout_requested.emit)

        self._layout.addWidget(self.user_label)
        self._layout.addWidget(self.role_label)
        self._layout.addWidget(self.logout_button)

    def set_user(self, user: User | None, items: Sequence[NavItem]) -> None:
        for button in self._buttons.values():
            self._nav_layout.removeWidget(button)
            button.deleteLater()
        self._buttons = {}

        for item in items:
            button = QPushButton(item.label)
            button.setObjectName("SidebarNavButton")
            button.clicked.connect(lambda _checked=False, route=item.route: self.navigate_requested.emit(route.value))
            self._nav_layout.addWidget(button)
            self._buttons[item.route] = button

        if user is None:
            self.user_label.setText("-")
            self.role_label.setText("-")
        else:
            self.user_label.setText(user.ui_name)
            self.role_label.setText(ROLE_LABELS.get(user.role, user.role.value))

    def set_active(self, route: Route | None) -> None:
        for button_route, button in self._buttons.items():
            button.setProperty("active", "true" if button_route is route else "false")
            button.style().unpolish(button)
            button.style().polish(button)


def make_table(headers: Sequence[str], widths: Sequence[int] = ()) -> QTableWidget:
    table = QTableWidget(0, len(headers))
    table.setObjectName("DataTable")
    table.setHorizontalHeaderLabels(list(headers))
    table.verticalHeader().setVisible(False)
    table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
    table.setSelectionMode(QTableWidget.SelectionMode.SingleSelection)
    table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
    table.horizontalHeader().setStretchLastSection(True)
    for column, width in enumerate(widths):
        table.setColumnWidth(column, width)
    return table


def fill_table(table: QTableWidget, rows: Sequence[Sequence[Any]]) -> None:
    table.setRowCount(len(rows))
    for row_index, row in enumerate(rows):
        for column, value in enumerate(row):
            if isinstance(value, QWidget):
                table.setCellWidget(row_index, column, value)
            else:
                table.setItem(row_index, column, QTableWidgetItem("" if value is None else str(value)))
