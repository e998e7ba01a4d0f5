"""Stock and expiry reports."""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from pharmacy_app.models import (
    ExpiryReportItem,
    Medicine,
    StockReportItem,
    format_date,
    format_money,
)
from pharmacy_app.ui.widgets import StatusBadge, fill_table, make_table, stock_status_label

DEFAULT_EXPIRING_DAYS = 30


class ReportsView(QWidget):
    refresh_requested = pyqtSignal()
    expiring_days_changed = pyqtSignal(int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
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

        title = QLabel("Reports")
        title.setObjectName("SectionTitle")
        header_layout.addWidget(title, 1)

        days_label = QLabel("Expiring within (days)")
        days_label.setObjectName("SectionHint")
        self.days_input = QSpinBox()
        self.days_input.setRange(1, 365)
        self.days_input.setValue(DEFAULT_EXPIRING_DAYS)
        self.days_input.editingFinished.connect(lambda: self.expiring_days_changed.emit(self.days_input.value()))
        header_layout.addWidget(days_label, 0)
        header_layout.addWidget(self.days_input, 0)

        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.setObjectName("SecondaryButton")
        self.refresh_button.clicked.connect(self.refresh_requested.emit)
        header_layout.addWidget(self.refresh_button, 0)
        root.addWidget(header, 0)

        self.status_message = QLabel("")
        self.status_message.setObjectName("SectionHint")
        self.status_message.hide()
        root.addWidget(self.status_message)

        self.tabs = QTabWidget()
        self.stock_table = make_table(
            ["Medicine", "Category", "Qty", "Reorder at", "Cost", "Price", "Status"],
            [200, 140, 70, 90, 100, 100, 130],
        )
        self.expired_table = make_table(["Medicine", "Category", "Qty", "Expired on"], [220, 160, 80, 120])
        self.expiring_table = make_table(
            ["Medicine", "Category", "Qty", "Expires", "Supplier"],
            [220, 160, 80, 120, 160],
        )
        self.tabs.addTab(self.stock_table, "Stock")
        self.tabs.addTab(self.expired_table, "Expired")
        self.tabs.addTab(self.expiring_table, "Expiring soon")
        root.addWidget(self.tabs, 1)

    @property
    def expiring_days(self) -> int:
        return self.days_input.value()

    def set_reports(
        self,
        *,
        stock: list[StockReportItem],
        expired: list[ExpiryReportItem],
        expiring: list[Medicine],
    ) -> None:
        fill_table(
            self.stock_table,
            [
                [
                    item.name,
                    item.category or "-",
                    item.quantity,
                    item.reorder_level,
                    format_money(item.cost_price),
                    format_money(item.selling_price),
                    StatusBadge(stock_status_label(item.status), item.status),
                ]
                for item in stock
            ],
        )
        fill_table(
            self.expired_table,
            [[item.name, item.category or "-", item.quantity, format_date(item.expiry_date)] for item in expired],
        )
        fill_table(
            self.expiring_table,
            [
                [
                    medicine.name,
                    medicine.category or "-",
                    medicine.quantity,
                    format_date(medicine.expiry_date),
                    medicine.supplier_name or "-",
                ]
                for medicine in expiring
            ],
        )
        self.tabs.setTabText(1, f"Expired ({len(expired)})")
        self.tabs.setTabText(2, f"Expiring soon ({len(expiring)})")

    def set_loading(self, loading: bool, message: str | None = None) -> None:
        self.refresh_button.setDisabled(loading)
        self.days_input.setDisabled(loading)
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
