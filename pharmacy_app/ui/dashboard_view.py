"""Dashboard screen with headline figures."""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QBoxLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pharmacy_app.models import ROLE_LABELS, DashboardStats, User, format_money
from pharmacy_app.ui.widgets import MetricCard


class DashboardView(QWidget):
    refresh_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(14)

        header = QFrame()
        header.setObjectName("HeaderBar")
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(14, 12, 14, 12)
        header_layout.setSpacing(12)

        self.greeting_label = QLabel("Welcome")
        self.greeting_label.setObjectName("GreetingLabel")
        self.greeting_label.setWordWrap(True)
        header_layout.addWidget(self.greeting_label, 1)

        self.refresh_button = QPushButton("Refresh")
        self.refresh_button.setObjectName("SecondaryButton")
        self.refresh_button.clicked.connect(self.refresh_requested.emit)
        header_layout.addWidget(self.refresh_button, 0)
        root.addWidget(header, 0)

        self.status_message = QLabel("")
        self.status_message.setObjectName("SectionHint")
        self.status_message.hide()
        root.addWidget(self.status_message)

        stock_title = QLabel("Inventory")
        stock_title.setObjectName("SectionTitle")
        root.addWidget(stock_title)

        self.stock_layout = QBoxLayout(QBoxLayout.Direction.LeftToRight)
        self.stock_layout.setSpacing(10)
        self.total_metric = MetricCard("Total medicines", "0")
        self.low_stock_metric = MetricCard("Low stock items", "0")
        self.expired_metric = MetricCard("Expired items", "0")
        self.stock_layout.addWidget(self.total_metric)
        self.stock_layout.addWidget(self.low_stock_metric)
        self.stock_layout.addWidget(self.expired_metric)
        root.addLayout(self.stock_layout)

        sales_title = QLabel("Sales")
        sales_title.setObjectName("SectionTitle")
        root.addWidget(sales_title)

        self.sales_layout = QBoxLayout(QBoxLayout.Direction.LeftToRight)
        self.sales_layout.setSpacing(10)
        self.today_metric = MetricCard("Today's sales", "0")
        self.revenue_metric = MetricCard("Revenue this month", "0.00")
        self.profit_metric = MetricCard("Profit this month", "0.00")
        self.sales_layout.addWidget(self.today_metric)
        self.sales_layout.addWidget(self.revenue_metric)
        self.sales_layout.addWidget(self.profit_metric)
        root.addLayout(self.sales_layout)

        root.addStretch(1)

    def set_user(self, user: User | None) -> None:
        if user is None:
            self.greeting_label.setText("Welcome")
            return
        role = ROLE_LABELS.get(user.role, user.role.value)
        self.greeting_label.setText(f"Welcome back, {user.ui_name} ({role})")

    def set_stats(self, stats: DashboardStats) -> None:
        self.total_metric.set_value(str(stats.total_medicines))
        self.low_stock_metric.set_value(str(stats.low_stock_items))
        self.expired_metric.set_value(str(stats.expired_items))
        self.today_metric.set_value(str(stats.today_sales))
        self.revenue_metric.set_value(format_money(stats.monthly_revenue))
        self.profit_metric.set_value(format_money(stats.monthly_profit))

    def set_loading(self, loading: bool, message: str | None = None) -> None:
        self.refresh_button.setDisabled(loading)
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
