"""Login screen."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pharmacy_app.api.errors import ValidationFailure
from pharmacy_app.forms import EMAIL_PATTERN

DEMO_ACCOUNTS: tuple[tuple[str, str, str], ...] = (
    ("Admin", "admin@pharmacy.com", "admin123"),
    ("Pharmacist", "pharmacist@pharmacy.com", "pharma123"),
    ("Cashier", "cashier@pharmacy.com", "cashier123"),
)


def validate_credentials(email: str, password: str) -> tuple[str, str]:
    email = email.strip()
    if not email or not password:
        raise ValidationFailure("Enter your email and password.")
    if not EMAIL_PATTERN.match(email):
        raise ValidationFailure("Enter a valid email address.", field="email")
    return email, password


class LoginView(QWidget):
    login_submitted = pyqtSignal(str, str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._build_ui()

    def _build_ui(self) -> None:
        self.root_layout = QVBoxLayout(self)
        self.root_layout.setContentsMargins(26, 24, 26, 24)
        self.root_layout.setSpacing(0)
        self.root_layout.addStretch(1)

        self.card = QFrame()
        self.card.setObjectName("CenteredCard")
        self.card.setMaximumWidth(520)
        self.card.setMinimumWidth(420)
        card_layout = QVBoxLayout(self.card)
        card_layout.setContentsMargins(22, 22, 22, 22)
        card_layout.setSpacing(10)

        header = QFrame()
        header.setObjectName("LoginHeader")
        header_layout = QVBoxLayout(header)
        header_layout.setContentsMargins(20, 16, 20, 14)
        header_layout.setSpacing(4)

        logo = QLabel("Pharmacy Management System")
        logo.setObjectName("LoginTitle")
        logo.setAlignment(Qt.AlignmentFlag.AlignCenter)
        logo.setWordWrap(True)
        header_layout.addWidget(logo)

        subtitle = QLabel("Sign in to your account")
        subtitle.setObjectName("LoginSubtitle")
        subtitle.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header_layout.addWidget(subtitle)

        card_layout.addWidget(header)

        self.info_label = QLabel("")
        self.info_label.setObjectName("InfoLabel")
        self.info_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.info_label.setWordWrap(True)
        self.info_label.hide()
        card_layout.addWidget(self.info_label)

        email_label = QLabel("Email")
        self.email_input = QLineEdit()
        self.email_input.setPlaceholderText("Enter your email")

        password_label = QLabel("Password")
        self.password_input = QLineEdit()
        self.password_input.setPlaceholderText("Enter your password")
        self.password_input.setEchoMode(QLineEdit.EchoMode.Password)

        self.error_label = QLabel("")
        self.error_label.setObjectName("ErrorLabel")
        self.error_label.setWordWrap(True)
        self.error_label.hide()

        self.login_button = QPushButton("Sign in")
        self.login_button.setObjectName("PrimaryButton")
        self.login_button.clicked.connect(self._submit)
        self.password_input.returnPressed.connect(self._submit)

        button_row = QHBoxLayout()
        button_row.setContentsMargins(0, 0, 0, 0)
        button_row.addWidget(self.login_button)

        card_layout.addWidget(email_label)
        card_layout.addWidget(self.email_input)
        card_layout.addWidget(password_label)
        card_layout.addWidget(self.password_input)
        card_layout.addWidget(self.error_label)
        card_layout.addLayout(button_row)

        self.demo_panel = QFrame()
        self.demo_panel.setObjectName("DemoAccounts")
        demo_layout = QVBoxLayout(self.demo_panel)
        demo_layout.setContentsMargins(18, 14, 18, 14)
        demo_layout.setSpacing(4)
        demo_title = QLabel("Demo accounts")
        demo_title.setObjectName("DemoTitle")
        demo_layout.addWidget(demo_title)
        for title, email, password in DEMO_ACCOUNTS:
            line = QLabel(f"{title}: {email} / {password}")
            line.setObjectName("DemoLine")
            demo_layout.addWidget(line)
        card_layout.addWidget(self.demo_panel)

        self.root_layout.addWidget(self.card, 0, Qt.AlignmentFlag.AlignHCenter)
        self.root_layout.addStretch(1)

    def _submit(self) -> None:
        self.error_label.hide()
        try:
            email, password = validate_credentials(self.email_input.text(), self.password_input.text())
        except ValidationFailure as exc:
            self.show_error(exc.message)
            return
        self.login_submitted.emit(email, password)

    def show_error(self, message: str) -> None:
        self.error_label.setText(message)
        self.error_label.show()

    def show_info(self, message: str) -> None:
        self.info_label.setText(message)
        self.info_label.show()

    def clear_info(self) -> None:
        self.info_label.hide()
        self.info_label.clear()

    def set_busy(self, busy: bool) -> None:
        self.login_button.setDisabled(busy)
        self.email_input.setDisabled(busy)
        self.password_input.setDisabled(busy)
        self.login_button.setText("Signing in..." if busy else "Sign in")

    def reset(self) -> None:
        self.password_input.clear()
        self.error_label.hide()
        self.set_busy(False)
