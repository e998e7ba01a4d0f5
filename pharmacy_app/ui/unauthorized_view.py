"""Shown when the signed-in role may not open a page."""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import QFrame, QLabel, QPushButton, QVBoxLayout, QWidget


class UnauthorizedView(QWidget):
    home_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        root = QVBoxLayout(self)
        root.addStretch(1)

        card = QFrame()
        card.setObjectName("CenteredCard")
        card.setMaximumWidth(460)
        layout = QVBoxLayout(card)
        layout.setContentsMargins(22, 22, 22, 22)
        layout.setSpacing(10)

        title = QLabel("Access denied")
        title.setObjectName("SectionTitle")
        title.setAlignment(Qt.AlignmentFlag.AlignCenter)
        text = QLabel("You don't have permission to view this page.")
        text.setObjectName("SectionHint")
        text.setAlignment(Qt.AlignmentFlag.AlignCenter)
        text.setWordWrap(True)

        home_button = QPushButton("Back to dashboard")
        home_button.setObjectName("PrimaryButton")
        home_button.clicked.connect(self.home_requested.emit)

        layout.addWidget(title)
        layout.addWidget(text)
        layout.addWidget(home_button)
        root.addWidget(card, 0, Qt.AlignmentFlag.AlignHCenter)
        root.addStretch(1)
