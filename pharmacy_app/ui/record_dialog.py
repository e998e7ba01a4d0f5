"""Generic create/edit dialog driven by field specs."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from PyQt6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QLabel,
    QLineEdit,
    QVBoxLayout,
    QWidget,
)

from pharmacy_app.api.errors import ValidationFailure
from pharmacy_app.forms import FieldSpec, parse_form


class RecordFormDialog(QDialog):
    def __init__(
        self,
        title: str,
        fields: tuple[FieldSpec, ...],
        *,
        options: dict[str, list[tuple[str, Any]]] | None = None,
        values: dict[str, Any] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setModal(True)
        self.resize(520, 120 + 64 * len(fields))
        self._fields = fields
        self._options = options or {}
        self._editing = values is not None
        self._inputs: dict[str, QLineEdit | QComboBox] = {}
        self._payload: dict[str, Any] = {}
        self._build_ui(values or {})

    def _build_ui(self, values: dict[str, Any]) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(18, 18, 18, 18)
        layout.setSpacing(8)

        for spec in self._fields:
            layout.addWidget(QLabel(spec.label))
            widget = self._build_input(spec, values.get(spec.name))
            self._inputs[spec.name] = widget
            layout.addWidget(widget)

        self.error_label = QLabel("")
        self.error_label.setObjectName("ErrorLabel")
        self.error_label.setWordWrap(True)
        self.error_label.hide()
        layout.addWidget(self.error_label)
        layout.addStretch(1)

        self.button_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel)
        self.button_box.accepted.connect(self._on_accept)
        self.button_box.rejected.connect(self.reject)
        ok_button = self.button_box.button(QDialogButtonBox.StandardButton.Ok)
        cancel_button = self.button_box.button(QDialogButtonBox.StandardButton.Cancel)
        if ok_button:
            ok_button.setText("Save" if self._editing else "Create")
            ok_button.setObjectName("PrimaryButton")
        if cancel_button:
            cancel_button.setText("Cancel")
            cancel_button.setObjectName("SecondaryButton")
        layout.addWidget(self.button_box)

    def _build_input(self, spec: FieldSpec, value: Any) -> QLineEdit | QComboBox:
        if spec.kind == "choice":
            combo = QComboBox()
            combo.addItem(f"Select {spec.label.lower()}", None)
            choices = list(spec.choices) or self._options.get(spec.options_key or "", [])
            for label, data in choices:
                combo.addItem(label, data)
            if value is not None:
                index = combo.findData(value)
                if index >= 0:
                    combo.setCurrentIndex(index)
            return combo

        line = QLineEdit()
        line.setPlaceholderText(spec.placeholder)
        if spec.kind == "password":
            line.setEchoMode(QLineEdit.EchoMode.Password)
        if value not in (None, ""):
            line.setText(str(value))
        elif spec.kind == "datetime" and not self._editing:
            line.setText(datetime.now().strftime("%Y-%m-%d %H:%M"))
        return line

    def _raw_values(self) -> dict[str, Any]:
        raw: dict[str, Any] = {}
        for name, widget in self._inputs.items():
            if isinstance(widget, QComboBox):
                raw[name] = widget.currentData()
            else:
                raw[name] = widget.text()
        return raw

    def _on_accept(self) -> None:
        self.error_label.hide()
        try:
            self._payload = parse_form(self._fields, self._raw_values(), editing=self._editing)
        except ValidationFailure as exc:
            self._show_error(exc)
            return
        self.accept()

    def _show_error(self, error: ValidationFailure) -> None:
        self.error_label.setText(error.message)
        self.error_label.show()
        widget = self._inputs.get(error.field or "")
        if widget is not None:
            widget.setFocus()

    def payload(self) -> dict[str, Any]:
        return dict(self._payload)
