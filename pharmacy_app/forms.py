"""Form field definitions and input validation for record dialogs."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pharmacy_app.api.errors import ValidationFailure

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

FIELD_KINDS = ("text", "email", "password", "int", "decimal", "date", "datetime", "choice")


@dataclass(slots=True, frozen=True)
class FieldSpec:
    name: str
    label: str
    kind: str = "text"
    required: bool = True
    required_on_edit: bool | None = None
    placeholder: str = ""
    min_value: int | str | None = None
    # Static (label, value) pairs, or the key of options loaded at dialog open.
    choices: tuple[tuple[str, Any], ...] = field(default_factory=tuple)
    options_key: str | None = None

    def is_required(self, *, editing: bool) -> bool:
        if editing and self.required_on_edit is not None:
            return self.required_on_edit
        return self.required


def _parse_number(spec: FieldSpec, text: str) -> int | Decimal:
    if spec.kind == "int":
        try:
            value: int | Decimal = int(text)
        except ValueError:
            raise ValidationFailure(f"{spec.label} must be a whole number.", field=spec.name) from None
        minimum: int | Decimal = int(spec.min_value) if spec.min_value is not None else 0
    else:
        try:
            value = Decimal(text.replace(",", "."))
        except InvalidOperation:
            raise ValidationFailure(f"{spec.label} must be a number.", field=spec.name) from None
        if not value.is_finite():
            raise ValidationFailure(f"{spec.label} must be a number.", field=spec.name)
        minimum = Decimal(str(spec.min_value)) if spec.min_value is not None else Decimal("0")
    if value < minimum:
        raise ValidationFailure(f"{spec.label} must be at least {minimum}.", field=spec.name)
    return value


def parse_field(spec: FieldSpec, raw: Any, *, editing: bool = False) -> Any:
    """Convert one raw input value; returns None for an empty optional field."""
    if spec.kind == "choice":
        if raw is None or raw == "":
            if spec.is_required(editing=editing):
                raise ValidationFailure(f"Select {spec.label.lower()}.", field=spec.name)
            return None
        return raw

    text = "" if raw is None else str(raw)
    if spec.kind != "password":
        text = text.strip()
    if not text:
        if spec.is_required(editing=editing):
            raise ValidationFailure(f"{spec.label} is required.", field=spec.name)
        return None

    if spec.kind == "email":
        if not EMAIL_PATTERN.match(text):
            raise ValidationFailure(f"{spec.label} is not a valid email address.", field=spec.name)
        return text
    if spec.kind in ("int", "decimal"):
        value = _parse_number(spec, text)
        # JSON bodies carry decimals as numbers.
        return float(value) if isinstance(value, Decimal) else value
    if spec.kind == "date":
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            raise ValidationFailure(f"{spec.label} must be a date (YYYY-MM-DD).", field=spec.name) from None
    if spec.kind == "datetime":
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationFailure(
                f"{spec.label} must be a date and time (YYYY-MM-DD HH:MM).", field=spec.name
            ) from None
        return parsed.replace(tzinfo=None).isoformat(timespec="seconds")
    return text


def parse_form(
    fields: tuple[FieldSpec, ...] | list[FieldSpec],
    raw_values: dict[str, Any],
    *,
    editing: bool = False,
) -> dict[str, Any]:
    """Validate all fields in order; the first failure is raised."""
    payload: dict[str, Any] = {}
    for spec in fields:
        value = parse_field(spec, raw_values.get(spec.name), editing=editing)
        if value is not None:
            payload[spec.name] = value
    return payload
