"""Typed models for API payloads."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pharmacy_app.api.errors import InvalidCredentialsOrServer


class Role(str, Enum):
    ADMIN = "ADMIN"
    PHARMACIST = "PHARMACIST"
    CASHIER = "CASHIER"

    @classmethod
    def parse(cls, value: Any) -> "Role | None":
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None


ALL_ROLES: frozenset[Role] = frozenset(Role)

ROLE_LABELS: dict[Role, str] = {
    Role.ADMIN: "Administrator",
    Role.PHARMACIST: "Pharmacist",
    Role.CASHIER: "Cashier",
}

STOCK_STATUS_LABELS: dict[str, str] = {
    "LOW": "Low stock",
    "NORMAL": "In stock",
    "OUT_OF_STOCK": "Out of stock",
}


def parse_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = str(value).replace("Z", "+00:00")
    try:
        return datetime.fromisoformat(parsed)
    except ValueError:
        return None


def parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def parse_decimal(value: Any) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("0")


def parse_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def format_datetime(value: datetime | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%d.%m.%Y %H:%M")


def format_date(value: date | None) -> str:
    if value is None:
        return "-"
    return value.strftime("%d.%m.%Y")


def format_money(value: Decimal) -> str:
    return f"{value:,.2f}"


@dataclass(slots=True, frozen=True)
class User:
    user_id: int
    email: str
    name: str
    role: Role

    @classmethod
    def from_storage(cls, payload: Any) -> "User | None":
        """Rebuild a user from its persisted JSON object, or None when unusable."""
        if not isinstance(payload, dict):
            return None
        user_id = payload.get("userId")
        if user_id in (None, "", 0) or isinstance(user_id, bool):
            return None
        try:
            user_id = int(user_id)
        except (TypeError, ValueError):
            return None
        role = Role.parse(payload.get("role"))
        if role is None:
            return None
        return cls(
            user_id=user_id,
            email=str(payload.get("email") or ""),
            name=str(payload.get("name") or ""),
            role=role,
        )

    @classmethod
    def from_api(cls, payload: Any) -> "User":
        user = cls.from_storage(payload)
        if user is None:
            raise InvalidCredentialsOrServer("Invalid login response from server")
        return user

    def to_storage(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value,
        }

    @property
    def ui_name(self) -> str:
        return (self.name or self.email or "User").strip()


@dataclass(slots=True, frozen=True)
class Session:
    token: str
    user: User
    issued_at_ms: int


@dataclass(slots=True, frozen=True)
class LoginResult:
    token: str
    user: User

    @classmethod
    def from_api(cls, payload: Any) -> "LoginResult":
        if not isinstance(payload, dict):
            raise InvalidCredentialsOrServer("Invalid login response from server")
        missing = [key for key in ("token", "userId", "email", "name", "role") if not payload.get(key)]
        if missing:
            raise InvalidCredentialsOrServer(
                f"Invalid login response from server (missing: {', '.join(missing)})"
            )
        return cls(token=str(payload["token"]), user=User.from_api(payload))


@dataclass(slots=True)
class Medicine:
    medicine_id: int
    name: str
    category: str
    cost_price: Decimal
    selling_price: Decimal
    quantity: int
    expiry_date: date | None
    reorder_level: int
    supplier_id: int | None
    supplier_name: str | None

    @classmethod
    def from_api(cls, payload: dict) -> "Medicine":
        supplier_id = payload.get("supplierId")
        return cls(
            medicine_id=int(payload["medicineId"]),
            name=str(payload["name"]),
            category=str(payload.get("category") or ""),
            cost_price=parse_decimal(payload.get("costPrice")),
            selling_price=parse_decimal(payload.get("sellingPrice")),
            quantity=parse_int(payload.get("quantity")),
            expiry_date=parse_date(payload.get("expiryDate")),
            reorder_level=parse_int(payload.get("reorderLevel")),
            supplier_id=int(supplier_id) if supplier_id is not None else None,
            supplier_name=payload.get("supplierName"),
        )


@dataclass(slots=True)
class Supplier:
    supplier_id: int
    name: str
    contact: str
    email: str

    @classmethod
    def from_api(cls, payload: dict) -> "Supplier":
        return cls(
            supplier_id=int(payload["supplierId"]),
            name=str(payload["name"]),
            contact=str(payload.get("contact") or ""),
            email=str(payload.get("email") or ""),
        )


@dataclass(slots=True)
class Sale:
    sale_id: int
    medicine_name: str
    quantity: int
    total_amount: Decimal
    profit: Decimal
    sale_date: datetime | None
    user_name: str

    @classmethod
    def from_api(cls, payload: dict) -> "Sale":
        return cls(
            sale_id=int(payload["saleId"]),
            medicine_name=str(payload.get("medicineName") or ""),
            quantity=parse_int(payload.get("quantity")),
            total_amount=parse_decimal(payload.get("totalAmount")),
            profit=parse_decimal(payload.get("profit")),
            sale_date=parse_datetime(payload.get("saleDate")),
            user_name=str(payload.get("userName") or ""),
        )


@dataclass(slots=True)
class Purchase:
    purchase_id: int
    medicine_name: str
    supplier_name: str
    quantity: int
    total_cost: Decimal
    purchase_date: datetime | None

    @classmethod
    def from_api(cls, payload: dict) -> "Purchase":
        return cls(
            purchase_id=int(payload["purchaseId"]),
            medicine_name=str(payload.get("medicineName") or ""),
            supplier_name=str(payload.get("supplierName") or ""),
            quantity=parse_int(payload.get("quantity")),
            total_cost=parse_decimal(payload.get("totalCost")),
            purchase_date=parse_datetime(payload.get("purchaseDate")),
        )


@dataclass(slots=True)
class StockReportItem:
    medicine_id: int
    name: str
    category: str
    quantity: int
    reorder_level: int
    cost_price: Decimal
    selling_price: Decimal
    status: str

    @classmethod
    def from_api(cls, payload: dict) -> "StockReportItem":
        return cls(
            medicine_id=int(payload["medicineId"]),
            name=str(payload["name"]),
            category=str(payload.get("category") or ""),
            quantity=parse_int(payload.get("quantity")),
            reorder_level=parse_int(payload.get("reorderLevel")),
            cost_price=parse_decimal(payload.get("costPrice")),
            selling_price=parse_decimal(payload.get("sellingPrice")),
            status=str(payload.get("status") or "NORMAL"),
        )

    @property
    def needs_attention(self) -> bool:
        return self.status in ("LOW", "OUT_OF_STOCK")


@dataclass(slots=True)
class ExpiryReportItem:
    medicine_id: int
    name: str
    category: str
    quantity: int
    expiry_date: date | None

    @classmethod
    def from_api(cls, payload: dict) -> "ExpiryReportItem":
        return cls(
            medicine_id=int(payload["medicineId"]),
            name=str(payload["name"]),
            category=str(payload.get("category") or ""),
            quantity=parse_int(payload.get("quantity")),
            expiry_date=parse_date(payload.get("expiryDate")),
        )


@dataclass(slots=True)
class SalesSummary:
    total_revenue: Decimal
    total_profit: Decimal

    @classmethod
    def from_api(cls, payload: Any) -> "SalesSummary":
        if not isinstance(payload, dict):
            return cls(total_revenue=Decimal("0"), total_profit=Decimal("0"))
        return cls(
            total_revenue=parse_decimal(payload.get("totalRevenue")),
            total_profit=parse_decimal(payload.get("totalProfit")),
        )


@dataclass(slots=True)
class UserAccount:
    user_id: int
    name: str
    email: str
    role: str

    @classmethod
    def from_api(cls, payload: dict) -> "UserAccount":
        return cls(
            user_id=int(payload.get("userId") or payload.get("id")),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            role=str(payload.get("role") or ""),
        )


@dataclass(slots=True)
class DashboardStats:
    total_medicines: int = 0
    low_stock_items: int = 0
    expired_items: int = 0
    today_sales: int = 0
    monthly_revenue: Decimal = Decimal("0")
    monthly_profit: Decimal = Decimal("0")


def parse_list(payload: Any, factory) -> list:
    if not isinstance(payload, list):
        return []
    return [factory(item) for item in payload if isinstance(item, dict)]
