"""Declarative descriptions of the resource table pages."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from pharmacy_app.api.client import PharmacyApiClient
from pharmacy_app.forms import FieldSpec
from pharmacy_app.models import (
    ALL_ROLES,
    ROLE_LABELS,
    Medicine,
    Role,
    format_date,
    format_datetime,
    format_money,
)
from pharmacy_app.routing import MANAGEMENT_ROLES, Route

OptionLoader = Callable[[PharmacyApiClient], list[tuple[str, Any]]]


@dataclass(slots=True, frozen=True)
class Column:
    header: str
    render: Callable[[Any], str]
    width: int = 140


@dataclass(slots=True, frozen=True)
class ResourcePage:
    route: Route
    title: str
    hint: str
    columns: tuple[Column, ...]
    fetch: Callable[[PharmacyApiClient], list]
    record_id: Callable[[Any], int]
    form_fields: tuple[FieldSpec, ...] = ()
    create: Callable[[PharmacyApiClient, dict[str, Any]], Any] | None = None
    update: Callable[[PharmacyApiClient, int, dict[str, Any]], Any] | None = None
    delete: Callable[[PharmacyApiClient, int], None] | None = None
    record_values: Callable[[Any], dict[str, Any]] | None = None
    create_roles: frozenset[Role] = frozenset()
    manage_roles: frozenset[Role] = frozenset()
    option_loaders: dict[str, OptionLoader] = field(default_factory=dict)
    create_label: str = "Add"

    def can_create(self, role: Role | None) -> bool:
        return self.create is not None and role in self.create_roles

    def can_edit(self, role: Role | None) -> bool:
        return self.update is not None and role in self.manage_roles

    def can_delete(self, role: Role | None) -> bool:
        return self.delete is not None and role in self.manage_roles

    def load_options(self, client: PharmacyApiClient) -> dict[str, list[tuple[str, Any]]]:
        return {key: loader(client) for key, loader in self.option_loaders.items()}


def _supplier_options(client: PharmacyApiClient) -> list[tuple[str, Any]]:
    return [(supplier.name, supplier.supplier_id) for supplier in client.list_suppliers()]


def _medicine_options(client: PharmacyApiClient) -> list[tuple[str, Any]]:
    return [
        (f"{medicine.name} ({medicine.quantity} in stock)", medicine.medicine_id)
        for medicine in client.list_medicines()
    ]


def _medicine_values(medicine: Medicine) -> dict[str, Any]:
    return {
        "name": medicine.name,
        "category": medicine.category,
        "costPrice": str(medicine.cost_price),
        "sellingPrice": str(medicine.selling_price),
        "quantity": str(medicine.quantity),
        "expiryDate": medicine.expiry_date.isoformat() if medicine.expiry_date else "",
        "reorderLevel": str(medicine.reorder_level),
        "supplierId": medicine.supplier_id,
    }


MEDICINES_PAGE = ResourcePage(
    route=Route.MEDICINES,
    title="Medicines",
    hint="Medicine catalogue with current stock and expiry dates.",
    columns=(
        Column("Name", lambda m: m.name, 180),
        Column("Category", lambda m: m.category or "-"),
        Column("Cost", lambda m: format_money(m.cost_price), 100),
        Column("Price", lambda m: format_money(m.selling_price), 100),
        Column("Qty", lambda m: str(m.quantity), 70),
        Column("Reorder at", lambda m: str(m.reorder_level), 90),
        Column("Expires", lambda m: format_date(m.expiry_date), 110),
        Column("Supplier", lambda m: m.supplier_name or "-", 160),
    ),
    fetch=lambda client: client.list_medicines(),
    record_id=lambda m: m.medicine_id,
    form_fields=(
        FieldSpec("name", "Name"),
        FieldSpec("category", "Category"),
        FieldSpec("costPrice", "Cost price", kind="decimal"),
        FieldSpec("sellingPrice", "Selling price", kind="decimal"),
        FieldSpec("quantity", "Quantity", kind="int"),
        FieldSpec("expiryDate", "Expiry date", kind="date", placeholder="YYYY-MM-DD"),
        FieldSpec("reorderLevel", "Reorder level", kind="int"),
        FieldSpec("supplierId", "Supplier", kind="choice", options_key="suppliers"),
    ),
    create=lambda client, payload: client.create_medicine(payload),
    update=lambda client, record_id, payload: client.update_medicine(record_id, payload),
    delete=lambda client, record_id: client.delete_medicine(record_id),
    record_values=_medicine_values,
    create_roles=MANAGEMENT_ROLES,
    manage_roles=MANAGEMENT_ROLES,
    option_loaders={"suppliers": _supplier_options},
    create_label="Add medicine",
)

SUPPLIERS_PAGE = ResourcePage(
    route=Route.SUPPLIERS,
    title="Suppliers",
    hint="Companies the pharmacy buys stock from.",
    columns=(
        Column("Name", lambda s: s.name, 200),
        Column("Contact", lambda s: s.contact or "-", 180),
        Column("Email", lambda s: s.email or "-", 220),
    ),
    fetch=lambda client: client.list_suppliers(),
    record_id=lambda s: s.supplier_id,
    form_fields=(
        FieldSpec("name", "Name"),
        FieldSpec("contact", "Contact"),
        FieldSpec("email", "Email", kind="email"),
    ),
    create=lambda client, payload: client.create_supplier(payload),
    update=lambda client, record_id, payload: client.update_supplier(record_id, payload),
    delete=lambda client, record_id: client.delete_supplier(record_id),
    record_values=lambda s: {"name": s.name, "contact": s.contact, "email": s.email},
    create_roles=MANAGEMENT_ROLES,
    manage_roles=MANAGEMENT_ROLES,
    create_label="Add supplier",
)


def _sale_columns() -> tuple[Column, ...]:
    return (
        Column("Date", lambda s: format_datetime(s.sale_date), 140),
        Column("Medicine", lambda s: s.medicine_name, 200),
        Column("Qty", lambda s: str(s.quantity), 70),
        Column("Total", lambda s: format_money(s.total_amount), 110),
        Column("Profit", lambda s: format_money(s.profit), 110),
        Column("Cashier", lambda s: s.user_name or "-", 150),
    )


def _newest_first(items: list, key: Callable[[Any], datetime | None]) -> list:
    return sorted(items, key=lambda item: key(item) or datetime.min, reverse=True)


SALES_PAGE = ResourcePage(
    route=Route.SALES,
    title="Sales",
    hint="Recorded sales. Totals and profit are calculated by the server.",
    columns=_sale_columns(),
    fetch=lambda client: _newest_first(client.list_sales(), lambda s: s.sale_date),
    record_id=lambda s: s.sale_id,
    form_fields=(
        FieldSpec("medicineId", "Medicine", kind="choice", options_key="medicines"),
        FieldSpec("quantity", "Quantity", kind="int", min_value=1),
    ),
    create=lambda client, payload: client.create_sale(
        medicine_id=int(payload["medicineId"]), quantity=int(payload["quantity"])
    ),
    create_roles=ALL_ROLES,
    option_loaders={"medicines": _medicine_options},
    create_label="New sale",
)

PURCHASES_PAGE = ResourcePage(
    route=Route.PURCHASES,
    title="Purchases",
    hint="Stock received from suppliers.",
    columns=(
        Column("Date", lambda p: format_datetime(p.purchase_date), 140),
        Column("Medicine", lambda p: p.medicine_name, 200),
        Column("Supplier", lambda p: p.supplier_name, 180),
        Column("Qty", lambda p: str(p.quantity), 70),
        Column("Total cost", lambda p: format_money(p.total_cost), 110),
    ),
    fetch=lambda client: _newest_first(client.list_purchases(), lambda p: p.purchase_date),
    record_id=lambda p: p.purchase_id,
    form_fields=(
        FieldSpec("medicineId", "Medicine", kind="choice", options_key="medicines"),
        FieldSpec("supplierId", "Supplier", kind="choice", options_key="suppliers"),
        FieldSpec("quantity", "Quantity", kind="int", min_value=1),
        FieldSpec("totalCost", "Total cost", kind="decimal"),
        FieldSpec("purchaseDate", "Purchase date", kind="datetime", placeholder="YYYY-MM-DD HH:MM"),
    ),
    create=lambda client, payload: client.create_purchase(payload),
    create_roles=MANAGEMENT_ROLES,
    option_loaders={"medicines": _medicine_options, "suppliers": _supplier_options},
    create_label="Record purchase",
)

USERS_PAGE = ResourcePage(
    route=Route.USERS,
    title="Users",
    hint="Accounts that can sign in to the system.",
    columns=(
        Column("Name", lambda u: u.name, 180),
        Column("Email", lambda u: u.email, 220),
        Column("Role", lambda u: ROLE_LABELS.get(Role.parse(u.role), u.role), 140),
    ),
    fetch=lambda client: client.list_users(),
    record_id=lambda u: u.user_id,
    form_fields=(
        FieldSpec("name", "Name"),
        FieldSpec("email", "Email", kind="email"),
        FieldSpec("password", "Password", kind="password", required_on_edit=False,
                  placeholder="Leave empty to keep the current password"),
        FieldSpec(
            "role",
            "Role",
            kind="choice",
            choices=tuple((ROLE_LABELS[role], role.value) for role in Role),
        ),
    ),
    create=lambda client, payload: client.create_user(payload),
    update=lambda client, record_id, payload: client.update_user(record_id, payload),
    delete=lambda client, record_id: client.delete_user(record_id),
    record_values=lambda u: {"name": u.name, "email": u.email, "role": u.role},
    create_roles=frozenset({Role.ADMIN}),
    manage_roles=frozenset({Role.ADMIN}),
    create_label="Add user",
)

RESOURCE_PAGES: tuple[ResourcePage, ...] = (
    MEDICINES_PAGE,
    SUPPLIERS_PAGE,
    SALES_PAGE,
    PURCHASES_PAGE,
    USERS_PAGE,
)
