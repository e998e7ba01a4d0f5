"""Payload parsing for users, login responses and records."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from conftest import LOGIN_PAYLOAD
from pharmacy_app.api.errors import InvalidCredentialsOrServer
from pharmacy_app.models import (
    LoginResult,
    Medicine,
    Role,
    Sale,
    User,
    UserAccount,
    format_money,
    parse_decimal,
    parse_list,
)


class TestUser:
    def test_from_storage_roundtrip_keys(self):
        user = User.from_storage({"userId": 7, "email": "a@x.com", "name": "A", "role": "CASHIER"})
        assert user == User(user_id=7, email="a@x.com", name="A", role=Role.CASHIER)
        assert user.to_storage() == {"userId": 7, "email": "a@x.com", "name": "A", "role": "CASHIER"}

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            {"email": "a@x.com", "role": "ADMIN"},
            {"userId": "seven", "role": "ADMIN"},
            {"userId": True, "role": "ADMIN"},
            {"userId": 7, "role": "JANITOR"},
        ],
    )
    def test_unusable_payloads(self, payload):
        assert User.from_storage(payload) is None

    def test_role_is_case_insensitive(self):
        assert Role.parse(" admin ") is Role.ADMIN

    def test_ui_name_falls_back_to_email(self):
        assert User(user_id=1, email="a@x.com", name="", role=Role.ADMIN).ui_name == "a@x.com"


class TestLoginResult:
    def test_complete_payload(self):
        result = LoginResult.from_api(LOGIN_PAYLOAD)
        assert result.token == "t1"
        assert result.user.user_id == 7

    @pytest.mark.parametrize("missing", ["token", "userId", "email", "name", "role"])
    def test_missing_field(self, missing):
        payload = {key: value for key, value in LOGIN_PAYLOAD.items() if key != missing}
        with pytest.raises(InvalidCredentialsOrServer):
            LoginResult.from_api(payload)

    def test_non_object_payload(self):
        with pytest.raises(InvalidCredentialsOrServer):
            LoginResult.from_api("ok")


class TestRecords:
    def test_medicine(self):
        medicine = Medicine.from_api(
            {
                "medicineId": 3,
                "name": "Aspirin",
                "category": "Painkiller",
                "costPrice": "1.20",
                "sellingPrice": 2.5,
                "quantity": 40,
                "expiryDate": "2026-01-31",
                "reorderLevel": 10,
                "supplierId": 2,
                "supplierName": "Acme",
            }
        )
        assert medicine.cost_price == Decimal("1.20")
        assert medicine.selling_price == Decimal("2.5")
        assert medicine.expiry_date == date(2026, 1, 31)
        assert medicine.supplier_id == 2

    def test_sale_dates(self):
        sale = Sale.from_api({"saleId": 1, "saleDate": "2024-05-20T13:45:10", "totalAmount": None})
        assert sale.sale_date == datetime(2024, 5, 20, 13, 45, 10)
        assert sale.total_amount == Decimal("0")

    def test_user_account_accepts_id_alias(self):
        assert UserAccount.from_api({"id": 4, "name": "N", "email": "n@x.com", "role": "ADMIN"}).user_id == 4

    def test_parse_list_skips_non_objects(self):
        items = parse_list([{"supplierId": 1, "name": "S"}, "junk"], lambda payload: payload["name"])
        assert items == ["S"]

    def test_parse_decimal_garbage(self):
        assert parse_decimal("abc") == Decimal("0")

    def test_format_money(self):
        assert format_money(Decimal("1234.5")) == "1,234.50"
