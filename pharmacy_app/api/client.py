"""HTTP client for the pharmacy REST API."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

import requests

from pharmacy_app.api.errors import ApiError, ConnectivityFailure, classify_http_error
from pharmacy_app.api.interceptor import AuthInterceptor
from pharmacy_app.models import (
    ExpiryReportItem,
    LoginResult,
    Medicine,
    Purchase,
    Sale,
    SalesSummary,
    StockReportItem,
    Supplier,
    UserAccount,
    parse_list,
)

logger = logging.getLogger(__name__)


def _format_range_bound(value: datetime | str) -> str:
    if isinstance(value, datetime):
        return value.replace(microsecond=0, tzinfo=None).isoformat()
    return str(value)


class PharmacyApiClient:
    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 10.0,
        interceptor: AuthInterceptor | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.interceptor = interceptor or AuthInterceptor()
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": "pharmacy-app/0.1.0",
            }
        )

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        *,
        expected: tuple[int, ...] = (200,),
        **kwargs: Any,
    ) -> Any:
        headers, token = self.interceptor.prepare_headers(kwargs.pop("headers", None))
        try:
            response = self.session.request(
                method=method,
                url=self._url(path),
                headers=headers,
                timeout=self.timeout_seconds,
                **kwargs,
            )
        except requests.Timeout as exc:
            raise self.interceptor.inspect_error(
                ConnectivityFailure("Request timed out.", timed_out=True),
                token=token,
            ) from exc
        except requests.RequestException as exc:
            raise self.interceptor.inspect_error(
                ConnectivityFailure("Unable to connect to the pharmacy server."),
                token=token,
            ) from exc

        if response.status_code not in expected:
            error = self._build_error(response)
            logger.warning("%s %s failed: %s", method, path, error)
            raise self.interceptor.inspect_error(error, token=token)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            return response.text

    def _build_error(self, response: requests.Response) -> ApiError:
        try:
            payload: Any = response.json()
        except ValueError:
            payload = response.text or ""
        return classify_http_error(response.status_code, payload)

    # auth

    def login(self, *, email: str, password: str) -> LoginResult:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return LoginResult.from_api(data)

    def register(self, *, name: str, email: str, password: str, role: str) -> dict[str, Any]:
        payload = {"name": name, "email": email, "password": password, "role": role}
        return self._request("POST", "/auth/register", json=payload, expected=(200, 201))

    # users

    def list_users(self) -> list[UserAccount]:
        return parse_list(self._request("GET", "/users"), UserAccount.from_api)

    def get_user(self, user_id: int) -> UserAccount:
        return UserAccount.from_api(self._request("GET", f"/users/{user_id}"))

    def create_user(self, payload: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/users", json=payload, expected=(200, 201))

    def update_user(self, user_id: int, payload: dict[str, Any]) -> UserAccount:
        return UserAccount.from_api(self._request("PUT", f"/users/{user_id}", json=payload))

    def delete_user(self, user_id: int) -> None:
        self._request("DELETE", f"/users/{user_id}", expected=(200, 204))

    # suppliers

    def list_suppliers(self) -> list[Supplier]:
        return parse_list(self._request("GET", "/suppliers"), Supplier.from_api)

    def get_supplier(self, supplier_id: int) -> Supplier:
        return Supplier.from_api(self._request("GET", f"/suppliers/{supplier_id}"))

    def create_supplier(self, payload: dict[str, Any]) -> Supplier:
        return Supplier.from_api(self._request("POST", "/suppliers", json=payload, expected=(200, 201)))

    def update_supplier(self, supplier_id: int, payload: dict[str, Any]) -> Supplier:
        return Supplier.from_api(self._request("PUT", f"/suppliers/{supplier_id}", json=payload))

    def delete_supplier(self, supplier_id: int) -> None:
        self._request("DELETE", f"/suppliers/{supplier_id}", expected=(200, 204))

    # medicines

    def list_medicines(self) -> list[Medicine]:
        return parse_list(self._request("GET", "/medicines"), Medicine.from_api)

    def get_medicine(self, medicine_id: int) -> Medicine:
        return Medicine.from_api(self._request("GET", f"/medicines/{medicine_id}"))

    def create_medicine(self, payload: dict[str, Any]) -> Medicine:
        return Medicine.from_api(self._request("POST", "/medicines", json=payload, expected=(200, 201)))

    def update_medicine(self, medicine_id: int, payload: dict[str, Any]) -> Medicine:
        return Medicine.from_api(self._request("PUT", f"/medicines/{medicine_id}", json=payload))

    def delete_medicine(self, medicine_id: int) -> None:
        self._request("DELETE", f"/medicines/{medicine_id}", expected=(200, 204))

    # sales

    def list_sales(self) -> list[Sale]:
        return parse_list(self._request("GET", "/sales"), Sale.from_api)

    def create_sale(self, *, medicine_id: int, quantity: int) -> Sale:
        payload = {"medicineId": medicine_id, "quantity": quantity}
        return Sale.from_api(self._request("POST", "/sales", json=payload, expected=(200, 201)))

    def list_sales_by_date_range(self, start: datetime | str, end: datetime | str) -> list[Sale]:
        params = {"startDate": _format_range_bound(start), "endDate": _format_range_bound(end)}
        return parse_list(self._request("GET", "/sales/date-range", params=params), Sale.from_api)

    def get_sales_summary(self, start: datetime | str, end: datetime | str) -> SalesSummary:
        params = {"startDate": _format_range_bound(start), "endDate": _format_range_bound(end)}
        return SalesSummary.from_api(self._request("GET", "/sales/summary", params=params))

    # purchases

    def list_purchases(self) -> list[Purchase]:
        return parse_list(self._request("GET", "/purchases"), Purchase.from_api)

    def create_purchase(self, payload: dict[str, Any]) -> Purchase:
        return Purchase.from_api(self._request("POST", "/purchases", json=payload, expected=(200, 201)))

    def list_purchases_by_date_range(self, start: datetime | str, end: datetime | str) -> list[Purchase]:
        params = {"startDate": _format_range_bound(start), "endDate": _format_range_bound(end)}
        return parse_list(self._request("GET", "/purchases/date-range", params=params), Purchase.from_api)

    # reports

    def get_stock_report(self) -> list[StockReportItem]:
        return parse_list(self._request("GET", "/reports/stock"), StockReportItem.from_api)

    def get_expiry_report(self) -> list[ExpiryReportItem]:
        return parse_list(self._request("GET", "/reports/expiry"), ExpiryReportItem.from_api)

    def get_expiring_medicines(self, days: int = 30) -> list[Medicine]:
        data = self._request("GET", "/reports/expiring", params={"days": days})
        return parse_list(data, Medicine.from_api)
