"""HTTP client and bearer-token interceptor."""

from datetime import datetime
from decimal import Decimal

import pytest
import requests

from conftest import make_response
from pharmacy_app.api.errors import (
    SESSION_EXPIRED_MESSAGE,
    ApiError,
    AuthFailure,
    ConflictFailure,
    ConnectivityFailure,
    ForbiddenFailure,
    NotFoundFailure,
    ServerFailure,
)


def sent(http) -> dict:
    return http.request.call_args.kwargs


class TestInterceptorHeaders:
    def test_no_token_means_no_authorization_header(self, interceptor):
        headers, token = interceptor.prepare_headers({"Authorization": "Bearer stale"})
        assert token is None
        assert "Authorization" not in headers

    def test_token_is_attached_as_bearer(self, interceptor):
        interceptor.set_token_provider(lambda: "abc")
        headers, token = interceptor.prepare_headers()
        assert token == "abc"
        assert headers["Authorization"] == "Bearer abc"

    def test_empty_token_counts_as_absent(self, interceptor):
        interceptor.set_token_provider(lambda: "")
        assert interceptor.current_token() is None


class TestAuthFailureSignal:
    def test_emitted_once_for_authenticated_401(self, client, http, interceptor):
        interceptor.set_token_provider(lambda: "abc")
        received = []
        interceptor.auth_failed.connect(lambda message, token: received.append((message, token)))
        http.request.return_value = make_response(401, text="")

        with pytest.raises(AuthFailure):
            client.list_suppliers()

        assert received == [(SESSION_EXPIRED_MESSAGE, "abc")]

    def test_backend_message_is_forwarded(self, client, http, interceptor):
        interceptor.set_token_provider(lambda: "abc")
        received = []
        interceptor.auth_failed.connect(lambda message, token: received.append(message))
        http.request.return_value = make_response(401, {"error": "Token expired", "message": "JWT expired at 10:00"})

        with pytest.raises(AuthFailure) as excinfo:
            client.list_users()

        assert excinfo.value.code == "Token expired"
        assert received == ["JWT expired at 10:00"]

    def test_not_emitted_without_token(self, client, http, interceptor):
        received = []
        interceptor.auth_failed.connect(lambda message, token: received.append(message))
        http.request.return_value = make_response(401, {"message": "Bad credentials"})

        with pytest.raises(AuthFailure):
            client.login(email="a@x.com", password="nope")

        assert received == []

    def test_not_emitted_for_forbidden(self, client, http, interceptor):
        interceptor.set_token_provider(lambda: "abc")
        received = []
        interceptor.auth_failed.connect(lambda message, token: received.append(message))
        http.request.return_value = make_response(403, {"message": "Access denied"})

        with pytest.raises(ForbiddenFailure):
            client.list_users()

        assert received == []


class TestConnectivity:
    def test_connection_error(self, client, http, interceptor):
        warnings = []
        interceptor.connectivity_failed.connect(warnings.append)
        http.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(ConnectivityFailure) as excinfo:
            client.list_medicines()

        assert excinfo.value.timed_out is False
        assert warnings == ["Unable to connect to the server. Please check your internet connection."]

    def test_requests_are_not_retried(self, client, http):
        http.request.side_effect = requests.Timeout()

        with pytest.raises(ConnectivityFailure):
            client.list_medicines()

        assert http.request.call_count == 1

    def test_timeout_is_passed_to_requests(self, client, http):
        http.request.return_value = make_response(200, [])
        client.list_medicines()
        assert sent(http)["timeout"] == 10.0


class TestErrorClassification:
    @pytest.mark.parametrize(
        ("status", "error_type"),
        [
            (403, ForbiddenFailure),
            (404, NotFoundFailure),
            (409, ConflictFailure),
            (500, ServerFailure),
            (503, ServerFailure),
            (400, ApiError),
        ],
    )
    def test_status_maps_to_error_type(self, client, http, status, error_type):
        http.request.return_value = make_response(status, {"message": "nope"})

        with pytest.raises(error_type) as excinfo:
            client.get_medicine(1)

        assert excinfo.value.status_code == status
        assert excinfo.value.message == "nope"

    def test_plain_text_body_becomes_message(self, client, http):
        http.request.return_value = make_response(500, text="Internal failure")

        with pytest.raises(ServerFailure) as excinfo:
            client.list_sales()

        assert excinfo.value.message == "Internal failure"


class TestEndpoints:
    def test_urls_and_authorization(self, client, http, interceptor):
        interceptor.set_token_provider(lambda: "abc")
        http.request.return_value = make_response(200, [])

        client.list_purchases()

        assert sent(http)["method"] == "GET"
        assert sent(http)["url"] == "http://pharmacy.test/api/purchases"
        assert sent(http)["headers"]["Authorization"] == "Bearer abc"

    def test_create_sale_body(self, client, http):
        http.request.return_value = make_response(
            201,
            {"saleId": 5, "medicineName": "Aspirin", "quantity": 2, "totalAmount": 10.5, "profit": 2.5},
        )

        sale = client.create_sale(medicine_id=3, quantity=2)

        assert sent(http)["json"] == {"medicineId": 3, "quantity": 2}
        assert sale.sale_id == 5
        assert sale.total_amount == Decimal("10.5")

    def test_sales_summary_range_params(self, client, http):
        http.request.return_value = make_response(200, {"totalRevenue": 120, "totalProfit": 30})

        summary = client.get_sales_summary(datetime(2024, 5, 1), datetime(2024, 5, 20, 13, 45, 10, 999))

        assert sent(http)["url"] == "http://pharmacy.test/api/sales/summary"
        assert sent(http)["params"] == {"startDate": "2024-05-01T00:00:00", "endDate": "2024-05-20T13:45:10"}
        assert summary.total_revenue == Decimal("120")
        assert summary.total_profit == Decimal("30")

    def test_expiring_defaults_to_thirty_days(self, client, http):
        http.request.return_value = make_response(200, [])

        client.get_expiring_medicines()

        assert sent(http)["url"] == "http://pharmacy.test/api/reports/expiring"
        assert sent(http)["params"] == {"days": 30}

    def test_delete_accepts_no_content(self, client, http):
        http.request.return_value = make_response(204)

        assert client.delete_medicine(4) is None
        assert sent(http)["method"] == "DELETE"
        assert sent(http)["url"] == "http://pharmacy.test/api/medicines/4"

    def test_stock_report_items(self, client, http):
        http.request.return_value = make_response(
            200,
            [
                {"medicineId": 1, "name": "Aspirin", "quantity": 0, "reorderLevel": 10, "status": "OUT_OF_STOCK"},
                {"medicineId": 2, "name": "Ibuprofen", "quantity": 50, "reorderLevel": 10, "status": "NORMAL"},
            ],
        )

        items = client.get_stock_report()

        assert [item.needs_attention for item in items] == [True, False]

    def test_non_list_payload_yields_empty_list(self, client, http):
        http.request.return_value = make_response(200, {"unexpected": True})
        assert client.list_suppliers() == []
