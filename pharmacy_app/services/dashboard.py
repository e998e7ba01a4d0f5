"""Dashboard figures assembled from the report and sales endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pharmacy_app.api.client import PharmacyApiClient
from pharmacy_app.models import DashboardStats, Role, Sale, SalesSummary


def _same_day(sale: Sale, day: datetime) -> bool:
    return sale.sale_date is not None and sale.sale_date.date() == day.date()


def _same_month(sale: Sale, day: datetime) -> bool:
    return (
        sale.sale_date is not None
        and sale.sale_date.year == day.year
        and sale.sale_date.month == day.month
    )


def load_dashboard_stats(
    client: PharmacyApiClient,
    role: Role,
    now: datetime | None = None,
) -> DashboardStats:
    """Fetch everything the dashboard shows.

    Admins and pharmacists get backend-computed sales ranges and the monthly
    summary. Cashiers cannot read those endpoints in every deployment, so
    their figures come from the plain sales list filtered locally.
    """
    now = now or datetime.now()
    day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    month_start = day_start.replace(day=1)

    stock = client.get_stock_report()
    expired = client.get_expiry_report()

    if role in (Role.ADMIN, Role.PHARMACIST):
        today_sales = client.list_sales_by_date_range(day_start, now)
        summary = client.get_sales_summary(month_start, now)
    else:
        all_sales = client.list_sales()
        today_sales = [sale for sale in all_sales if _same_day(sale, now)]
        monthly = [sale for sale in all_sales if _same_month(sale, now)]
        summary = SalesSummary(
            total_revenue=sum((sale.total_amount for sale in monthly), Decimal("0")),
            total_profit=sum((sale.profit for sale in monthly), Decimal("0")),
        )

    return DashboardStats(
        total_medicines=len(stock),
        low_stock_items=sum(1 for item in stock if item.needs_attention),
        expired_items=len(expired),
        today_sales=len(today_sales),
        monthly_revenue=summary.total_revenue,
        monthly_profit=summary.total_profit,
    )
