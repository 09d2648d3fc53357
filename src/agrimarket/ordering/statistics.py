"""Order statistics for the administrator dashboard.

Totals are computed over every order; the daily series covers the last
30 days and groups orders by the UTC date they were placed.
"""

from collections import defaultdict
from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain

from agrimarket.ordering.order import Order, OrderStatus, PaymentStatus

DAILY_WINDOW_DAYS = 30


def order_statistics(now: datetime | None = None) -> dict:
    now = now or datetime.now(UTC)
    repo = current_domain.repository_for(Order)
    orders = repo.created_since()

    by_status = {
        status.value: sum(1 for o in orders if o.status == status.value)
        for status in (
            OrderStatus.PENDING,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        )
    }
    by_payment_status = {
        status.value: sum(1 for o in orders if o.payment_status == status.value)
        for status in (PaymentStatus.PENDING, PaymentStatus.COMPLETED)
    }
    revenue = sum(o.amount for o in orders if o.status != OrderStatus.CANCELLED.value)

    return {
        "total_orders": len(orders),
        "orders_by_status": by_status,
        "payments_by_status": by_payment_status,
        "total_revenue": round(revenue, 2),
        "daily_stats": daily_series(orders, now - timedelta(days=DAILY_WINDOW_DAYS), now),
    }


def daily_series(orders, start: datetime, end: datetime) -> list[dict]:
    """Revenue and order count per day, oldest day first. Days without orders are omitted."""
    days = defaultdict(lambda: {"revenue": 0.0, "orders": 0})
    for order in orders:
        created_at = _as_utc(order.created_at)
        if created_at is None or not start <= created_at <= end:
            continue
        day = days[created_at.strftime("%Y-%m-%d")]
        day["revenue"] = round(day["revenue"] + order.amount, 2)
        day["orders"] += 1
    return [{"date": date, **days[date]} for date in sorted(days)]


def customer_order_summaries(customer_ids) -> dict[str, dict]:
    """Order count, amount spent and last order date for each customer."""
    repo = current_domain.repository_for(Order)
    summaries = {}
    for customer_id in customer_ids:
        orders = repo.all_for_customer(customer_id)
        summaries[str(customer_id)] = {
            "order_count": len(orders),
            "total_spent": round(sum(o.amount for o in orders), 2),
            "last_order_date": orders[0].created_at if orders else None,
        }
    return summaries


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
