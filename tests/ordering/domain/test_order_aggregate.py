"""Tests for the Order aggregate: creation, payment and administration."""

import pytest
from agrimarket.ordering.events import OrderPlaced, OrderStatusChanged, PaymentConfirmed, PaymentFailed
from agrimarket.ordering.order import (
    DEFAULT_UNIT,
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    order_amount,
    status_changes,
)
from protean.exceptions import ValidationError

ITEMS = [
    {"product_id": "prod-001", "quantity": 2, "unit": "kg", "price": 2500.0, "name": "Tomatoes"},
    {"product_id": "prod-002", "quantity": 1, "price": 800.0},
]


def _order(payment_type="cash", items=None):
    return Order.create(
        customer_id="cust-001",
        address_id="addr-001",
        payment_type=payment_type,
        items_data=items if items is not None else ITEMS,
        customer_name="Aline Uwase",
        customer_email="aline@example.com",
    )


class TestOrderCreation:
    def test_cash_order_starts_pending(self):
        order = _order("cash")
        assert order.status == OrderStatus.PENDING.value
        assert order.payment_status == PaymentStatus.PENDING.value

    def test_online_order_starts_processing(self):
        order = _order("online")
        assert order.status == OrderStatus.PROCESSING.value
        assert order.payment_status == PaymentStatus.PROCESSING.value

    def test_payment_type_is_case_insensitive(self):
        assert _order("CASH").payment_type == "cash"

    def test_amount_is_sum_of_lines(self):
        assert _order().amount == 5800.0

    def test_missing_unit_defaults(self):
        order = _order()
        units = {str(i.product_id): i.unit for i in order.items}
        assert units == {"prod-001": "kg", "prod-002": DEFAULT_UNIT}

    def test_invalid_payment_type(self):
        with pytest.raises(ValidationError) as exc:
            _order("card")
        assert 'Payment type must be either "online" or "cash"' in exc.value.messages["payment_type"]

    def test_empty_items(self):
        with pytest.raises(ValidationError):
            _order(items=[])

    def test_create_raises_event(self):
        event = _order()._events[-1]
        assert isinstance(event, OrderPlaced)
        assert event.amount == 5800.0
        assert event.item_count == 2


class TestOrderItem:
    def test_subtotal_is_formatted(self):
        item = OrderItem(product_id="prod-001", quantity=3, price=333.333)
        assert item.subtotal == "1000.00"

    def test_order_amount(self):
        items = [OrderItem(product_id="p1", quantity=2, price=0.1), OrderItem(product_id="p2", quantity=1, price=0.2)]
        assert order_amount(items) == 0.4


class TestGatewayPayment:
    def test_confirm_completes_order(self):
        order = _order("online")
        order.confirm_gateway_payment(123456)
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.status == OrderStatus.COMPLETED.value
        assert order.transaction_id == "123456"

    def test_confirm_is_idempotent(self):
        order = _order("online")
        order.confirm_gateway_payment("tx-1")
        order.confirm_gateway_payment("tx-1")
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.status == OrderStatus.COMPLETED.value

    def test_confirm_raises_event(self):
        order = _order("online")
        order.confirm_gateway_payment("tx-1")
        assert isinstance(order._events[-1], PaymentConfirmed)

    def test_failure_marks_payment_failed(self):
        order = _order("online")
        order.assign_payment_reference("ORDER-1-1700000000000")
        order.mark_payment_failed()
        assert order.payment_status == PaymentStatus.FAILED.value
        assert order.status == OrderStatus.PROCESSING.value
        event = order._events[-1]
        assert isinstance(event, PaymentFailed)
        assert event.tx_ref == "ORDER-1-1700000000000"


class TestCashPayment:
    def test_confirm_cash_payment(self):
        order = _order("cash")
        order.confirm_cash_payment()
        assert order.payment_status == PaymentStatus.COMPLETED.value
        assert order.status == OrderStatus.PENDING.value

    def test_online_order_cannot_be_confirmed_as_cash(self):
        order = _order("online")
        with pytest.raises(ValidationError) as exc:
            order.confirm_cash_payment()
        assert "Only orders with cash payment type can be confirmed" in exc.value.messages["payment_type"]
        assert order.payment_status == PaymentStatus.PROCESSING.value


class TestStatusUpdate:
    def test_update_status(self):
        order = _order()
        order.update_status(status="shipped")
        assert order.status == "shipped"
        assert order.payment_status == "pending"

    def test_update_both(self):
        order = _order()
        order.update_status(status="delivered", payment_status="completed")
        assert (order.status, order.payment_status) == ("delivered", "completed")
        assert isinstance(order._events[-1], OrderStatusChanged)

    def test_completed_is_not_an_admin_status(self):
        with pytest.raises(ValidationError) as exc:
            _order().update_status(status="completed")
        assert exc.value.messages["status"] == ["Status must be one of: pending, processing, shipped, delivered, cancelled"]

    def test_processing_is_not_an_admin_payment_status(self):
        with pytest.raises(ValidationError) as exc:
            status_changes(payment_status="processing")
        assert exc.value.messages["payment_status"] == [
            "Payment status must be one of: pending, completed, failed, refunded"
        ]

    def test_nothing_to_update(self):
        with pytest.raises(ValidationError) as exc:
            status_changes()
        assert exc.value.messages["status"] == ["No valid update fields provided"]
