"""Order aggregate: a snapshot of a checked-out cart.

Line items copy the product's name, image, unit and list price at the
moment the order is placed, so later catalogue edits never change an
existing order. ``amount`` is computed once from those lines.

Lifecycle:
    cash    → pending / pending    → admin confirms payment → completed
    online  → processing / processing → gateway webhook → completed / completed
                                                       ↘ payment failed
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from agrimarket.domain import agrimarket
from agrimarket.ordering.events import (
    OrderPlaced,
    OrderStatusChanged,
    PaymentConfirmed,
    PaymentFailed,
    PaymentReferenceAssigned,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class PaymentType(Enum):
    ONLINE = "online"
    CASH = "cash"


class PaymentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


# Values an administrator may set by hand
ADMIN_ORDER_STATUSES = {
    OrderStatus.PENDING.value,
    OrderStatus.PROCESSING.value,
    OrderStatus.SHIPPED.value,
    OrderStatus.DELIVERED.value,
    OrderStatus.CANCELLED.value,
}
ADMIN_PAYMENT_STATUSES = {
    PaymentStatus.PENDING.value,
    PaymentStatus.COMPLETED.value,
    PaymentStatus.FAILED.value,
    PaymentStatus.REFUNDED.value,
}

DEFAULT_UNIT = "pcs"


def order_amount(items) -> float:
    return round(sum(i.price * i.quantity for i in items), 2)


def status_changes(status=None, payment_status=None) -> dict:
    """Validate an administrator's status update and return the fields to set."""
    changes = {}
    if status:
        if status not in ADMIN_ORDER_STATUSES:
            allowed = ", ".join(s.value for s in OrderStatus if s.value in ADMIN_ORDER_STATUSES)
            raise ValidationError({"status": [f"Status must be one of: {allowed}"]})
        changes["status"] = status
    if payment_status:
        if payment_status not in ADMIN_PAYMENT_STATUSES:
            allowed = ", ".join(s.value for s in PaymentStatus if s.value in ADMIN_PAYMENT_STATUSES)
            raise ValidationError({"payment_status": [f"Payment status must be one of: {allowed}"]})
        changes["payment_status"] = payment_status
    if not changes:
        raise ValidationError({"status": ["No valid update fields provided"]})
    return changes


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@agrimarket.entity(part_of="Order")
class OrderItem:
    """A product line frozen at checkout time."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit = String(max_length=50, default=DEFAULT_UNIT)
    price = Float(required=True, min_value=0.0)
    image = String(max_length=1000)
    name = String(max_length=255)

    @property
    def subtotal(self) -> str:
        return f"{self.price * self.quantity:.2f}"


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@agrimarket.aggregate(limit=-1)
class Order:
    customer_id = Identifier(required=True)
    customer_name = String(max_length=255)
    customer_email = String(max_length=255)
    items = HasMany(OrderItem)
    address_id = Identifier(required=True)
    amount = Float(required=True, min_value=0.0)
    payment_type = String(choices=PaymentType, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    tx_ref = String(max_length=255)
    transaction_id = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def amount_matches_line_items(self):
        if self.items and abs(self.amount - order_amount(self.items)) > 0.005:
            raise ValidationError({"amount": ["Order amount must equal the sum of its line items"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id, address_id, payment_type, items_data, customer_name=None, customer_email=None):
        """Build an order from ``items_data``.

        Each entry is a dict with ``product_id``, ``quantity``, ``price`` and
        optionally ``unit``, ``image`` and ``name``.
        """
        payment_type = str(payment_type).lower()
        if payment_type not in {t.value for t in PaymentType}:
            raise ValidationError({"payment_type": ['Payment type must be either "online" or "cash"']})

        items = [
            OrderItem(
                product_id=data["product_id"],
                quantity=data["quantity"],
                unit=data.get("unit") or DEFAULT_UNIT,
                price=data["price"],
                image=data.get("image"),
                name=data.get("name"),
            )
            for data in items_data
        ]
        if not items:
            raise ValidationError({"items": ["Cart is empty, cannot place order"]})

        initial = (
            PaymentStatus.PROCESSING.value if payment_type == PaymentType.ONLINE.value else PaymentStatus.PENDING.value
        )
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            customer_name=customer_name,
            customer_email=customer_email,
            items=items,
            address_id=address_id,
            amount=order_amount(items),
            payment_type=payment_type,
            payment_status=initial,
            status=initial,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                customer_id=order.customer_id,
                amount=order.amount,
                payment_type=order.payment_type,
                item_count=len(items),
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def assign_payment_reference(self, tx_ref):
        self.tx_ref = tx_ref
        self.updated_at = datetime.now(UTC)
        self.raise_(PaymentReferenceAssigned(order_id=self.id, tx_ref=tx_ref))

    def confirm_gateway_payment(self, transaction_id):
        """Mark an online order as paid and completed.

        Sets absolute values, so a replayed confirmation ends in the same state.
        """
        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.COMPLETED.value
        self.status = OrderStatus.COMPLETED.value
        self.transaction_id = str(transaction_id) if transaction_id is not None else None
        self.updated_at = now
        self.raise_(
            PaymentConfirmed(
                order_id=self.id,
                payment_type=self.payment_type,
                transaction_id=self.transaction_id,
                confirmed_at=now,
            )
        )

    def mark_payment_failed(self):
        self.payment_status = PaymentStatus.FAILED.value
        self.updated_at = datetime.now(UTC)
        self.raise_(PaymentFailed(order_id=self.id, tx_ref=self.tx_ref))

    def confirm_cash_payment(self):
        if self.payment_type != PaymentType.CASH.value:
            raise ValidationError({"payment_type": ["Only orders with cash payment type can be confirmed"]})

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.COMPLETED.value
        self.updated_at = now
        self.raise_(
            PaymentConfirmed(
                order_id=self.id,
                payment_type=self.payment_type,
                transaction_id=self.transaction_id,
                confirmed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update_status(self, status=None, payment_status=None):
        """Set the order and/or payment status to administrator-allowed values."""
        changes = status_changes(status, payment_status)
        for field_name, value in changes.items():
            setattr(self, field_name, value)

        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                status=self.status,
                payment_status=self.payment_status,
                changed_at=now,
            )
        )
