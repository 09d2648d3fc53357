"""Order placement: checkout of a customer's cart.

``OrderPlacement`` coordinates the steps of a checkout, each issued as its
own command so every step commits on its own:

    1. CreateOrder                 → the order is persisted
    2. RecordNotification          → admin log entry + live ``newOrder`` push
                                     (best effort, failures are logged)
    3. EmptyCartAfterCheckout      → the cart is emptied
    4. (online only) gateway.create_payment
         success → AssignPaymentReference
         failure → DiscardOrder, then PaymentInitiationError

The cart is emptied before the gateway is contacted, so a failed online
payment leaves the customer with no order and an empty cart.
"""

import re
import time
from dataclasses import dataclass

import structlog
from protean.utils.globals import current_domain

from agrimarket.identity.address import Address
from agrimarket.notifications.management import RecordNotification
from agrimarket.notifications.notification import NotificationType
from agrimarket.notifications.channel import AdminChannel
from agrimarket.ordering.cart_items import EmptyCartAfterCheckout
from agrimarket.ordering.creation import AssignPaymentReference, CreateOrder, DiscardOrder
from agrimarket.ordering.order import Order, PaymentType
from agrimarket.payments.port import PaymentGateway, PaymentRequest
from agrimarket.settings import MarketSettings

logger = structlog.get_logger(__name__)

FALLBACK_EMAIL = "customer@example.com"
FALLBACK_PHONE = "0780000001"
FALLBACK_NAME = "Customer"


class PaymentInitiationError(Exception):
    """The gateway refused to open a checkout; the order has been discarded."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Payment initiation failed: {reason}")


@dataclass
class PlacedOrder:
    order: Order
    payment_url: str | None = None


def payment_reference(order_id) -> str:
    return f"ORDER-{order_id}-{int(time.time() * 1000)}"


def new_order_message(customer_name, item_count, amount) -> str:
    return f"New order placed by {customer_name} for {item_count} item(s) worth RWF {amount:.2f}"


class OrderPlacement:
    def __init__(self, gateway: PaymentGateway, channel: AdminChannel, settings: MarketSettings) -> None:
        self.gateway = gateway
        self.channel = channel
        self.settings = settings

    def place(self, customer_id, address_id, payment_type, callback_url=None) -> PlacedOrder:
        order_id = current_domain.process(
            CreateOrder(customer_id=customer_id, address_id=address_id, payment_type=payment_type),
            asynchronous=False,
        )
        order = current_domain.repository_for(Order).get(order_id)

        self._notify_admins(order)
        current_domain.process(EmptyCartAfterCheckout(customer_id=customer_id), asynchronous=False)

        if order.payment_type == PaymentType.CASH.value:
            return PlacedOrder(order=order)
        return self._initiate_payment(order, callback_url)

    def _notify_admins(self, order: Order) -> None:
        message = new_order_message(order.customer_name, len(order.items), order.amount)
        try:
            notification = current_domain.process(
                RecordNotification(
                    order_id=order.id,
                    user_id=order.customer_id,
                    message=message,
                    notification_type=NotificationType.NEW_ORDER.value,
                ),
                asynchronous=False,
            )
            self.channel.publish(
                "newOrder",
                {
                    "notificationId": notification["id"],
                    "orderId": str(order.id),
                    "userName": order.customer_name,
                    "totalAmount": f"{order.amount:.2f}",
                    "createdAt": notification["created_at"],
                    "message": message,
                },
            )
        except Exception:
            logger.exception("order_notification_failed", order_id=str(order.id))

    def _payment_request(self, order: Order, callback_url) -> PaymentRequest:
        address = current_domain.repository_for(Address).get_or_none(order.address_id)
        phone = re.sub(r"[^0-9]", "", address.phone_number or "") if address else ""
        return PaymentRequest(
            tx_ref=payment_reference(order.id),
            amount=order.amount,
            currency=self.settings.currency,
            redirect_url=callback_url or f"{self.settings.public_base_url.rstrip('/')}/order-confirmation",
            customer_email=order.customer_email or FALLBACK_EMAIL,
            customer_phone=phone or FALLBACK_PHONE,
            customer_name=order.customer_name or FALLBACK_NAME,
            meta={"orderId": str(order.id), "consumerId": str(order.customer_id)},
            title=self.settings.checkout_title,
            description=f"Payment for order {order.id}",
        )

    def _initiate_payment(self, order: Order, callback_url) -> PlacedOrder:
        request = self._payment_request(order, callback_url)
        result = self.gateway.create_payment(request)

        if not result.success:
            current_domain.process(DiscardOrder(order_id=order.id), asynchronous=False)
            logger.warning("payment_initiation_failed", order_id=str(order.id), reason=result.message)
            raise PaymentInitiationError(result.message or "Gateway did not return a payment link")

        current_domain.process(
            AssignPaymentReference(order_id=order.id, tx_ref=result.tx_ref or request.tx_ref),
            asynchronous=False,
        )
        logger.info("payment_initiated", order_id=str(order.id), tx_ref=result.tx_ref or request.tx_ref)
        return PlacedOrder(
            order=current_domain.repository_for(Order).get(order.id),
            payment_url=result.link,
        )
