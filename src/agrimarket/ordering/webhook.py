"""Gateway webhook processing.

The notification body is never trusted on its own: the transaction it
names is re-verified with the gateway before the order is touched, and a
verified transaction carrying another order's reference is refused. Every
transition sets absolute values, so a replayed notification ends in the
same state.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from agrimarket.ordering.cart_items import EmptyCartAfterCheckout
from agrimarket.ordering.order import Order
from agrimarket.ordering.payment import RecordPaymentFailure, RecordPaymentSuccess
from agrimarket.payments.port import PaymentGateway

logger = structlog.get_logger(__name__)

CHARGE_COMPLETED = "charge.completed"


@dataclass
class WebhookOutcome:
    status_code: int
    message: str
    order: Order | None = None


class PaymentWebhook:
    def __init__(self, gateway: PaymentGateway) -> None:
        self.gateway = gateway

    def handle(self, event, transaction_id, tx_ref) -> WebhookOutcome:
        verified = self.gateway.verify_transaction(str(transaction_id))

        order = current_domain.repository_for(Order).by_tx_ref(tx_ref) if tx_ref else None
        if order is None:
            raise ObjectNotFoundError("Order not found for this transaction")

        if verified.tx_ref is not None and verified.tx_ref != tx_ref:
            logger.warning(
                "webhook_reference_mismatch",
                order_id=str(order.id),
                tx_ref=tx_ref,
                verified_tx_ref=verified.tx_ref,
            )
            return WebhookOutcome(400, "Transaction does not belong to this order")

        if event == CHARGE_COMPLETED and verified.status == "successful":
            current_domain.process(
                RecordPaymentSuccess(order_id=order.id, transaction_id=str(transaction_id)),
                asynchronous=False,
            )
            current_domain.process(EmptyCartAfterCheckout(customer_id=order.customer_id), asynchronous=False)
            return WebhookOutcome(
                200,
                "Payment confirmed successfully",
                current_domain.repository_for(Order).get(order.id),
            )

        if verified.status == "failed":
            current_domain.process(RecordPaymentFailure(order_id=order.id), asynchronous=False)
            return WebhookOutcome(400, "Payment not completed")

        logger.info("webhook_ignored", order_id=str(order.id), webhook_event=event, verified_status=verified.status)
        return WebhookOutcome(200, "Notification received, no action taken")
