"""Payment outcomes reported by the gateway: commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.ordering.creation import load_order
from agrimarket.ordering.order import Order

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="Order")
class RecordPaymentSuccess:
    order_id = Identifier(required=True)
    transaction_id = String(max_length=255)


@agrimarket.command(part_of="Order")
class RecordPaymentFailure:
    order_id = Identifier(required=True)


@agrimarket.command_handler(part_of=Order)
class OrderPaymentHandler:
    @handle(RecordPaymentSuccess)
    def record_payment_success(self, command):
        order = load_order(command.order_id)
        order.confirm_gateway_payment(command.transaction_id)
        current_domain.repository_for(Order).add(order)
        logger.info("payment_confirmed", order_id=str(order.id), transaction_id=order.transaction_id)

    @handle(RecordPaymentFailure)
    def record_payment_failure(self, command):
        order = load_order(command.order_id)
        order.mark_payment_failed()
        current_domain.repository_for(Order).add(order)
        logger.warning("payment_failed", order_id=str(order.id), tx_ref=order.tx_ref)
