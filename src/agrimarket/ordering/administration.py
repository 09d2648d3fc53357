"""Order administration: status changes made by administrators."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.ordering.creation import load_order
from agrimarket.ordering.order import Order, status_changes

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(max_length=20)
    payment_status = String(max_length=20)


@agrimarket.command(part_of="Order")
class ConfirmCashPayment:
    order_id = Identifier(required=True)


@agrimarket.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        status_changes(command.status, command.payment_status)
        order = load_order(command.order_id)
        order.update_status(status=command.status, payment_status=command.payment_status)
        current_domain.repository_for(Order).add(order)
        logger.info(
            "order_status_updated",
            order_id=str(order.id),
            status=order.status,
            payment_status=order.payment_status,
        )

    @handle(ConfirmCashPayment)
    def confirm_cash_payment(self, command):
        order = load_order(command.order_id)
        order.confirm_cash_payment()
        current_domain.repository_for(Order).add(order)
        logger.info("cash_payment_confirmed", order_id=str(order.id))
