"""Order creation: turning a customer's cart into an Order.

``CreateOrder`` only persists the order. Notifying administrators,
emptying the cart and initiating an online payment are separate steps
coordinated by :class:`agrimarket.ordering.placement.OrderPlacement`.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.identity.address import Address
from agrimarket.identity.customer import Customer
from agrimarket.ordering.cart import ShoppingCart
from agrimarket.ordering.order import Order, PaymentType
from agrimarket.ordering.pricing import products_by_id

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="Order")
class CreateOrder:
    customer_id = Identifier(required=True)
    address_id = Identifier()
    payment_type = String(max_length=20)


@agrimarket.command(part_of="Order")
class AssignPaymentReference:
    order_id = Identifier(required=True)
    tx_ref = String(required=True, max_length=255)


@agrimarket.command(part_of="Order")
class DiscardOrder:
    """Remove an order whose online payment could not be initiated."""

    order_id = Identifier(required=True)


def load_order(order_id):
    order = current_domain.repository_for(Order).get_or_none(order_id)
    if order is None:
        raise ObjectNotFoundError("Order not found")
    return order


def snapshot_cart(cart):
    """Copy each cart line with the product's current list price.

    Lines whose product has been deleted are skipped.
    """
    products = products_by_id(cart.product_ids)
    items_data = []
    for item in cart.items:
        product = products.get(str(item.product_id))
        if product is None:
            continue
        items_data.append(
            {
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "unit": product.unit,
                "price": product.price,
                "image": product.image,
                "name": product.name,
            }
        )
    return items_data


@agrimarket.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        if not command.address_id:
            raise ValidationError({"address_id": ["Address ID is required"]})
        payment_type = (command.payment_type or "").lower()
        if payment_type not in {t.value for t in PaymentType}:
            raise ValidationError({"payment_type": ['Payment type must be either "online" or "cash"']})

        address = current_domain.repository_for(Address).get_or_none(command.address_id)
        if address is None or str(address.user_id) != str(command.customer_id):
            raise ObjectNotFoundError("Address not found or does not belong to user")

        cart = current_domain.repository_for(ShoppingCart).for_customer(command.customer_id)
        items_data = snapshot_cart(cart) if cart is not None and cart.items else []
        if not items_data:
            raise ValidationError({"cart": ["Cart is empty, cannot place order"]})

        customer = current_domain.repository_for(Customer).get_or_none(command.customer_id)
        if customer is None:
            raise ObjectNotFoundError("User not found")

        order = Order.create(
            customer_id=command.customer_id,
            address_id=command.address_id,
            payment_type=payment_type,
            items_data=items_data,
            customer_name=customer.full_name,
            customer_email=customer.email,
        )
        current_domain.repository_for(Order).add(order)
        logger.info(
            "order_created",
            order_id=str(order.id),
            customer_id=str(order.customer_id),
            amount=order.amount,
            payment_type=order.payment_type,
        )
        return str(order.id)

    @handle(AssignPaymentReference)
    def assign_payment_reference(self, command):
        order = load_order(command.order_id)
        order.assign_payment_reference(command.tx_ref)
        current_domain.repository_for(Order).add(order)

    @handle(DiscardOrder)
    def discard_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get_or_none(command.order_id)
        if order is None:
            return
        repo._dao.delete(order)
        logger.warning("order_discarded", order_id=str(command.order_id))
