"""Cart management: commands and handler.

Every handler reprices the cart against the live catalogue before saving.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from agrimarket.catalogue.product import Product
from agrimarket.domain import agrimarket
from agrimarket.ordering.cart import ShoppingCart
from agrimarket.ordering.pricing import current_unit_prices

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1, min_value=1)
    unit = String(max_length=50)


@agrimarket.command(part_of="ShoppingCart")
class UpdateCartQuantity:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@agrimarket.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@agrimarket.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


@agrimarket.command(part_of="ShoppingCart")
class RepairCart:
    customer_id = Identifier(required=True)


@agrimarket.command(part_of="ShoppingCart")
class EmptyCartAfterCheckout:
    customer_id = Identifier(required=True)


def load_cart(customer_id):
    cart = current_domain.repository_for(ShoppingCart).for_customer(customer_id)
    if cart is None:
        raise ObjectNotFoundError("Cart not found")
    return cart


@agrimarket.command_handler(part_of=ShoppingCart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = current_domain.repository_for(Product).get_or_none(command.product_id)
        if product is None:
            raise ObjectNotFoundError("Product not found")
        if not product.in_stock:
            raise ValidationError({"product_id": ["Product is out of stock"]})
        if command.unit and command.unit != product.unit:
            raise ValidationError({"unit": [f"Invalid unit. Product unit must be {product.unit}"]})

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            cart = ShoppingCart.create(customer_id=command.customer_id)
            logger.debug("cart_created", customer_id=str(command.customer_id))

        product_ids = set(cart.product_ids) | {str(command.product_id)}
        cart.add_item(command.product_id, command.quantity or 1, current_unit_prices(product_ids))
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_cart_quantity(self, command):
        cart = load_cart(command.customer_id)
        cart.update_item_quantity(command.product_id, command.quantity, current_unit_prices(cart.product_ids))
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = load_cart(command.customer_id)
        cart.remove_item(command.product_id, current_unit_prices(cart.product_ids))
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.customer_id)
        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)

    @handle(RepairCart)
    def repair_cart(self, command):
        """Drop lines for deleted products and bring the total up to date."""
        cart = load_cart(command.customer_id)
        unit_prices = current_unit_prices(cart.product_ids)
        removed = cart.prune(unit_prices.keys())
        if removed:
            logger.info("cart_repaired", cart_id=str(cart.id), removed_product_ids=removed)
        cart.reprice(unit_prices)
        current_domain.repository_for(ShoppingCart).add(cart)
        return str(cart.id)

    @handle(EmptyCartAfterCheckout)
    def empty_after_checkout(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_customer(command.customer_id)
        if cart is None:
            return
        cart.empty_after_checkout()
        repo.add(cart)
