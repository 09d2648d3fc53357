"""Shopping Cart aggregate: one per customer, priced from the live catalogue.

The cart stores only product references and quantities. Its total is a
derived value: every mutation is given the current unit price of each
product in the cart and recomputes ``total_price`` from scratch, so the
total follows catalogue price changes until checkout.
"""

import json
import math
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from agrimarket.domain import agrimarket
from agrimarket.ordering.events import (
    CartCleared,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
    CartRepaired,
)

DEFAULT_SHIPPING_PRICE = "negotiable with deliverer"


@agrimarket.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@agrimarket.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    total_price = Float(default=0.0, min_value=0.0)
    shipping_price = String(max_length=100, default=DEFAULT_SHIPPING_PRICE)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def one_line_per_product(self):
        product_ids = [str(i.product_id) for i in self.items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"items": ["A product can appear only once in the cart"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(
            customer_id=customer_id,
            total_price=0.0,
            shipping_price=DEFAULT_SHIPPING_PRICE,
            created_at=now,
            updated_at=now,
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def product_ids(self):
        return [str(i.product_id) for i in self.items]

    def line_for(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def _require_line(self, product_id):
        item = self.line_for(product_id)
        if item is None:
            raise ObjectNotFoundError("Product not found in cart")
        return item

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def reprice(self, unit_prices):
        """Recompute the total from ``{product_id: unit price}``.

        Lines whose product is missing from ``unit_prices`` contribute
        nothing; they are dropped separately by :meth:`prune`.
        """
        total = sum(
            unit_prices[str(i.product_id)] * i.quantity for i in self.items if str(i.product_id) in unit_prices
        )
        self.total_price = round(total, 2)
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, unit_prices):
        """Add a product, summing quantities when it is already in the cart."""
        now = datetime.now(UTC)
        existing = self.line_for(product_id)

        if existing:
            existing.quantity += quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))

        self.reprice(unit_prices)
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                total_price=self.total_price,
            )
        )

    def update_item_quantity(self, product_id, quantity, unit_prices):
        if not isinstance(quantity, int) or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be a positive integer"]})

        item = self._require_line(product_id)
        previous_quantity = item.quantity
        item.quantity = quantity

        self.reprice(unit_prices)
        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def remove_item(self, product_id, unit_prices):
        item = self._require_line(product_id)
        self.remove_items(item)

        self.reprice(unit_prices)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        """Empty the cart. The shipping price is left as it is."""
        if self.items:
            self.remove_items(list(self.items))
        self.total_price = 0.0
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), total_price=self.total_price))

    def empty_after_checkout(self):
        """Empty the cart once its contents became an order.

        The total falls back to the shipping price when that happens to be
        numeric, and to zero otherwise.
        """
        if self.items:
            self.remove_items(list(self.items))
        try:
            shipping = float(self.shipping_price)
        except (TypeError, ValueError):
            shipping = 0.0
        self.total_price = shipping if math.isfinite(shipping) and shipping > 0 else 0.0
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(cart_id=str(self.id), total_price=self.total_price))

    def prune(self, existing_product_ids):
        """Drop lines whose product no longer exists; return the dropped ids."""
        existing = {str(product_id) for product_id in existing_product_ids}
        stale = [i for i in self.items if str(i.product_id) not in existing]
        if not stale:
            return []

        removed = [str(i.product_id) for i in stale]
        self.remove_items(stale)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartRepaired(cart_id=str(self.id), removed_product_ids=json.dumps(removed)))
        return removed
