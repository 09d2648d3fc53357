"""Domain events for the ShoppingCart and Order aggregates."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from agrimarket.domain import agrimarket


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
@agrimarket.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was put in the cart, or its quantity topped up."""

    __version__ = 1

    cart_id: Identifier(required=True)
    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    total_price: Float(required=True)


@agrimarket.event(part_of="ShoppingCart")
class CartQuantityUpdated:
    """The quantity of a cart line was set to a new value."""

    __version__ = 1

    cart_id: Identifier(required=True)
    product_id: Identifier(required=True)
    previous_quantity: Integer(required=True)
    new_quantity: Integer(required=True)


@agrimarket.event(part_of="ShoppingCart")
class CartItemRemoved:
    """A product line was removed from the cart."""

    __version__ = 1

    cart_id: Identifier(required=True)
    product_id: Identifier(required=True)


@agrimarket.event(part_of="ShoppingCart")
class CartCleared:
    """Every line was removed from the cart."""

    __version__ = 1

    cart_id: Identifier(required=True)
    total_price: Float(required=True)


@agrimarket.event(part_of="ShoppingCart")
class CartRepaired:
    """Lines pointing at products that no longer exist were dropped."""

    __version__ = 1

    cart_id: Identifier(required=True)
    removed_product_ids: String(required=True)


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------
@agrimarket.event(part_of="Order")
class OrderPlaced:
    """A customer checked out their cart."""

    __version__ = 1

    order_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    amount: Float(required=True)
    payment_type: String(required=True)
    item_count: Integer(required=True)
    placed_at: DateTime(required=True)


@agrimarket.event(part_of="Order")
class PaymentReferenceAssigned:
    """An online payment was initiated with the gateway."""

    __version__ = 1

    order_id: Identifier(required=True)
    tx_ref: String(required=True)


@agrimarket.event(part_of="Order")
class PaymentConfirmed:
    """Payment for the order was received."""

    __version__ = 1

    order_id: Identifier(required=True)
    payment_type: String(required=True)
    transaction_id: String()
    confirmed_at: DateTime(required=True)


@agrimarket.event(part_of="Order")
class PaymentFailed:
    """The gateway reported the payment as failed."""

    __version__ = 1

    order_id: Identifier(required=True)
    tx_ref: String()


@agrimarket.event(part_of="Order")
class OrderStatusChanged:
    """An administrator changed the fulfillment or payment status."""

    __version__ = 1

    order_id: Identifier(required=True)
    status: String(required=True)
    payment_status: String(required=True)
    changed_at: DateTime(required=True)
