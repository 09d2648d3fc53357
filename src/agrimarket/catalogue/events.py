"""Domain events for the Category and Product aggregates."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from agrimarket.domain import agrimarket


@agrimarket.event(part_of="Category")
class CategoryCreated:
    """A new category was added to the catalogue."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    status: String(required=True)
    created_at: DateTime(required=True)


@agrimarket.event(part_of="Category")
class CategoryUpdated:
    """Category name, description, image or status changed."""

    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    status: String(required=True)


@agrimarket.event(part_of="Product")
class ProductAdded:
    """A product was listed in the catalogue."""

    __version__ = 1

    product_id: Identifier(required=True)
    name: String(required=True)
    category_id: Identifier(required=True)
    price: Float(required=True)
    offer_price: Float()
    in_stock: Boolean(required=True)
    created_at: DateTime(required=True)


@agrimarket.event(part_of="Product")
class ProductUpdated:
    """Product details or pricing changed."""

    __version__ = 1

    product_id: Identifier(required=True)
    price: Float(required=True)
    offer_price: Float()


@agrimarket.event(part_of="Product")
class StockChanged:
    """A product was put in or taken out of stock."""

    __version__ = 1

    product_id: Identifier(required=True)
    in_stock: Boolean(required=True)


@agrimarket.event(part_of="Product")
class ProductRated:
    """A customer rated a product (first rating or an increment)."""

    __version__ = 1

    product_id: Identifier(required=True)
    user_id: Identifier(required=True)
    rating: Integer(required=True)
