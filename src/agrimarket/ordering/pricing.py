"""Live catalogue lookups used to price carts and snapshot orders."""

from protean.utils.globals import current_domain

from agrimarket.catalogue.product import Product


def products_by_id(product_ids) -> dict[str, Product]:
    return current_domain.repository_for(Product).by_ids(product_ids)


def current_unit_prices(product_ids) -> dict[str, float]:
    """Map each still-existing product to the price a cart charges for it."""
    return {product_id: product.unit_price for product_id, product in products_by_id(product_ids).items()}
