"""Product rating: each call bumps the caller's rating by one, up to 5."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from agrimarket.catalogue.management import load_product
from agrimarket.catalogue.product import Product
from agrimarket.domain import agrimarket


@agrimarket.command(part_of="Product")
class RateProduct:
    product_id: Identifier(required=True)
    user_id: Identifier(required=True)


@agrimarket.command_handler(part_of=Product)
class RateProductHandler:
    @handle(RateProduct)
    def rate_product(self, command):
        """Return True when an existing rating was incremented."""
        product = load_product(command.product_id)
        incremented = product.rate(command.user_id)
        current_domain.repository_for(Product).add(product)
        return incremented
