"""AgriMarket domain: catalogue, carts, orders, payments and notifications.

All aggregates of the marketplace live in a single domain so that cart
pricing, order placement and the payment webhook can read and write
across aggregates within one request.
"""

from protean.domain import Domain

from agrimarket.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

agrimarket = Domain(name="agrimarket")
