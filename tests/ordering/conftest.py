import pytest
from agrimarket.ordering.cart_items import AddToCart
from agrimarket.ordering.placement import OrderPlacement
from protean import current_domain


@pytest.fixture()
def fill_cart(make_product):
    """Factory: put ``quantity`` of a fresh product in cust-001's cart and return the product id."""

    def _fill(price=2500.0, quantity=2, name="Irish Potatoes"):
        product_id = make_product(name=name, price=price)
        current_domain.process(
            AddToCart(customer_id="cust-001", product_id=product_id, quantity=quantity),
            asynchronous=False,
        )
        return product_id

    return _fill


@pytest.fixture()
def placement(gateway, channel, settings):
    return OrderPlacement(gateway=gateway, channel=channel, settings=settings)
