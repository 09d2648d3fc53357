"""Shared BDD fixtures and step definitions for ordering."""

import pytest
from agrimarket.ordering.cart import ShoppingCart
from agrimarket.ordering.cart_items import AddToCart
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from pytest_bdd import given, parsers, then, when


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def products():
    """Catalogue product ids by name, filled in by Given steps."""
    return {}


@pytest.fixture()
def error():
    """Container for the exception a When step captured."""
    return {"exc": None}


def _cart():
    return current_domain.repository_for(ShoppingCart).for_customer("cust-001")


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a product "{name}" priced {price:d} per "{unit}"'))
def _(make_product, products, name, price, unit):
    products[name] = make_product(name=name, price=float(price), unit=unit)


@given(parsers.cfparse('a product "{name}" priced {price:d} per "{unit}" on offer at {offer:d}'))
def _(make_product, products, name, price, unit, offer):
    products[name] = make_product(name=name, price=float(price), offer_price=float(offer), unit=unit)


@given(parsers.cfparse('an out of stock product "{name}" priced {price:d} per "{unit}"'))
def _(make_product, products, name, price, unit):
    products[name] = make_product(name=name, price=float(price), unit=unit, in_stock=False)


@given(parsers.cfparse('the customer has {qty:d} of "{name}" in the cart'))
def _(products, qty, name):
    current_domain.process(
        AddToCart(customer_id="cust-001", product_id=products[name], quantity=qty),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _add_to_cart(error, product_id, qty, unit=None):
    try:
        current_domain.process(
            AddToCart(customer_id="cust-001", product_id=product_id, quantity=qty, unit=unit),
            asynchronous=False,
        )
    except (ValidationError, ObjectNotFoundError) as exc:
        error["exc"] = exc


@when(parsers.cfparse('the customer adds {qty:d} of "{name}" to the cart'))
def _(products, error, qty, name):
    _add_to_cart(error, products[name], qty)


@when(parsers.cfparse('the customer adds {qty:d} "{unit}" of "{name}" to the cart'))
def _(products, error, qty, unit, name):
    _add_to_cart(error, products[name], qty, unit=unit)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart total is {total:d}"))
def _(total):
    assert _cart().total_price == float(total)


@then(parsers.cfparse("the cart has {count:d} line"))
def _(count):
    assert len(_cart().items) == count


@then("the cart is empty")
def _():
    cart = _cart()
    assert len(cart.items) == 0
    assert cart.total_price == 0.0


@then(parsers.cfparse('the cart change is refused with "{message}"'))
def _(error, message):
    assert isinstance(error["exc"], ValidationError)
    assert message in str(error["exc"].messages)
