"""Application tests for the RateProduct command."""

import pytest
from agrimarket.catalogue.product import Product
from agrimarket.catalogue.rating import RateProduct
from protean import current_domain
from protean.exceptions import ObjectNotFoundError


def _rate(product_id, user_id="user-001"):
    return current_domain.process(RateProduct(product_id=product_id, user_id=user_id), asynchronous=False)


class TestRateProduct:
    def test_first_rating_is_added(self, make_product):
        product_id = make_product()
        assert _rate(product_id) is False
        product = current_domain.repository_for(Product).get(product_id)
        assert product.ratings[0].rating == 1

    def test_repeat_rating_is_incremented(self, make_product):
        product_id = make_product()
        _rate(product_id)
        assert _rate(product_id) is True
        product = current_domain.repository_for(Product).get(product_id)
        assert len(product.ratings) == 1
        assert product.ratings[0].rating == 2

    def test_rating_stops_at_five(self, make_product):
        product_id = make_product()
        for _ in range(7):
            _rate(product_id)
        product = current_domain.repository_for(Product).get(product_id)
        assert product.ratings[0].rating == 5

    def test_unknown_product(self):
        with pytest.raises(ObjectNotFoundError):
            _rate("missing")
