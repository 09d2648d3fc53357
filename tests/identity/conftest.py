import pytest
from agrimarket.identity.profile import SaveCustomerProfile
from protean import current_domain


@pytest.fixture()
def make_seller():
    """Factory: record a seller account and return its id."""

    def _make(seller_id="seller-001", full_name="Jean Ndayisaba", email="jean@greenfarm.rw", **details):
        return current_domain.process(
            SaveCustomerProfile(
                customer_id=seller_id,
                full_name=full_name,
                email=email,
                is_admin=True,
                company_name=details.get("company_name", "Green Farm Ltd"),
                company_address=details.get("company_address", "Musanze, Northern Province"),
                phone_number=details.get("phone_number"),
            ),
            asynchronous=False,
        )

    return _make
