import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    The domain reads its configuration when it is first imported, so the
    environment has to be selected before any test module imports it.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


# ---------------------------------------------------------------------------
# Domain lifecycle
# ---------------------------------------------------------------------------
@pytest.fixture(scope="session")
def agrimarket_bed():
    from agrimarket.domain import agrimarket
    from protean.integrations.pytest import DomainFixture

    bed = DomainFixture(agrimarket)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(agrimarket_bed):
    with agrimarket_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Catalogue and identity builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def category_id():
    from agrimarket.catalogue.management import CreateCategory
    from protean import current_domain

    return current_domain.process(
        CreateCategory(name="Vegetables", description="Fresh vegetables from local farms"),
        asynchronous=False,
    )


@pytest.fixture()
def make_product(category_id):
    """Factory: add a product to the catalogue and return its id."""
    from agrimarket.catalogue.management import AddProduct
    from protean import current_domain

    def _make(name="Irish Potatoes", price=1000.0, offer_price=None, unit="kg", in_stock=True):
        return current_domain.process(
            AddProduct(
                name=name,
                unit=unit,
                price=price,
                offer_price=offer_price,
                category_id=category_id,
                in_stock=in_stock,
            ),
            asynchronous=False,
        )

    return _make


@pytest.fixture()
def customer_id():
    from agrimarket.identity.profile import SaveCustomerProfile
    from protean import current_domain

    return current_domain.process(
        SaveCustomerProfile(customer_id="cust-001", full_name="Aline Uwase", email="aline@example.com"),
        asynchronous=False,
    )


@pytest.fixture()
def address_id(customer_id):
    from agrimarket.identity.addresses import CreateAddress
    from protean import current_domain

    return current_domain.process(
        CreateAddress(
            user_id=customer_id,
            description="Home",
            phone_number="+250 788 123 456",
            city="Kigali",
            street="KG 11 Ave",
            district="Gasabo",
        ),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Adapters and HTTP client
# ---------------------------------------------------------------------------
@pytest.fixture()
def settings():
    from agrimarket.settings import MarketSettings

    return MarketSettings(
        gateway="fake",
        flw_webhook_hash="test-webhook-hash",
        jwt_secret="test-secret",
        public_base_url="http://testserver",
    )


@pytest.fixture()
def gateway():
    from agrimarket.payments.fake import FakeGateway

    return FakeGateway()


@pytest.fixture()
def channel():
    from agrimarket.notifications.channel import FakeChannel

    return FakeChannel()


@pytest.fixture()
def client(settings, gateway, channel):
    from agrimarket.app import create_app
    from fastapi.testclient import TestClient

    return TestClient(create_app(settings=settings, gateway=gateway, channel=channel))


@pytest.fixture()
def make_token(settings):
    import jwt

    def _make(user_id="cust-001", is_admin=False):
        return jwt.encode({"_id": user_id, "isAdmin": is_admin}, settings.jwt_secret, algorithm=settings.jwt_algorithm)

    return _make


@pytest.fixture()
def auth_headers(make_token):
    return {"Authorization": f"Bearer {make_token('cust-001')}"}


@pytest.fixture()
def admin_headers(make_token):
    return {"Authorization": f"Bearer {make_token('admin-001', is_admin=True)}"}
