"""Payment gateway adapters.

:func:`build_gateway` picks the adapter named by the ``GATEWAY`` setting.
The application factory calls it once at startup; tests pass a
:class:`~agrimarket.payments.fake.FakeGateway` directly instead.
"""

from agrimarket.payments.fake import FakeGateway
from agrimarket.payments.flutterwave import FlutterwaveGateway
from agrimarket.payments.port import PaymentGateway


def build_gateway(settings) -> PaymentGateway:
    if settings.gateway == "fake":
        return FakeGateway()
    return FlutterwaveGateway(
        base_url=settings.flw_base_url,
        secret_key=settings.flw_secret_key,
        timeout=settings.gateway_timeout,
    )
