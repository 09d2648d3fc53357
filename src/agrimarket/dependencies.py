"""FastAPI dependencies that hand request handlers the adapters built at startup."""

from fastapi import Depends, Request

from agrimarket.auth import get_settings
from agrimarket.notifications.channel import AdminChannel
from agrimarket.ordering.placement import OrderPlacement
from agrimarket.ordering.webhook import PaymentWebhook
from agrimarket.payments.port import PaymentGateway
from agrimarket.settings import MarketSettings


def get_gateway(request: Request) -> PaymentGateway:
    return request.app.state.gateway


def get_channel(request: Request) -> AdminChannel:
    return request.app.state.channel


def get_order_placement(
    gateway: PaymentGateway = Depends(get_gateway),
    channel: AdminChannel = Depends(get_channel),
    settings: MarketSettings = Depends(get_settings),
) -> OrderPlacement:
    return OrderPlacement(gateway=gateway, channel=channel, settings=settings)


def get_payment_webhook(gateway: PaymentGateway = Depends(get_gateway)) -> PaymentWebhook:
    return PaymentWebhook(gateway)
