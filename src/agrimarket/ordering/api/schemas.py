"""Pydantic request/response schemas for the Ordering API: carts and orders."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from agrimarket.catalogue.api.schemas import ProductOut
from agrimarket.identity.api.schemas import AddressOut
from agrimarket.utils.api import CamelModel, Envelope

# --- Cart Schemas ---


class AddToCartRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"productId": "6a1f0c2e-...", "quantity": 2, "unit": "kg"}]
        }
    }

    product_id: str
    quantity: int | None = Field(None, ge=1)
    unit: str | None = Field(None, max_length=50)


class UpdateCartQuantityRequest(CamelModel):
    quantity: int = Field(..., ge=1)


class CartItemOut(CamelModel):
    product_id: str
    quantity: int
    product: ProductOut | None = None


class CartOut(CamelModel):
    id: str
    customer_id: str
    items: list[CartItemOut]
    total_price: float
    shipping_price: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_cart(cls, cart, products: dict) -> CartOut:
        data = cart.to_dict()
        data["items"] = [
            {
                "product_id": str(item.product_id),
                "quantity": item.quantity,
                "product": ProductOut.from_product(products[str(item.product_id)])
                if str(item.product_id) in products
                else None,
            }
            for item in cart.items
        ]
        return cls.model_validate(data)


class CartResponse(Envelope):
    cart: CartOut


# --- Order Schemas ---


class PlaceOrderRequest(CamelModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "addressId": "0f6b9a3c-...",
                    "paymentType": "online",
                    "callbackUrl": "https://shop.example.com/order-confirmation",
                }
            ]
        }
    }

    address_id: str | None = None
    payment_type: str | None = None
    callback_url: str | None = None


class OrderItemOut(CamelModel):
    product_id: str
    quantity: int
    unit: str
    price: float
    image: str | None = None
    name: str | None = None
    subtotal: str


class OrderOut(CamelModel):
    id: str
    customer_id: str
    customer_name: str | None = None
    customer_email: str | None = None
    items: list[OrderItemOut]
    address_id: str
    address: AddressOut | None = None
    amount: float
    payment_type: str
    payment_status: str
    status: str
    tx_ref: str | None = None
    transaction_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_order(cls, order, address=None) -> OrderOut:
        data = order.to_dict()
        data["items"] = [{**item.to_dict(), "subtotal": item.subtotal} for item in order.items]
        data["address"] = AddressOut.from_address(address) if address is not None else None
        return cls.model_validate(data)


class PlaceOrderResponse(Envelope):
    order: OrderOut
    payment_url: str | None = None


class OrderResponse(Envelope):
    order: OrderOut


class OrderListResponse(Envelope):
    orders: list[OrderOut]
    pagination: dict


class UpdateOrderStatusRequest(CamelModel):
    model_config = {
        "json_schema_extra": {"examples": [{"status": "shipped", "paymentStatus": "completed"}]}
    }

    status: str | None = None
    payment_status: str | None = None


class DailyStat(CamelModel):
    date: str
    revenue: float
    orders: int


class OrderStatistics(CamelModel):
    total_orders: int
    orders_by_status: dict[str, int]
    payments_by_status: dict[str, int]
    total_revenue: float
    daily_stats: list[DailyStat]


class StatisticsResponse(Envelope):
    statistics: OrderStatistics


# --- Gateway webhook ---


class WebhookData(BaseModel):
    """The ``data`` block of a gateway notification, in the gateway's own keys."""

    id: int | str
    tx_ref: str | None = None
    status: str | None = None


class WebhookRequest(BaseModel):
    event: str | None = None
    data: WebhookData


class WebhookResponse(Envelope):
    order: OrderOut | None = None
