"""FastAPI routes for ordering: carts, checkout, the gateway webhook and order administration."""

from datetime import UTC, datetime, time

import structlog
from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from agrimarket.auth import CurrentUser, admin_user, current_user, get_settings
from agrimarket.dependencies import get_order_placement, get_payment_webhook
from agrimarket.identity.address import Address
from agrimarket.ordering.administration import ConfirmCashPayment, UpdateOrderStatus
from agrimarket.ordering.api.schemas import (
    AddToCartRequest,
    CartOut,
    CartResponse,
    OrderListResponse,
    OrderOut,
    OrderResponse,
    PlaceOrderRequest,
    PlaceOrderResponse,
    StatisticsResponse,
    UpdateCartQuantityRequest,
    UpdateOrderStatusRequest,
    WebhookRequest,
    WebhookResponse,
)
from agrimarket.ordering.cart_items import (
    AddToCart,
    ClearCart,
    RemoveFromCart,
    RepairCart,
    UpdateCartQuantity,
    load_cart,
)
from agrimarket.ordering.creation import load_order
from agrimarket.ordering.order import Order
from agrimarket.ordering.placement import OrderPlacement
from agrimarket.ordering.pricing import products_by_id
from agrimarket.ordering.statistics import order_statistics
from agrimarket.ordering.webhook import PaymentWebhook
from agrimarket.settings import MarketSettings
from agrimarket.utils.api import pagination

logger = structlog.get_logger(__name__)


def cart_response(customer_id, message=None) -> CartResponse:
    cart = load_cart(customer_id)
    return CartResponse(message=message, cart=CartOut.from_cart(cart, products_by_id(cart.product_ids)))


def order_out(order: Order) -> OrderOut:
    address = current_domain.repository_for(Address).get_or_none(order.address_id)
    return OrderOut.from_order(order, address)


def parse_date(value: str | None, field_name: str, end_of_day=False) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as exc:
        raise ValidationError({field_name: ["Invalid date format"]}) from exc
    if end_of_day and len(value) <= 10:
        parsed = datetime.combine(parsed.date(), time(23, 59, 59, 999000))
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("/add", response_model=CartResponse)
async def add_to_cart(body: AddToCartRequest, user: CurrentUser = Depends(current_user)) -> CartResponse:
    command = AddToCart(
        customer_id=user.user_id,
        product_id=body.product_id,
        quantity=body.quantity or 1,
        unit=body.unit,
    )
    current_domain.process(command, asynchronous=False)
    return cart_response(user.user_id, "Product added to cart successfully")


@cart_router.get("", response_model=CartResponse)
async def get_cart(user: CurrentUser = Depends(current_user)) -> CartResponse:
    current_domain.process(RepairCart(customer_id=user.user_id), asynchronous=False)
    return cart_response(user.user_id)


@cart_router.put("/update/{product_id}", response_model=CartResponse)
async def update_cart_quantity(
    product_id: str, body: UpdateCartQuantityRequest, user: CurrentUser = Depends(current_user)
) -> CartResponse:
    command = UpdateCartQuantity(customer_id=user.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return cart_response(user.user_id, "Cart updated successfully")


@cart_router.delete("/remove/{product_id}", response_model=CartResponse)
async def remove_from_cart(product_id: str, user: CurrentUser = Depends(current_user)) -> CartResponse:
    current_domain.process(RemoveFromCart(customer_id=user.user_id, product_id=product_id), asynchronous=False)
    return cart_response(user.user_id, "Product removed from cart successfully")


@cart_router.delete("/clear", response_model=CartResponse)
async def clear_cart(user: CurrentUser = Depends(current_user)) -> CartResponse:
    current_domain.process(ClearCart(customer_id=user.user_id), asynchronous=False)
    return cart_response(user.user_id, "Cart cleared successfully")


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/order", tags=["orders"])


# Gateway calls block on network I/O, so these two handlers are plain
# functions and run in the threadpool.
@order_router.post("/placeOrder", status_code=201, response_model=PlaceOrderResponse)
def place_order(
    body: PlaceOrderRequest,
    user: CurrentUser = Depends(current_user),
    placement: OrderPlacement = Depends(get_order_placement),
) -> PlaceOrderResponse:
    placed = placement.place(
        customer_id=user.user_id,
        address_id=body.address_id,
        payment_type=body.payment_type,
        callback_url=body.callback_url,
    )
    message = "Order created, redirect to payment" if placed.payment_url else "Order placed successfully"
    return PlaceOrderResponse(message=message, order=order_out(placed.order), payment_url=placed.payment_url)


@order_router.get("/getUserOrders", response_model=OrderListResponse)
async def get_user_orders(
    page: int = 1, limit: int = 10, user: CurrentUser = Depends(current_user)
) -> OrderListResponse:
    page, limit = max(page, 1), max(limit, 1)
    results = current_domain.repository_for(Order).for_customer(user.user_id, page=page, limit=limit)
    return OrderListResponse(
        orders=[order_out(o) for o in results.items],
        pagination=pagination(results.total, page, limit, "totalOrders"),
    )


@order_router.get("/getOrderDetails/{order_id}", response_model=OrderResponse)
async def get_order_details(order_id: str, user: CurrentUser = Depends(current_user)) -> OrderResponse:
    order = load_order(order_id)
    if str(order.customer_id) != user.user_id:
        raise ObjectNotFoundError("Order not found")
    return OrderResponse(order=order_out(order))


@order_router.post("/flw-webhook", response_model=WebhookResponse)
def payment_webhook(
    body: WebhookRequest,
    verif_hash: str | None = Header(None, alias="verif-hash"),
    settings: MarketSettings = Depends(get_settings),
    webhook: PaymentWebhook = Depends(get_payment_webhook),
):
    if not verif_hash or not settings.flw_webhook_hash or verif_hash != settings.flw_webhook_hash:
        logger.warning("webhook_signature_rejected")
        return JSONResponse(status_code=401, content={"success": False, "message": "Invalid webhook signature"})

    outcome = webhook.handle(event=body.event, transaction_id=body.data.id, tx_ref=body.data.tx_ref)
    response = WebhookResponse(
        success=outcome.status_code < 400,
        message=outcome.message,
        order=order_out(outcome.order) if outcome.order is not None else None,
    )
    if outcome.status_code != 200:
        return JSONResponse(status_code=outcome.status_code, content=response.model_dump(mode="json", by_alias=True))
    return response


# --- Administration ---


@order_router.get("/admin/getOrderDetails/{order_id}", response_model=OrderResponse)
async def get_order_details_admin(order_id: str, _: CurrentUser = Depends(admin_user)) -> OrderResponse:
    return OrderResponse(order=order_out(load_order(order_id)))


@order_router.get("/getAllOrders", response_model=OrderListResponse)
async def get_all_orders(
    page: int = 1,
    limit: int = 20,
    search: str | None = None,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    _: CurrentUser = Depends(admin_user),
) -> OrderListResponse:
    page, limit = max(page, 1), max(limit, 1)
    results = current_domain.repository_for(Order).search(
        page=page,
        limit=limit,
        search=search,
        start=parse_date(start_date, "startDate"),
        end=parse_date(end_date, "endDate", end_of_day=True),
    )
    return OrderListResponse(
        orders=[order_out(o) for o in results.items],
        pagination=pagination(results.total, page, limit, "totalOrders"),
    )


@order_router.put("/updateOrderStatus/{order_id}", response_model=OrderResponse)
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, _: CurrentUser = Depends(admin_user)
) -> OrderResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status, payment_status=body.payment_status)
    current_domain.process(command, asynchronous=False)
    return OrderResponse(message="Order updated successfully", order=order_out(load_order(order_id)))


@order_router.put("/confirmCashPayment/{order_id}", response_model=OrderResponse)
async def confirm_cash_payment(order_id: str, _: CurrentUser = Depends(admin_user)) -> OrderResponse:
    current_domain.process(ConfirmCashPayment(order_id=order_id), asynchronous=False)
    return OrderResponse(message="Cash payment confirmed successfully", order=order_out(load_order(order_id)))


@order_router.get("/getOrderStatistics", response_model=StatisticsResponse)
async def get_order_statistics(_: CurrentUser = Depends(admin_user)) -> StatisticsResponse:
    return StatisticsResponse(statistics=order_statistics())
