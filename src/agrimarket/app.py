"""AgriMarket FastAPI application.

Every request runs inside the ``agrimarket`` domain context and commands
are processed synchronously.

Usage:
    uvicorn agrimarket.app:serve --factory --host 0.0.0.0 --port 8000
"""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError
from protean.integrations.fastapi import register_exception_handlers

from agrimarket.domain import agrimarket
from agrimarket.notifications.channel import AdminChannel, WebSocketChannel
from agrimarket.ordering.placement import PaymentInitiationError
from agrimarket.payments import build_gateway
from agrimarket.payments.port import PaymentGateway
from agrimarket.settings import MarketSettings
from agrimarket.utils.api import field_errors
from agrimarket.utils.logging import add_context, clear_context, get_logger

logger = get_logger(__name__)

API_PREFIX = "/api"


def create_app(
    settings: MarketSettings | None = None,
    gateway: PaymentGateway | None = None,
    channel: AdminChannel | None = None,
) -> FastAPI:
    """Build the application around explicitly supplied adapters.

    Anything not supplied is built from ``settings``, which default to the
    domain's ``custom`` configuration.
    """
    settings = settings or MarketSettings.from_domain(agrimarket)

    app = FastAPI(
        title="AgriMarket API",
        description="Grocery marketplace: catalogue, carts, orders and payments",
    )
    app.state.settings = settings
    app.state.gateway = gateway or build_gateway(settings)
    app.state.channel = channel or WebSocketChannel()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the domain context and bind request details to every log line."""
        add_context(request_id=request.headers.get("x-request-id") or uuid4().hex, path=request.url.path)
        try:
            with agrimarket.domain_context():
                return await call_next(request)
        finally:
            clear_context()

    _register_error_handlers(app)
    _include_routers(app)

    @app.get("/health")
    async def health():
        return JSONResponse(content={"status": "ok", "domain": agrimarket.name})

    logger.info("app_created", gateway=type(app.state.gateway).__name__)
    return app


def serve() -> FastAPI:
    """Uvicorn factory: initialize the domain, then build the app from configuration."""
    agrimarket.init()
    return create_app()


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
def _register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": field_errors(exc.errors())})

    @app.exception_handler(ExpectedVersionError)
    async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("concurrent_update_rejected", error=str(exc))
        return JSONResponse(
            status_code=409,
            content={"error": "The record was changed by another request. Please retry."},
        )

    @app.exception_handler(PaymentInitiationError)
    async def payment_initiation_handler(request: Request, exc: PaymentInitiationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", error_type=type(exc).__name__)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
def _include_routers(app: FastAPI) -> None:
    from agrimarket.catalogue.api import category_router, product_router
    from agrimarket.identity.api.routes import address_router, customer_router, seller_router, user_router
    from agrimarket.notifications.api.routes import router as notifications_router
    from agrimarket.ordering.api.routes import cart_router, order_router

    for router in (
        cart_router,
        notifications_router,
        order_router,
        product_router,
        category_router,
        address_router,
        user_router,
        customer_router,
        seller_router,
    ):
        app.include_router(router, prefix=API_PREFIX)
