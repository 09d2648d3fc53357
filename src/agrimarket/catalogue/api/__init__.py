"""Catalogue API package."""

from agrimarket.catalogue.api.routes import category_router, product_router

__all__ = ["product_router", "category_router"]
