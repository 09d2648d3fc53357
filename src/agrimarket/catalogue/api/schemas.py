"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from agrimarket.utils.api import CamelModel, Envelope

# --- Category Schemas ---


class CategoryRequest(CamelModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Vegetables",
                    "description": "Fresh vegetables from local farms",
                    "image": "https://cdn.example.com/categories/vegetables.jpg",
                    "status": "active",
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=100)
    description: str | None = None
    image: str | None = Field(None, max_length=1000)
    status: Literal["active", "inactive"] | None = None


class CategoryOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    image: str | None = None
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_category(cls, category) -> CategoryOut:
        return cls.model_validate(category.to_dict())


class CategoryResponse(Envelope):
    category: CategoryOut


class CategoryListResponse(Envelope):
    categories: list[CategoryOut]


# --- Product Schemas ---


class ProductRequest(CamelModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Irish Potatoes",
                    "description": "Kinigi potatoes, washed",
                    "unit": "kg",
                    "price": 1000,
                    "offerPrice": 900,
                    "image": "https://cdn.example.com/products/potatoes.jpg",
                    "categoryId": "6a1f0c2e-...",
                    "inStock": True,
                }
            ]
        }
    }

    name: str | None = Field(None, max_length=255)
    description: str | None = None
    unit: str | None = Field(None, max_length=50)
    price: float | None = Field(None, ge=0)
    offer_price: float | None = Field(None, ge=0)
    image: str | None = Field(None, max_length=1000)
    category_id: str | None = None
    in_stock: bool | None = None


class RatingOut(CamelModel):
    user_id: str
    rating: int
    rated_at: datetime | None = None


class ProductOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    unit: str
    price: float
    offer_price: float | None = None
    image: str | None = None
    category_id: str
    in_stock: bool
    ratings: list[RatingOut] = []
    average_rating: float = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_product(cls, product) -> ProductOut:
        return cls.model_validate({**product.to_dict(), "average_rating": product.average_rating})


class ProductResponse(Envelope):
    product: ProductOut


class ProductListResponse(Envelope):
    product_list: list[ProductOut]
    pagination: dict


class CategoryProductsResponse(Envelope):
    category: CategoryOut
    products: list[ProductOut]
    pagination: dict


class StockResponse(Envelope):
    in_stock: bool


class RatingResponse(Envelope):
    product: ProductOut
