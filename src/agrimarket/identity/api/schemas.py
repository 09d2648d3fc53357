"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from agrimarket.utils.api import CamelModel, Envelope

# --- Address Schemas ---


class AddressRequest(CamelModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "description": "Home",
                    "phoneNumber": "+250 788 123 456",
                    "city": "Kigali",
                    "street": "KG 11 Ave",
                    "district": "Gasabo",
                }
            ]
        },
    }

    description: str | None = Field(None, max_length=255)
    phone_number: str | None = Field(None, max_length=20)
    city: str | None = Field(None, max_length=100)
    street: str | None = Field(None, max_length=255)
    district: str | None = Field(None, max_length=100)


class AddressOut(CamelModel):
    id: str
    user_id: str
    description: str
    phone_number: str
    city: str
    street: str
    district: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_address(cls, address) -> AddressOut:
        return cls.model_validate(address.to_dict())


class AddressResponse(Envelope):
    address: AddressOut


class AddressListResponse(Envelope):
    addresses: list[AddressOut]


# --- Customer Schemas ---


class ProfileRequest(CamelModel):
    model_config = {
        "str_strip_whitespace": True,
        "json_schema_extra": {
            "examples": [
                {
                    "fullName": "Aline Uwase",
                    "email": "aline@example.com",
                    "phoneNumber": "+250788123456",
                }
            ]
        },
    }

    full_name: str = Field(..., max_length=150)
    email: str | None = Field(None, max_length=254)
    phone_number: str | None = Field(None, max_length=20)
    company_name: str | None = Field(None, max_length=150)
    company_address: str | None = Field(None, max_length=255)


class CustomerOut(CamelModel):
    customer_id: str
    full_name: str
    email: str | None = None
    phone_number: str | None = None
    status: str
    is_admin: bool = False
    company_name: str | None = None
    company_address: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_customer(cls, customer) -> CustomerOut:
        return cls.model_validate(customer.to_dict())


class ProfileResponse(Envelope):
    user: CustomerOut


class CustomerSummaryOut(CustomerOut):
    orders_count: int = 0
    spent: float = 0
    last_order: datetime | None = None


class CustomerListResponse(Envelope):
    customers: list[CustomerSummaryOut]
    current_page: int
    total_pages: int
    total_customers: int


class CustomerDetailResponse(Envelope):
    customer: CustomerOut
    addresses: list[AddressOut]


CustomerSort = Literal["createdAt", "fullName", "email"]


# --- Seller Schemas ---


class SellerUpdateRequest(CamelModel):
    model_config = {"str_strip_whitespace": True}

    full_name: str | None = Field(None, max_length=150)
    email: str | None = Field(None, max_length=254)
    phone_number: str | None = Field(None, max_length=20)
    company_name: str | None = Field(None, max_length=150)
    company_address: str | None = Field(None, max_length=255)


class SellerOut(CamelModel):
    id: str
    full_name: str
    email: str | None = None
    phone_number: str | None = None
    company_name: str | None = None
    company_address: str | None = None
    is_seller: bool = True
    is_admin: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_seller(cls, seller) -> SellerOut:
        return cls.model_validate({**seller.to_dict(), "id": str(seller.customer_id)})


class SellerPagination(CamelModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool
    next_page: int | None = None
    prev_page: int | None = None


class SellerListResponse(Envelope):
    sellers: list[SellerOut]
    pagination: SellerPagination


class SellerResponse(Envelope):
    seller: SellerOut

