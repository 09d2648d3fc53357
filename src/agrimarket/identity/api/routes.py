"""FastAPI routes for identity: addresses, the caller's profile, customer and seller administration."""

import math

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from agrimarket.auth import CurrentUser, admin_user, current_user
from agrimarket.identity.address import Address
from agrimarket.identity.addresses import CreateAddress, DeleteAddress, UpdateAddress
from agrimarket.identity.api.schemas import (
    AddressListResponse,
    AddressOut,
    AddressRequest,
    AddressResponse,
    CustomerDetailResponse,
    CustomerListResponse,
    CustomerOut,
    CustomerSort,
    CustomerSummaryOut,
    ProfileRequest,
    ProfileResponse,
    SellerListResponse,
    SellerOut,
    SellerPagination,
    SellerResponse,
    SellerUpdateRequest,
)
from agrimarket.identity.customer import Customer
from agrimarket.identity.profile import SaveCustomerProfile
from agrimarket.identity.sellers import RemoveSeller, UpdateSeller, load_seller
from agrimarket.ordering.api.schemas import OrderOut
from agrimarket.ordering.order import Order
from agrimarket.ordering.statistics import customer_order_summaries
from agrimarket.utils.api import Envelope

_SORT_FIELDS = {"createdAt": "created_at", "fullName": "full_name", "email": "email"}


def load_customer(customer_id) -> Customer:
    customer = current_domain.repository_for(Customer).get_or_none(customer_id)
    if customer is None:
        raise ObjectNotFoundError("Customer not found")
    return customer


# ---------------------------------------------------------------------------
# Address book
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/address", tags=["addresses"])


@address_router.post("/create", status_code=201, response_model=AddressResponse)
async def create_address(body: AddressRequest, user: CurrentUser = Depends(current_user)) -> AddressResponse:
    command = CreateAddress(
        user_id=user.user_id,
        description=body.description,
        phone_number=body.phone_number,
        city=body.city,
        street=body.street,
        district=body.district,
    )
    address_id = current_domain.process(command, asynchronous=False)
    address = current_domain.repository_for(Address).get(address_id)
    return AddressResponse(message="Address created successfully", address=AddressOut.from_address(address))


@address_router.get("/allAddress", response_model=AddressListResponse)
async def get_all_addresses(user: CurrentUser = Depends(current_user)) -> AddressListResponse:
    addresses = current_domain.repository_for(Address).for_user(user.user_id)
    return AddressListResponse(addresses=[AddressOut.from_address(a) for a in addresses])


@address_router.put("/update/{address_id}", response_model=AddressResponse)
async def update_address(
    address_id: str, body: AddressRequest, user: CurrentUser = Depends(current_user)
) -> AddressResponse:
    command = UpdateAddress(
        address_id=address_id,
        user_id=user.user_id,
        description=body.description,
        phone_number=body.phone_number,
        city=body.city,
        street=body.street,
        district=body.district,
    )
    current_domain.process(command, asynchronous=False)
    address = current_domain.repository_for(Address).get(address_id)
    return AddressResponse(message="Address updated successfully", address=AddressOut.from_address(address))


@address_router.delete("/delete/{address_id}", response_model=Envelope)
async def delete_address(address_id: str, user: CurrentUser = Depends(current_user)) -> Envelope:
    current_domain.process(DeleteAddress(address_id=address_id, user_id=user.user_id), asynchronous=False)
    return Envelope(message="Address deleted successfully")


# ---------------------------------------------------------------------------
# Caller's profile
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/user", tags=["users"])


@user_router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: CurrentUser = Depends(current_user)) -> ProfileResponse:
    customer = current_domain.repository_for(Customer).get_or_none(user.user_id)
    if customer is None:
        raise ObjectNotFoundError("User not found")
    return ProfileResponse(user=CustomerOut.from_customer(customer))


@user_router.put("/profile", response_model=ProfileResponse)
async def save_profile(body: ProfileRequest, user: CurrentUser = Depends(current_user)) -> ProfileResponse:
    command = SaveCustomerProfile(
        customer_id=user.user_id,
        full_name=body.full_name,
        email=body.email,
        phone_number=body.phone_number,
        is_admin=user.is_admin,
        company_name=body.company_name,
        company_address=body.company_address,
    )
    current_domain.process(command, asynchronous=False)
    customer = current_domain.repository_for(Customer).get(user.user_id)
    return ProfileResponse(message="Profile saved successfully", user=CustomerOut.from_customer(customer))


# ---------------------------------------------------------------------------
# Customer administration
# ---------------------------------------------------------------------------
customer_router = APIRouter(prefix="/customer", tags=["customers"])


@customer_router.get("/getAllCustomers", response_model=CustomerListResponse)
async def get_all_customers(
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    sort_by: CustomerSort = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    _: CurrentUser = Depends(admin_user),
) -> CustomerListResponse:
    page, limit = max(page, 1), max(limit, 1)
    results = current_domain.repository_for(Customer).search(
        page=page,
        limit=limit,
        search=search,
        sort_by=_SORT_FIELDS[sort_by],
        descending=sort_order != "asc",
    )
    summaries = customer_order_summaries(c.customer_id for c in results.items)
    customers = []
    for customer in results.items:
        summary = summaries[str(customer.customer_id)]
        customers.append(
            CustomerSummaryOut.model_validate(
                {
                    **customer.to_dict(),
                    "orders_count": summary["order_count"],
                    "spent": summary["total_spent"],
                    "last_order": summary["last_order_date"],
                }
            )
        )
    return CustomerListResponse(
        customers=customers,
        current_page=page,
        total_pages=results.total_pages,
        total_customers=results.total,
    )


@customer_router.get("/getCustomerById/{customer_id}", response_model=CustomerDetailResponse)
async def get_customer_by_id(customer_id: str, _: CurrentUser = Depends(admin_user)) -> CustomerDetailResponse:
    customer = load_customer(customer_id)
    addresses = current_domain.repository_for(Address).for_user(customer_id)
    return CustomerDetailResponse(
        customer=CustomerOut.from_customer(customer),
        addresses=[AddressOut.from_address(a) for a in addresses],
    )


@customer_router.get("/getCustomerOrders/{customer_id}", response_model=list[OrderOut])
async def get_customer_orders(customer_id: str, _: CurrentUser = Depends(admin_user)) -> list[OrderOut]:
    load_customer(customer_id)
    address_repo = current_domain.repository_for(Address)
    return [
        OrderOut.from_order(order, address_repo.get_or_none(order.address_id))
        for order in current_domain.repository_for(Order).all_for_customer(customer_id)
    ]


# ---------------------------------------------------------------------------
# Seller administration
# ---------------------------------------------------------------------------
seller_router = APIRouter(prefix="/seller", tags=["sellers"])


@seller_router.get("/getAllSeller", response_model=SellerListResponse)
async def get_all_sellers(
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    sort_by: CustomerSort = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    _: CurrentUser = Depends(admin_user),
) -> SellerListResponse:
    page, limit = max(page, 1), max(limit, 1)
    results = current_domain.repository_for(Customer).search(
        page=page,
        limit=limit,
        search=search,
        sort_by=_SORT_FIELDS[sort_by],
        descending=sort_order != "asc",
        sellers=True,
    )
    total_pages = math.ceil(results.total / limit)
    has_next, has_prev = page < total_pages, page > 1 and results.total > 0

    message = None
    if results.total == 0:
        message = "No sellers found matching your search" if search else "No sellers found"

    return SellerListResponse(
        message=message,
        sellers=[SellerOut.from_seller(s) for s in results.items],
        pagination=SellerPagination(
            current_page=page,
            total_pages=total_pages,
            total_items=results.total,
            items_per_page=limit,
            has_next_page=has_next,
            has_prev_page=has_prev,
            next_page=page + 1 if has_next else None,
            prev_page=page - 1 if has_prev else None,
        ),
    )


@seller_router.get("/getSeller/{seller_id}", response_model=SellerResponse)
async def get_seller(seller_id: str, _: CurrentUser = Depends(admin_user)) -> SellerResponse:
    return SellerResponse(seller=SellerOut.from_seller(load_seller(seller_id)))


@seller_router.put("/update/{seller_id}", response_model=SellerResponse)
async def update_seller(
    seller_id: str, body: SellerUpdateRequest, _: CurrentUser = Depends(admin_user)
) -> SellerResponse:
    command = UpdateSeller(
        seller_id=seller_id,
        full_name=body.full_name,
        email=body.email,
        phone_number=body.phone_number,
        company_name=body.company_name,
        company_address=body.company_address,
    )
    current_domain.process(command, asynchronous=False)
    return SellerResponse(message="Seller updated successfully", seller=SellerOut.from_seller(load_seller(seller_id)))


@seller_router.delete("/delete/{seller_id}", response_model=Envelope)
async def delete_seller(seller_id: str, _: CurrentUser = Depends(admin_user)) -> Envelope:
    current_domain.process(RemoveSeller(seller_id=seller_id), asynchronous=False)
    return Envelope(message="Seller deleted successfully")
