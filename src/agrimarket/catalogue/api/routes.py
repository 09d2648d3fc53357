"""FastAPI endpoints for the catalogue: categories, products and ratings."""

from fastapi import APIRouter, Depends, Request
from protean.utils.globals import current_domain

from agrimarket.auth import CurrentUser, admin_user, current_user
from agrimarket.catalogue.api.schemas import (
    CategoryListResponse,
    CategoryOut,
    CategoryProductsResponse,
    CategoryRequest,
    CategoryResponse,
    ProductListResponse,
    ProductOut,
    ProductRequest,
    ProductResponse,
    RatingResponse,
    StockResponse,
)
from agrimarket.catalogue.category import Category
from agrimarket.catalogue.management import (
    AddProduct,
    CreateCategory,
    DeleteCategory,
    DeleteProduct,
    ToggleStock,
    UpdateCategory,
    UpdateProduct,
    load_category,
    load_product,
)
from agrimarket.catalogue.product import Product
from agrimarket.catalogue.rating import RateProduct
from agrimarket.utils.api import Envelope, decode_body, pagination

product_router = APIRouter(prefix="/product", tags=["products"])
category_router = APIRouter(prefix="/category", tags=["categories"])


# --- Product endpoints ---


@product_router.post("/addProduct", status_code=201, response_model=ProductResponse)
async def add_product(request: Request, _: CurrentUser = Depends(admin_user)) -> ProductResponse:
    body = await decode_body(request, ProductRequest, "productData", "product")
    command = AddProduct(
        name=body.name,
        description=body.description,
        unit=body.unit,
        price=body.price,
        offer_price=body.offer_price,
        image=body.image,
        category_id=body.category_id,
        in_stock=body.in_stock,
    )
    product_id = current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductResponse(message="Product added successfully", product=ProductOut.from_product(product))


@product_router.get("/getAllProducts", response_model=ProductListResponse)
async def get_all_products(
    page: int = 1, limit: int = 15, search: str | None = None, category: str | None = None
) -> ProductListResponse:
    page, limit = max(page, 1), max(limit, 1)
    results = current_domain.repository_for(Product).search(
        page=page, limit=limit, search=search, category_id=category
    )
    return ProductListResponse(
        product_list=[ProductOut.from_product(p) for p in results.items],
        pagination=pagination(results.total, page, limit, "totalProducts"),
    )


@product_router.get("/getProductDetails/{product_id}", response_model=ProductResponse)
async def get_product_details(product_id: str) -> ProductResponse:
    return ProductResponse(product=ProductOut.from_product(load_product(product_id)))


@product_router.post("/stock/{product_id}", response_model=StockResponse)
async def toggle_stock(product_id: str, _: CurrentUser = Depends(admin_user)) -> StockResponse:
    in_stock = current_domain.process(ToggleStock(product_id=product_id), asynchronous=False)
    message = "Product marked as in stock" if in_stock else "Product marked as out of stock"
    return StockResponse(message=message, in_stock=in_stock)


@product_router.delete("/deleteProduct/{product_id}", response_model=Envelope)
async def delete_product(product_id: str, _: CurrentUser = Depends(admin_user)) -> Envelope:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return Envelope(message="Product deleted successfully")


@product_router.put("/updateProduct/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str, request: Request, _: CurrentUser = Depends(admin_user)
) -> ProductResponse:
    body = await decode_body(request, ProductRequest, "productData", "product")
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        unit=body.unit,
        price=body.price,
        offer_price=body.offer_price,
        image=body.image,
        category_id=body.category_id,
        in_stock=body.in_stock,
    )
    current_domain.process(command, asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ProductResponse(message="Product updated successfully", product=ProductOut.from_product(product))


@product_router.put("/rateProduct/{product_id}", response_model=RatingResponse)
async def rate_product(product_id: str, user: CurrentUser = Depends(current_user)) -> RatingResponse:
    incremented = current_domain.process(
        RateProduct(product_id=product_id, user_id=user.user_id),
        asynchronous=False,
    )
    product = current_domain.repository_for(Product).get(product_id)
    message = "Rating incremented successfully" if incremented else "Rating added successfully"
    return RatingResponse(message=message, product=ProductOut.from_product(product))


# --- Category endpoints ---


@category_router.post("/addCategory", status_code=201, response_model=CategoryResponse)
async def add_category(request: Request, _: CurrentUser = Depends(admin_user)) -> CategoryResponse:
    body = await decode_body(request, CategoryRequest, "categoryData", "category")
    command = CreateCategory(
        name=body.name,
        description=body.description,
        image=body.image,
        status=body.status,
    )
    category_id = current_domain.process(command, asynchronous=False)
    category = current_domain.repository_for(Category).get(category_id)
    return CategoryResponse(message="Category added successfully", category=CategoryOut.from_category(category))


@category_router.get("/getAllCategories", response_model=CategoryListResponse)
async def get_all_categories() -> CategoryListResponse:
    categories = current_domain.repository_for(Category).newest_first()
    return CategoryListResponse(categories=[CategoryOut.from_category(c) for c in categories])


@category_router.get("/{category_id}/products", response_model=CategoryProductsResponse)
async def get_category_products(category_id: str, page: int = 1, limit: int = 10) -> CategoryProductsResponse:
    page, limit = max(page, 1), max(limit, 1)
    category = load_category(category_id)
    results = current_domain.repository_for(Product).in_category(category_id, page=page, limit=limit)
    return CategoryProductsResponse(
        category=CategoryOut.from_category(category),
        products=[ProductOut.from_product(p) for p in results.items],
        pagination=pagination(results.total, page, limit, "totalProducts"),
    )


@category_router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: str, request: Request, _: CurrentUser = Depends(admin_user)
) -> CategoryResponse:
    body = await decode_body(request, CategoryRequest, "categoryData", "category")
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        image=body.image,
        status=body.status,
    )
    current_domain.process(command, asynchronous=False)
    category = current_domain.repository_for(Category).get(category_id)
    return CategoryResponse(message="Category updated successfully", category=CategoryOut.from_category(category))


@category_router.delete("/{category_id}", response_model=Envelope)
async def delete_category(category_id: str, _: CurrentUser = Depends(admin_user)) -> Envelope:
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return Envelope(message="Category deleted successfully")
