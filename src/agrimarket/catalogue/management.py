"""Catalogue management: category and product commands and handlers."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from agrimarket.catalogue.category import Category
from agrimarket.catalogue.product import Product
from agrimarket.domain import agrimarket

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------
@agrimarket.command(part_of="Category")
class CreateCategory:
    name: String(max_length=100)
    description: Text()
    image: String(max_length=1000)
    status: String(max_length=20)


@agrimarket.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100)
    description: Text()
    image: String(max_length=1000)
    status: String(max_length=20)


@agrimarket.command(part_of="Category")
class DeleteCategory:
    category_id: Identifier(required=True)


def load_category(category_id):
    category = current_domain.repository_for(Category).get_or_none(category_id)
    if category is None:
        raise ObjectNotFoundError("Category not found")
    return category


@agrimarket.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        category = Category.create(
            name=command.name,
            description=command.description,
            image=command.image,
            status=command.status,
        )
        current_domain.repository_for(Category).add(category)
        logger.info("category_created", category_id=str(category.id), name=category.name)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        category = load_category(command.category_id)
        category.update_details(
            name=command.name,
            description=command.description,
            image=command.image,
            status=command.status,
        )
        current_domain.repository_for(Category).add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = load_category(command.category_id)
        repo._dao.delete(category)
        logger.info("category_deleted", category_id=str(command.category_id))


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------
@agrimarket.command(part_of="Product")
class AddProduct:
    name: String(required=True, max_length=255)
    description: Text()
    unit: String(required=True, max_length=50)
    price: Float(required=True, min_value=0.0)
    offer_price: Float(min_value=0.0)
    image: String(max_length=1000)
    category_id: Identifier(required=True)
    in_stock: Boolean()


@agrimarket.command(part_of="Product")
class UpdateProduct:
    product_id: Identifier(required=True)
    name: String(max_length=255)
    description: Text()
    unit: String(max_length=50)
    price: Float(min_value=0.0)
    offer_price: Float(min_value=0.0)
    image: String(max_length=1000)
    category_id: Identifier()
    in_stock: Boolean()


@agrimarket.command(part_of="Product")
class ToggleStock:
    product_id: Identifier(required=True)


@agrimarket.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)


def load_product(product_id):
    product = current_domain.repository_for(Product).get_or_none(product_id)
    if product is None:
        raise ObjectNotFoundError("Product not found")
    return product


@agrimarket.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        load_category(command.category_id)

        product = Product.create(
            name=command.name,
            description=command.description,
            unit=command.unit,
            price=command.price,
            offer_price=command.offer_price,
            image=command.image,
            category_id=command.category_id,
            in_stock=command.in_stock,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("product_added", product_id=str(product.id), category_id=str(product.category_id))
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        product = load_product(command.product_id)
        if command.category_id:
            load_category(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            unit=command.unit,
            price=command.price,
            offer_price=command.offer_price,
            image=command.image,
            category_id=command.category_id,
            in_stock=command.in_stock,
        )
        current_domain.repository_for(Product).add(product)

    @handle(ToggleStock)
    def toggle_stock(self, command):
        product = load_product(command.product_id)
        product.toggle_stock()
        current_domain.repository_for(Product).add(product)
        return product.in_stock

    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_product(command.product_id)
        current_domain.repository_for(Product)._dao.delete(product)
        logger.info("product_deleted", product_id=str(command.product_id))
