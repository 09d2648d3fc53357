"""Read-side queries over categories and products."""

from agrimarket.catalogue.category import Category
from agrimarket.catalogue.product import Product
from agrimarket.domain import agrimarket


@agrimarket.repository(part_of=Category)
class CategoryRepository:
    def newest_first(self) -> list[Category]:
        return self.query.order_by("-created_at").limit(None).all().items


@agrimarket.repository(part_of=Product)
class ProductRepository:
    def search(self, page=1, limit=15, search=None, category_id=None):
        """Page through products, newest first.

        ``search`` matches the product name case-insensitively.
        """
        query = self.query
        if search:
            query = query.filter(name__icontains=search)
        if category_id:
            query = query.filter(category_id=category_id)
        return query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

    def in_category(self, category_id, page=1, limit=10):
        return self.search(page=page, limit=limit, category_id=category_id)

    def by_ids(self, product_ids) -> dict[str, Product]:
        ids = list({str(product_id) for product_id in product_ids})
        if not ids:
            return {}
        products = self.query.filter(id__in=ids).limit(None).all().items
        return {str(product.id): product for product in products}
