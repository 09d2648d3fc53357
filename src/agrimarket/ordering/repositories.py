"""Lookups for carts and orders beyond fetching by identity."""

from datetime import datetime

from protean.utils.query import Q

from agrimarket.domain import agrimarket
from agrimarket.ordering.cart import ShoppingCart
from agrimarket.ordering.order import Order


@agrimarket.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_customer(self, customer_id) -> ShoppingCart | None:
        return self.query.filter(customer_id=str(customer_id)).all().first


@agrimarket.repository(part_of=Order)
class OrderRepository:
    def by_tx_ref(self, tx_ref) -> Order | None:
        return self.query.filter(tx_ref=tx_ref).all().first

    def for_customer(self, customer_id, page=1, limit=10):
        return (
            self.query.filter(customer_id=str(customer_id))
            .order_by("-created_at")
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

    def all_for_customer(self, customer_id) -> list[Order]:
        return self.query.filter(customer_id=str(customer_id)).order_by("-created_at").limit(None).all().items

    def search(
        self,
        page=1,
        limit=20,
        search: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ):
        """Page through all orders, newest first.

        ``search`` matches the customer's name or email case-insensitively;
        ``start``/``end`` bound the creation time inclusively.
        """
        query = self.query
        if search:
            query = query.filter(Q(customer_name__icontains=search) | Q(customer_email__icontains=search))
        if start:
            query = query.filter(created_at__gte=start)
        if end:
            query = query.filter(created_at__lte=end)
        return query.order_by("-created_at").offset((page - 1) * limit).limit(limit).all()

    def created_since(self, since: datetime | None = None) -> list[Order]:
        query = self.query
        if since:
            query = query.filter(created_at__gte=since)
        return query.order_by("created_at").limit(None).all().items
