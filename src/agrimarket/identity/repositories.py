"""Read-side queries over customers and their addresses."""

from protean.utils.query import Q

from agrimarket.domain import agrimarket
from agrimarket.identity.address import Address
from agrimarket.identity.customer import Customer


@agrimarket.repository(part_of=Address)
class AddressRepository:
    def for_user(self, user_id) -> list[Address]:
        return self.query.filter(user_id=str(user_id)).order_by("-created_at").limit(None).all().items


@agrimarket.repository(part_of=Customer)
class CustomerRepository:
    def search(self, page=1, limit=10, search=None, sort_by="created_at", descending=True, sellers=False):
        """Page through customers (or sellers) matching ``search`` on name, email or phone."""
        query = self.query.filter(is_admin=sellers)
        if search:
            query = query.filter(
                Q(full_name__icontains=search) | Q(email__icontains=search) | Q(phone_number__icontains=search)
            )
        ordering = f"-{sort_by}" if descending else sort_by
        return query.order_by(ordering).offset((page - 1) * limit).limit(limit).all()
