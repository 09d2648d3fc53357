"""Address aggregate: a customer's shipping address.

Addresses are owned by exactly one customer and are referenced (not
copied) by the orders shipped to them.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, String

from agrimarket.domain import agrimarket
from agrimarket.identity.events import AddressAdded, AddressUpdated

ADDRESS_FIELDS = ("description", "phone_number", "city", "street", "district")


@agrimarket.aggregate
class Address:
    user_id: Identifier(required=True)
    description: String(required=True, max_length=255)
    phone_number: String(required=True, max_length=20)
    city: String(required=True, max_length=100)
    street: String(required=True, max_length=255)
    district: String(required=True, max_length=100)
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, user_id, description, phone_number, city, street, district):
        values = {
            "description": description,
            "phone_number": phone_number,
            "city": city,
            "street": street,
            "district": district,
        }
        if not user_id or not all(values.values()):
            raise ValidationError({"address": ["Missing required fields"]})

        now = datetime.now(UTC)
        address = cls(user_id=user_id, created_at=now, updated_at=now, **values)
        address.raise_(
            AddressAdded(
                address_id=address.id,
                user_id=address.user_id,
                city=address.city,
                district=address.district,
            )
        )
        return address

    def assert_owned_by(self, user_id):
        """Hide other customers' addresses behind a not-found error."""
        if str(self.user_id) != str(user_id):
            raise ObjectNotFoundError("Address not found or not authorized")

    def update_details(self, **changes):
        for field_name in ADDRESS_FIELDS:
            value = changes.get(field_name)
            if value:
                setattr(self, field_name, value)

        self.updated_at = datetime.now(UTC)
        self.raise_(AddressUpdated(address_id=self.id, user_id=self.user_id))
