"""Domain events for the Customer and Address aggregates."""

from protean.fields import DateTime, Identifier, String

from agrimarket.domain import agrimarket


@agrimarket.event(part_of="Customer")
class CustomerProfileSaved:
    """A customer's profile was created or changed."""

    __version__ = 1

    customer_id: Identifier(required=True)
    full_name: String(required=True)
    email: String()
    saved_at: DateTime(required=True)


@agrimarket.event(part_of="Address")
class AddressAdded:
    """A customer added a shipping address to their address book."""

    __version__ = 1

    address_id: Identifier(required=True)
    user_id: Identifier(required=True)
    city: String(required=True)
    district: String(required=True)


@agrimarket.event(part_of="Address")
class AddressUpdated:
    """A shipping address was edited by its owner."""

    __version__ = 1

    address_id: Identifier(required=True)
    user_id: Identifier(required=True)
