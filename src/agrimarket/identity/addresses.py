"""Address book management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.identity.address import Address


@agrimarket.command(part_of="Address")
class CreateAddress:
    user_id: Identifier(required=True)
    description: String(max_length=255)
    phone_number: String(max_length=20)
    city: String(max_length=100)
    street: String(max_length=255)
    district: String(max_length=100)


@agrimarket.command(part_of="Address")
class UpdateAddress:
    address_id: Identifier(required=True)
    user_id: Identifier(required=True)
    description: String(max_length=255)
    phone_number: String(max_length=20)
    city: String(max_length=100)
    street: String(max_length=255)
    district: String(max_length=100)


@agrimarket.command(part_of="Address")
class DeleteAddress:
    address_id: Identifier(required=True)
    user_id: Identifier(required=True)


def load_owned_address(address_id, user_id):
    address = current_domain.repository_for(Address).get_or_none(address_id)
    if address is None:
        raise ObjectNotFoundError("Address not found or not authorized")
    address.assert_owned_by(user_id)
    return address


@agrimarket.command_handler(part_of=Address)
class ManageAddressHandler:
    @handle(CreateAddress)
    def create_address(self, command):
        address = Address.create(
            user_id=command.user_id,
            description=command.description,
            phone_number=command.phone_number,
            city=command.city,
            street=command.street,
            district=command.district,
        )
        current_domain.repository_for(Address).add(address)
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        address = load_owned_address(command.address_id, command.user_id)
        address.update_details(
            description=command.description,
            phone_number=command.phone_number,
            city=command.city,
            street=command.street,
            district=command.district,
        )
        current_domain.repository_for(Address).add(address)

    @handle(DeleteAddress)
    def delete_address(self, command):
        address = load_owned_address(command.address_id, command.user_id)
        current_domain.repository_for(Address)._dao.delete(address)
