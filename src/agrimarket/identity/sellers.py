"""Seller management: administrator edits and removal of seller accounts."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.identity.customer import Customer

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="Customer")
class UpdateSeller:
    seller_id: Identifier(required=True)
    full_name: String(max_length=150)
    email: String(max_length=254)
    phone_number: String(max_length=20)
    company_name: String(max_length=150)
    company_address: String(max_length=255)


@agrimarket.command(part_of="Customer")
class RemoveSeller:
    seller_id: Identifier(required=True)


def load_seller(seller_id) -> Customer:
    seller = current_domain.repository_for(Customer).get_or_none(seller_id)
    if seller is None or not seller.is_seller:
        raise ObjectNotFoundError("Seller not found")
    return seller


@agrimarket.command_handler(part_of=Customer)
class SellerManagementHandler:
    @handle(UpdateSeller)
    def update_seller(self, command):
        seller = load_seller(command.seller_id)
        # Blank values keep what is on record
        seller.update_profile(
            full_name=command.full_name or None,
            email=command.email or None,
            phone_number=command.phone_number or None,
            company_name=command.company_name or None,
            company_address=command.company_address or None,
        )
        current_domain.repository_for(Customer).add(seller)
        logger.info("seller_updated", seller_id=str(command.seller_id))

    @handle(RemoveSeller)
    def remove_seller(self, command):
        seller = load_seller(command.seller_id)
        current_domain.repository_for(Customer)._dao.delete(seller)
        logger.info("seller_removed", seller_id=str(command.seller_id))
