"""Customer profile: create-or-update of the caller's own record."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from agrimarket.domain import agrimarket
from agrimarket.identity.customer import Customer

logger = structlog.get_logger(__name__)


@agrimarket.command(part_of="Customer")
class SaveCustomerProfile:
    customer_id: Identifier(required=True)
    full_name: String(max_length=150)
    email: String(max_length=254)
    phone_number: String(max_length=20)
    is_admin: Boolean(default=False)
    company_name: String(max_length=150)
    company_address: String(max_length=255)


@agrimarket.command_handler(part_of=Customer)
class CustomerProfileHandler:
    @handle(SaveCustomerProfile)
    def save_profile(self, command):
        repo = current_domain.repository_for(Customer)
        customer = repo.get_or_none(command.customer_id)

        if customer is None:
            customer = Customer.register(
                customer_id=command.customer_id,
                full_name=command.full_name,
                email=command.email,
                phone_number=command.phone_number,
                is_admin=command.is_admin,
                company_name=command.company_name,
                company_address=command.company_address,
            )
            logger.info("customer_registered", customer_id=str(command.customer_id))
        else:
            customer.update_profile(
                full_name=command.full_name,
                email=command.email,
                phone_number=command.phone_number,
                company_name=command.company_name,
                company_address=command.company_address,
            )

        repo.add(customer)
        return str(customer.customer_id)
