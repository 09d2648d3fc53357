"""Customer aggregate: the user record orders are attributed to.

Sellers are customers whose ``is_admin`` flag is set; they manage the
catalogue and orders and may carry company details.

Customers are keyed by the same identifier carried in the ``_id`` claim of
their access token, so an authenticated request maps directly to a record.
"""

import re
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from agrimarket.domain import agrimarket
from agrimarket.identity.events import CustomerProfileSaved

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_RE = re.compile(r"^\+?[1-9]\d{1,14}$")


class CustomerStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


@agrimarket.aggregate
class Customer:
    customer_id: Identifier(identifier=True)
    full_name: String(required=True, max_length=150)
    email: String(max_length=254)
    phone_number: String(max_length=20)
    status: String(choices=CustomerStatus, default=CustomerStatus.ACTIVE.value)
    is_admin: Boolean(default=False)
    company_name: String(max_length=150)
    company_address: String(max_length=255)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def must_be_reachable(self):
        if not self.email and not self.phone_number:
            raise ValidationError({"email": ["Email is required if phone number is not provided"]})

    @invariant.post
    def contact_details_must_be_well_formed(self):
        if self.email and not _EMAIL_RE.match(self.email):
            raise ValidationError({"email": ["Invalid email format"]})
        if self.phone_number and not _PHONE_RE.match(self.phone_number):
            raise ValidationError({"phone_number": ["Invalid phone number format"]})

    @classmethod
    def register(
        cls,
        customer_id,
        full_name,
        email=None,
        phone_number=None,
        is_admin=False,
        company_name=None,
        company_address=None,
    ):
        now = datetime.now(UTC)
        customer = cls(
            customer_id=customer_id,
            full_name=full_name,
            email=email,
            phone_number=phone_number,
            is_admin=is_admin,
            company_name=company_name,
            company_address=company_address,
            created_at=now,
            updated_at=now,
        )
        customer._profile_saved(now)
        return customer

    def update_profile(self, full_name=None, email=None, phone_number=None, company_name=None, company_address=None):
        if full_name is not None:
            self.full_name = full_name
        if email is not None:
            self.email = email
        if phone_number is not None:
            self.phone_number = phone_number
        if company_name is not None:
            self.company_name = company_name
        if company_address is not None:
            self.company_address = company_address

        now = datetime.now(UTC)
        self.updated_at = now
        self._profile_saved(now)

    @property
    def is_seller(self):
        return bool(self.is_admin)

    def _profile_saved(self, now):
        self.raise_(
            CustomerProfileSaved(
                customer_id=self.customer_id,
                full_name=self.full_name,
                email=self.email,
                saved_at=now,
            )
        )
