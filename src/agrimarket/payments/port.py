"""Payment gateway port (abstract interface).

Defines the contract the ordering flow relies on to collect online
payments. ``FlutterwaveGateway`` talks to the real hosted checkout and
``FakeGateway`` stands in for it in development and tests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class PaymentRequest:
    """Everything the gateway needs to open a hosted checkout for an order."""

    tx_ref: str
    amount: float
    currency: str
    redirect_url: str
    customer_email: str
    customer_phone: str
    customer_name: str
    meta: dict = field(default_factory=dict)
    title: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class PaymentLink:
    """Result of a payment initiation attempt."""

    success: bool
    link: str | None = None
    tx_ref: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class TransactionStatus:
    """A transaction as the gateway reports it when asked to verify it."""

    status: str | None
    tx_ref: str | None = None
    amount: float | None = None
    currency: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_payment(self, request: PaymentRequest) -> PaymentLink:
        """Open a hosted checkout and return the link the customer pays at."""
        ...

    @abstractmethod
    def verify_transaction(self, transaction_id: str) -> TransactionStatus:
        """Ask the gateway for the authoritative status of a transaction."""
        ...
