"""Configurable fake payment gateway for development and testing.

No network calls are made. Tests flip it between success and failure
with :meth:`FakeGateway.configure` and inspect ``calls`` afterwards.
"""

from uuid import uuid4

from agrimarket.payments.port import PaymentGateway, PaymentLink, PaymentRequest, TransactionStatus


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Gateway unavailable"
        self.verified_status: str = "successful"
        self.verified_tx_ref: str | None = None
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Gateway unavailable",
        verified_status: str = "successful",
        verified_tx_ref: str | None = None,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.verified_status = verified_status
        self.verified_tx_ref = verified_tx_ref

    def create_payment(self, request: PaymentRequest) -> PaymentLink:
        self.calls.append({"method": "create_payment", "request": request})

        if self.should_succeed:
            return PaymentLink(
                success=True,
                link=f"https://checkout.fake/pay/{uuid4().hex[:12]}",
                tx_ref=request.tx_ref,
                message="Hosted link",
            )
        return PaymentLink(success=False, message=self.failure_reason)

    def verify_transaction(self, transaction_id: str) -> TransactionStatus:
        self.calls.append({"method": "verify_transaction", "transaction_id": transaction_id})
        return TransactionStatus(status=self.verified_status, tx_ref=self.verified_tx_ref)
