"""Flutterwave hosted-checkout adapter.

Speaks the v3 REST API with ``requests``:

* ``POST {base}/payments`` opens a hosted checkout and returns its link.
* ``GET {base}/transactions/{id}/verify`` returns the authoritative
  status of a transaction reported by a webhook.

Network and HTTP failures never escape as exceptions; they come back as
an unsuccessful :class:`PaymentLink` or a :class:`TransactionStatus`
without a status.
"""

import requests
import structlog

from agrimarket.payments.port import PaymentGateway, PaymentLink, PaymentRequest, TransactionStatus

logger = structlog.get_logger(__name__)

PAYMENT_OPTIONS = "card,mobilemoney,ussd"


class FlutterwaveGateway(PaymentGateway):
    def __init__(self, base_url: str, secret_key: str, timeout: float = 15.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.secret_key = secret_key
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "Authorization": f"Bearer {secret_key}",
            }
        )

    def _payload(self, request: PaymentRequest) -> dict:
        payload = {
            "tx_ref": request.tx_ref,
            "amount": request.amount,
            "currency": request.currency,
            "redirect_url": request.redirect_url,
            "payment_options": PAYMENT_OPTIONS,
            "meta": request.meta,
            "customer": {
                "email": request.customer_email,
                "phonenumber": request.customer_phone,
                "name": request.customer_name,
            },
        }
        if request.title or request.description:
            payload["customizations"] = {"title": request.title, "description": request.description}
        return payload

    def create_payment(self, request: PaymentRequest) -> PaymentLink:
        try:
            response = self.session.post(
                f"{self.base_url}/payments",
                json=self._payload(request),
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.warning("flutterwave_payment_failed", tx_ref=request.tx_ref, error=str(exc))
            return PaymentLink(success=False, message=str(exc))

        data = body.get("data") or {}
        link = data.get("link")
        if body.get("status") != "success" or not link:
            message = body.get("message") or "No payment link returned"
            logger.warning("flutterwave_payment_rejected", tx_ref=request.tx_ref, message=message)
            return PaymentLink(success=False, message=message)

        logger.info("flutterwave_payment_created", tx_ref=request.tx_ref)
        return PaymentLink(
            success=True,
            link=link,
            tx_ref=data.get("tx_ref") or request.tx_ref,
            message=body.get("message"),
        )

    def verify_transaction(self, transaction_id: str) -> TransactionStatus:
        try:
            response = self.session.get(
                f"{self.base_url}/transactions/{transaction_id}/verify",
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json().get("data") or {}
        except (requests.RequestException, ValueError) as exc:
            logger.warning("flutterwave_verification_failed", transaction_id=transaction_id, error=str(exc))
            return TransactionStatus(status=None)

        return TransactionStatus(
            status=data.get("status"),
            tx_ref=data.get("tx_ref"),
            amount=data.get("amount"),
            currency=data.get("currency"),
        )
