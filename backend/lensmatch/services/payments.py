"""Charge authorization gateway backed by Stripe PaymentIntents."""

import logging
from dataclasses import dataclass
from typing import Protocol

import stripe

from ..core.errors import PaymentAuthorizationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChargeAuthorization:
    id: str
    client_secret: str | None


class ChargeGateway(Protocol):
    """What the booking workflow needs from a payment processor."""

    def authorize(self, amount: int, metadata: dict[str, str]) -> ChargeAuthorization:
        """Reserve ``amount`` minor units; raise ``PaymentAuthorizationFailed`` on any failure."""

    def retrieve(self, authorization_id: str) -> ChargeAuthorization:
        """Return an existing authorization."""

    def cancel(self, authorization_id: str) -> None:
        """Void an authorization that will not be used."""


class StripeGateway:
    """
    Thin wrapper over ``stripe.PaymentIntent``.

    Network calls are bounded by ``timeout`` seconds with no client-side
    retries; any Stripe error surfaces as ``PaymentAuthorizationFailed``.
    """

    def __init__(self, api_key: str, currency: str = "usd", timeout: int = 20):
        self.api_key = api_key
        self.currency = currency
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    def authorize(self, amount: int, metadata: dict[str, str]) -> ChargeAuthorization:
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount,
                currency=self.currency,
                metadata=metadata,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.warning("Stripe authorization failed: %s", e)
            raise PaymentAuthorizationFailed() from e
        logger.info("PaymentIntent %s created for %s %s", intent.id, amount, self.currency)
        return ChargeAuthorization(id=intent.id, client_secret=intent.client_secret)

    def retrieve(self, authorization_id: str) -> ChargeAuthorization:
        try:
            intent = stripe.PaymentIntent.retrieve(authorization_id, api_key=self.api_key)
        except stripe.StripeError as e:
            logger.warning("Stripe retrieve failed for %s: %s", authorization_id, e)
            raise PaymentAuthorizationFailed() from e
        return ChargeAuthorization(id=intent.id, client_secret=intent.client_secret)

    def cancel(self, authorization_id: str) -> None:
        try:
            stripe.PaymentIntent.cancel(authorization_id, api_key=self.api_key)
        except stripe.StripeError as e:
            raise PaymentAuthorizationFailed(f"Could not cancel {authorization_id}") from e
