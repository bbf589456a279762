"""
Payment orchestrator, the core execution engine.

Drives one payment attempt per inbound request. The flow for each payment
family (card, app/wallet):

  1. Request validation (no gateway call on failure)
  2. Credential resolution for the caller-named region
  3. Order creation; aborts the flow on any gateway rejection
  4. Payment creation against the new order id
  5. Response normalization → Completed / RedirectRequired / Unparseable
  6. Mapping the outcome to the relay's JSON contract

The two gateway calls are strictly sequential; the second needs the first's
order id. Nothing is retried: a replayed order could create a duplicate,
and payment submission is not guaranteed idempotent from here.

Failures are raised as RelayError subclasses (see app.engine.errors) and
rendered by the API layer.
"""

import logging
import time
from typing import Any

from app.audit.logger import log_event
from app.engine.errors import (
    MerchantValidationFailed,
    OrderCreationFailed,
    PaymentCreationFailed,
    UnparseableResponse,
    ValidationError,
)
from app.engine.normalizer import normalize
from app.engine.validation import (
    ValidationResult,
    check_app_request,
    check_card_request,
    check_merchant_validation_request,
    normalize_expiry_year,
)
from app.models.enums import AuditAction, PaymentFamily
from app.models.outcomes import Completed, NormalizedOutcome, RedirectRequired
from app.models.requests import AppPaymentRequest, CardPaymentRequest, MerchantValidationRequest
from app.providers.base import OrderRequest, OrderResult, PaymentGateway, PaymentRequest
from app.regions.resolver import CredentialResolver, RegionConfig

logger = logging.getLogger("payment_relay.orchestrator")

# Placeholders the gateway accepts when the wallet hides the payer's details
DEFAULT_APP_CONTACT = "+60123456789"
DEFAULT_APP_EMAIL = "applepay@example.com"
MERCHANT_VALIDATION_CONTACT = "+910000000000"

APP_REDIRECT_MESSAGE = "Redirect user to apple_pay_url to complete payment"


def _raise_if_invalid(result: ValidationResult) -> None:
    if not result.valid:
        raise ValidationError(result.message, missing=result.missing)


def _receipt(prefix: str) -> str:
    return f"{prefix}_{int(time.time() * 1000)}"


class PaymentOrchestrator:
    """Composes credential resolution, gateway calls and normalization."""

    def __init__(self, resolver: CredentialResolver, gateway: PaymentGateway):
        self.resolver = resolver
        self.gateway = gateway

    async def process_card_payment(self, request: CardPaymentRequest) -> dict[str, Any]:
        """
        Run a card payment end to end.

        Returns:
            The gateway result merged with the order on synchronous
            completion, or the step-up authentication instructions.

        Raises:
            ValidationError, ConfigError, GatewayUnreachable,
            OrderCreationFailed, PaymentCreationFailed, UnparseableResponse.
        """
        _raise_if_invalid(check_card_request(request))
        config = self.resolver.resolve(request.region)
        family = PaymentFamily.CARD

        card = request.card.model_dump(exclude_none=True)
        card["expiry_year"] = normalize_expiry_year(card["expiry_year"])

        order = await self._create_order(
            config,
            family,
            OrderRequest(
                amount=request.amount,
                currency=request.currency,
                receipt=_receipt("s2s"),
                notes={"integration": "s2s_card"},
            ),
        )

        payment = PaymentRequest(
            amount=request.amount,
            currency=request.currency,
            order_id=order.order_id,
            method=request.method,
            contact=request.contact,
            email=request.email,
            card=card,
            authentication=request.authentication,
            browser=request.browser,
            device_fingerprint=request.device_fingerprint,
            ip=request.ip,
            referer=request.referer,
            user_agent=request.user_agent,
        )
        logger.info(
            "Card payment: amount=%s currency=%s order=%s last4=%s shield=%s",
            request.amount,
            request.currency,
            order.order_id,
            card["number"][-4:],
            bool(request.device_fingerprint),
        )

        outcome = await self._create_payment(config, family, payment)

        if isinstance(outcome, RedirectRequired):
            return {
                "id": outcome.payment_id,
                "status": "authorized",
                "order_id": order.order_id,
                "authentication": {"authentication_url": outcome.url},
                "requires_3ds": True,
            }
        return {**outcome.payload, "order": order.payload}

    async def process_app_payment(self, request: AppPaymentRequest) -> dict[str, Any]:
        """
        Run an app/wallet payment (e.g. Apple Pay on the gateway's hosted page).

        Contact and email fall back to placeholders only when the caller
        left them out entirely; a supplied value is never replaced.
        """
        _raise_if_invalid(check_app_request(request))
        config = self.resolver.resolve(request.region)
        family = PaymentFamily.APP

        order = await self._create_order(
            config,
            family,
            OrderRequest(
                amount=request.amount,
                currency=request.currency,
                receipt=_receipt("s2s_applepay"),
                notes={"integration": "s2s_applepay"},
            ),
        )

        payment = PaymentRequest(
            amount=request.amount,
            currency=request.currency,
            order_id=order.order_id,
            method="card",  # Wallets ride on the card method; `app` picks the hosted page
            contact=DEFAULT_APP_CONTACT if request.contact is None else request.contact,
            email=DEFAULT_APP_EMAIL if request.email is None else request.email,
            app={"name": request.app},
        )

        outcome = await self._create_payment(config, family, payment)

        if isinstance(outcome, RedirectRequired):
            return {
                "id": outcome.payment_id,
                "status": "created",
                "order_id": order.order_id,
                "apple_pay_url": outcome.url,
                "requires_apple_pay": True,
                "message": APP_REDIRECT_MESSAGE,
            }
        return {**outcome.payload, "order": order.payload}

    async def validate_merchant_session(self, request: MerchantValidationRequest, default_region: str) -> Any:
        """
        Obtain the opaque merchant session a wallet SDK needs before paying.

        No order is created. The session blob is returned unmodified.

        Raises:
            ValidationError: Missing request fields.
            MerchantValidationFailed: Gateway rejected the call or sent no session.
        """
        _raise_if_invalid(check_merchant_validation_request(request))
        config = self.resolver.resolve(request.region or default_region)

        response = await self.gateway.create_wallet_session(
            config,
            {
                "method": "app",
                "amount": request.amount,
                "currency": request.currency,
                "contact": MERCHANT_VALIDATION_CONTACT,
                "email": DEFAULT_APP_EMAIL,
                "app": {"name": "apple_pay"},
                "initiative_context_url": request.domain,
                "merchant_validation_url": request.validation_url,
                "save": 0,
            },
        )

        payload = response.payload if isinstance(response.payload, dict) else {}
        if not response.is_success:
            error = payload.get("error")
            description = (error.get("description") if isinstance(error, dict) else None) or "Merchant validation failed"
            log_event(AuditAction.MERCHANT_SESSION_FAILED.value, region=config.region, details={
                "status_code": response.status_code,
                "error": payload.get("error"),
            })
            raise MerchantValidationFailed(description)

        data = payload.get("data")
        session = data.get("session_data") if isinstance(data, dict) else None
        if not session:
            log_event(AuditAction.MERCHANT_SESSION_FAILED.value, region=config.region, details={
                "status_code": response.status_code,
                "reason": "missing session_data",
            })
            raise MerchantValidationFailed("No merchant session received from gateway")

        log_event(AuditAction.MERCHANT_SESSION_OBTAINED.value, region=config.region, details={
            "domain": request.domain,
            "display_name": request.display_name,
        })
        return session

    async def _create_order(
        self,
        config: RegionConfig,
        family: PaymentFamily,
        order_request: OrderRequest,
    ) -> OrderResult:
        """Step 1: create the order. Any rejection aborts the flow."""
        order = await self.gateway.create_order(config, order_request)

        if not order.ok:
            # A 2xx without an order id is still unusable for payment creation
            status = order.status_code if order.status_code >= 400 else 502
            log_event(AuditAction.ORDER_FAILED.value, region=config.region, family=family.value, details={
                "status_code": order.status_code,
                "payload": order.payload,
            })
            raise OrderCreationFailed(status, order.payload)

        log_event(AuditAction.ORDER_CREATED.value, region=config.region, family=family.value, details={
            "order_id": order.order_id,
            "amount": order_request.amount,
            "currency": order_request.currency,
        })
        return order

    async def _create_payment(
        self,
        config: RegionConfig,
        family: PaymentFamily,
        payment: PaymentRequest,
    ) -> NormalizedOutcome:
        """
        Step 2: create the payment and normalize the response.

        Returns either Completed (2xx only) or RedirectRequired; every other
        outcome is raised.
        """
        raw = await self.gateway.create_payment(config, payment)
        outcome = normalize(raw)

        if isinstance(outcome, RedirectRequired):
            log_event(AuditAction.PAYMENT_REDIRECT.value, region=config.region, family=family.value, details={
                "payment_id": outcome.payment_id,
                "order_id": payment.order_id,
                "status_code": raw.status_code,
            })
            return outcome

        if isinstance(outcome, Completed):
            if not outcome.is_success:
                log_event(AuditAction.PAYMENT_FAILED.value, region=config.region, family=family.value, details={
                    "status_code": outcome.status_code,
                    "payload": outcome.payload,
                })
                raise PaymentCreationFailed(outcome.status_code, outcome.payload)

            log_event(AuditAction.PAYMENT_COMPLETED.value, region=config.region, family=family.value, details={
                "payment_id": outcome.payload.get("razorpay_payment_id") or outcome.payload.get("id"),
                "status": outcome.payload.get("status"),
                "order_id": payment.order_id,
            })
            return outcome

        logger.warning("Unrecognized payment response (status %d): %s", raw.status_code, raw.body[:500])
        log_event(AuditAction.PAYMENT_UNPARSEABLE.value, region=config.region, family=family.value, details={
            "status_code": outcome.status_code,
            "content_type": raw.content_type,
        })
        target = "authentication URL" if family is PaymentFamily.CARD else "Apple Pay URL"
        raise UnparseableResponse(
            f"Could not extract {target} or payment result from gateway response",
            gateway_status=outcome.status_code,
            details=outcome.body,
        )
