"""
Payment endpoints.

POST /create-payment             - Card S2S payment (order → payment).
POST /create-applepay-payment    - Apple Pay via the gateway's hosted page.
POST /validate-apple-merchant    - Apple Pay merchant session for the JS SDK.

Handlers stay thin: failures are RelayError subclasses raised by the
orchestrator and rendered by the exception handlers in app.main.
"""

from typing import Any

from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_orchestrator
from app.engine.orchestrator import PaymentOrchestrator
from app.models.requests import AppPaymentRequest, CardPaymentRequest, MerchantValidationRequest

router = APIRouter(tags=["payments"])


@router.post("/create-payment")
async def create_payment(
    body: CardPaymentRequest,
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """
    Create a card payment.

    Responds with the gateway's payment result merged with the order, or
    with `authentication.authentication_url` and `requires_3ds: true` when
    the card needs 3-D Secure/OTP.
    """
    return await orchestrator.process_card_payment(body)


@router.post("/create-applepay-payment")
async def create_applepay_payment(
    body: AppPaymentRequest,
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
) -> dict[str, Any]:
    """Create an Apple Pay payment; usually answers with `apple_pay_url` to redirect to."""
    return await orchestrator.process_app_payment(body)


@router.post("/validate-apple-merchant")
async def validate_apple_merchant(
    body: MerchantValidationRequest,
    orchestrator: PaymentOrchestrator = Depends(get_orchestrator),
) -> Any:
    """Return the merchant session for `session.completeMerchantValidation()`, untouched."""
    return await orchestrator.validate_merchant_session(body, default_region=settings.default_region)
