from app.models.enums import AuditAction, OutcomeKind, PaymentFamily
from app.models.outcomes import Completed, NormalizedOutcome, RedirectRequired, Unparseable
from app.models.requests import (
    AppPaymentRequest,
    CardDetails,
    CardPaymentRequest,
    MerchantValidationRequest,
)

__all__ = [
    "AuditAction",
    "OutcomeKind",
    "PaymentFamily",
    "Completed",
    "NormalizedOutcome",
    "RedirectRequired",
    "Unparseable",
    "AppPaymentRequest",
    "CardDetails",
    "CardPaymentRequest",
    "MerchantValidationRequest",
]
