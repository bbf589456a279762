"""Enumerations for the payment relay domain model."""

from enum import Enum


class OutcomeKind(str, Enum):
    """Normalized shapes of a payment-create response."""

    COMPLETED = "completed"
    REDIRECT_REQUIRED = "redirect_required"
    UNPARSEABLE = "unparseable"


class PaymentFamily(str, Enum):
    """Payment method families the relay drives."""

    CARD = "card"
    APP = "app"


class AuditAction(str, Enum):
    """Milestones recorded in the audit log."""

    ORDER_CREATED = "order_created"
    ORDER_FAILED = "order_failed"
    PAYMENT_COMPLETED = "payment_completed"
    PAYMENT_REDIRECT = "payment_redirect"
    PAYMENT_FAILED = "payment_failed"
    PAYMENT_UNPARSEABLE = "payment_unparseable"
    MERCHANT_SESSION_OBTAINED = "merchant_session_obtained"
    MERCHANT_SESSION_FAILED = "merchant_session_failed"
