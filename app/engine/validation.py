"""
Inbound request checks, run before any gateway call.

Each check returns a structured result listing every missing field, so
the caller learns about all of them at once. The orchestrator turns a
failed result into a ValidationError.
"""

from dataclasses import dataclass, field
from typing import Optional

from app.models.requests import AppPaymentRequest, CardPaymentRequest, MerchantValidationRequest


REQUIRED_CARD_FIELDS = ("number", "expiry_month", "expiry_year", "cvv")


@dataclass
class ValidationResult:
    """Result of a request check."""

    missing: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.missing

    @property
    def message(self) -> str:
        return f"Missing required fields: {', '.join(self.missing)}"


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_common(amount: Optional[int], currency: Optional[str], region: Optional[str]) -> list[str]:
    missing = []
    # Zero or negative amounts can't be charged; treat them as absent
    if amount is None or amount <= 0:
        missing.append("amount")
    if _is_blank(currency):
        missing.append("currency")
    if _is_blank(region):
        missing.append("region")
    return missing


def check_card_request(request: CardPaymentRequest) -> ValidationResult:
    """
    Check a card payment request.

    Requires amount, currency, region, method and card, and within card the
    number, expiry month/year and cvv. The cardholder name is optional.
    """
    missing = _check_common(request.amount, request.currency, request.region)
    if _is_blank(request.method):
        missing.append("method")
    if request.card is None:
        missing.append("card")
    else:
        missing.extend(
            f"card.{name}" for name in REQUIRED_CARD_FIELDS if _is_blank(getattr(request.card, name))
        )
    return ValidationResult(missing=missing)


def check_app_request(request: AppPaymentRequest) -> ValidationResult:
    """Check an app/wallet payment request: amount, currency and region."""
    return ValidationResult(missing=_check_common(request.amount, request.currency, request.region))


def check_merchant_validation_request(request: MerchantValidationRequest) -> ValidationResult:
    """Check a wallet merchant validation request."""
    missing = []
    if _is_blank(request.validation_url):
        missing.append("validationURL")
    if _is_blank(request.domain):
        missing.append("domain")
    if request.amount is None or request.amount <= 0:
        missing.append("amount")
    if _is_blank(request.currency):
        missing.append("currency")
    return ValidationResult(missing=missing)


def normalize_expiry_year(year: str) -> str:
    """Expand a two-digit card expiry year ("27") to four digits ("2027")."""
    year = year.strip()
    if len(year) == 2:
        return "20" + year
    return year
