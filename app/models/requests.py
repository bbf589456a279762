"""
Inbound request bodies.

Every field is optional at the schema level. Presence is checked by
app.engine.validation so that a missing field produces the relay's own
BAD_REQUEST error naming the field, instead of a framework-level 422.
"""

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CardDetails(BaseModel):
    # Browsers send expiry fields as either numbers or strings
    model_config = ConfigDict(coerce_numbers_to_str=True)

    number: Optional[str] = None
    name: Optional[str] = None
    expiry_month: Optional[str] = None
    expiry_year: Optional[str] = None
    cvv: Optional[str] = None


class CardPaymentRequest(BaseModel):
    """Body of POST /api/create-payment."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[int] = None  # Smallest currency unit
    currency: Optional[str] = None
    region: Optional[str] = Field(default=None, validation_alias=AliasChoices("region", "country"))
    method: Optional[str] = None
    card: Optional[CardDetails] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    authentication: Optional[dict[str, Any]] = None
    browser: Optional[dict[str, Any]] = None
    device_fingerprint: Optional[Any] = None
    ip: Optional[str] = None
    referer: Optional[str] = None
    user_agent: Optional[str] = None


class AppPaymentRequest(BaseModel):
    """Body of POST /api/create-applepay-payment."""

    model_config = ConfigDict(populate_by_name=True)

    amount: Optional[int] = None
    currency: Optional[str] = None
    region: Optional[str] = Field(default=None, validation_alias=AliasChoices("region", "country"))
    contact: Optional[str] = None
    email: Optional[str] = None
    app: str = "apple_pay"


class MerchantValidationRequest(BaseModel):
    """Body of POST /api/validate-apple-merchant."""

    model_config = ConfigDict(populate_by_name=True)

    validation_url: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("validationURL", "validation_url")
    )
    domain: Optional[str] = None
    display_name: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("displayName", "display_name")
    )
    amount: Optional[int] = None
    currency: Optional[str] = None
    region: Optional[str] = Field(default=None, validation_alias=AliasChoices("region", "country"))
