"""
Supported merchant regions.

Each region has its own Razorpay merchant account, so its own credential
pair and settlement currency. Credentials are read from the environment as
RAZORPAY_KEY_ID_<REGION> / RAZORPAY_KEY_SECRET_<REGION>; the settlement
currency is fixed per region.
"""

from typing import TypedDict


class RegionSpec(TypedDict):
    """Static description of a merchant region."""

    currency: str  # ISO 4217 settlement currency


REGION_TABLE: dict[str, RegionSpec] = {
    "MY": {"currency": "MYR"},
    "SG": {"currency": "SGD"},
    "US": {"currency": "USD"},
    "IN": {"currency": "INR"},
}


SUPPORTED_REGIONS = frozenset(REGION_TABLE)
