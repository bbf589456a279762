"""
Abstract payment gateway interface.

The relay speaks to the gateway in two steps: create an order, then create
a payment against that order. Wallet SDKs additionally need a merchant
session before a payment can be attempted. Implementations only move bytes:
they authenticate, send, and return what came back. Interpreting the
payment response is the normalizer's job.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from app.regions.resolver import RegionConfig


@dataclass
class OrderRequest:
    """Request to create a gateway order."""

    amount: int  # Smallest currency unit (paise, cents, sen)
    currency: str  # ISO 4217
    auto_capture: bool = True
    receipt: Optional[str] = None
    notes: Optional[dict[str, Any]] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "amount": self.amount,
            "currency": self.currency,
            "payment_capture": 1 if self.auto_capture else 0,
        }
        if self.receipt:
            payload["receipt"] = self.receipt
        if self.notes:
            payload["notes"] = self.notes
        return payload


@dataclass
class OrderResult:
    """Outcome of order creation: the gateway's status and payload, untouched."""

    status_code: int
    payload: Any

    @property
    def order_id(self) -> Optional[str]:
        if isinstance(self.payload, dict):
            order_id = self.payload.get("id")
            if isinstance(order_id, str) and order_id:
                return order_id
        return None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300 and self.order_id is not None


# Optional members only go on the wire when the caller supplied them
_OPTIONAL_PAYMENT_FIELDS = (
    "card",
    "app",
    "authentication",
    "browser",
    "device_fingerprint",
    "ip",
    "referer",
    "user_agent",
)


@dataclass
class PaymentRequest:
    """Request to create a payment against an existing order."""

    amount: int
    currency: str
    order_id: str
    method: str
    contact: Optional[str] = None
    email: Optional[str] = None
    card: Optional[dict[str, Any]] = None
    app: Optional[dict[str, Any]] = None
    authentication: Optional[dict[str, Any]] = None
    browser: Optional[dict[str, Any]] = None
    device_fingerprint: Optional[Any] = None
    ip: Optional[str] = None
    referer: Optional[str] = None
    user_agent: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "amount": self.amount,
            "currency": self.currency,
            "order_id": self.order_id,
            "method": self.method,
        }
        if self.contact is not None:
            payload["contact"] = self.contact
        if self.email is not None:
            payload["email"] = self.email
        for name in _OPTIONAL_PAYMENT_FIELDS:
            value = getattr(self, name)
            if value:
                payload[name] = value
        return payload


@dataclass(frozen=True)
class RawPaymentResponse:
    """Payment-create response exactly as the transport delivered it."""

    status_code: int
    content_type: str
    body: str


@dataclass
class GatewayResponse:
    """Decoded JSON response from a single gateway call."""

    status_code: int
    payload: Any = field(default=None)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class PaymentGateway(ABC):
    """Abstract base class for payment gateways."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Gateway identifier (e.g. 'razorpay')."""
        ...

    @abstractmethod
    async def create_order(self, config: RegionConfig, request: OrderRequest) -> OrderResult:
        """
        Create an order under the region's merchant account.

        A gateway rejection comes back as a non-ok OrderResult, never as an
        exception. Not retried: a replay after an ambiguous failure could
        create a duplicate order.

        Raises:
            GatewayUnreachable: On transport failure.
        """
        ...

    @abstractmethod
    async def create_payment(self, config: RegionConfig, request: PaymentRequest) -> RawPaymentResponse:
        """
        Submit a payment for an order and return the raw response.

        Raises:
            GatewayUnreachable: On transport failure.
        """
        ...

    @abstractmethod
    async def create_wallet_session(self, config: RegionConfig, payload: dict[str, Any]) -> GatewayResponse:
        """
        Request a wallet merchant session (e.g. Apple Pay merchant validation).

        Raises:
            GatewayUnreachable: On transport failure.
        """
        ...
