"""
Error taxonomy for the payment relay.

Every failure the relay can surface is one of these exceptions. Each carries
the HTTP status and error code it maps to, so the API layer renders all of
them through a single handler:

  - ValidationError / ConfigError: resolved locally, no gateway call made (400)
  - GatewayUnreachable: transport-level failure talking to the gateway
  - OrderCreationFailed / PaymentCreationFailed: gateway rejected a step;
    the gateway's own status code and payload are passed through verbatim
  - UnparseableResponse: payment response shape not recognized (500)

Nothing here is retried. Order creation is not safe to replay blindly and
payment submission is not guaranteed idempotent from this layer.
"""

from typing import Any, Optional


class RelayError(Exception):
    """Base exception for all relay failures."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if code is not None:
            self.code = code

    def to_body(self) -> dict[str, Any]:
        """JSON body returned to the caller."""
        return {"error": {"code": self.code, "description": self.message}}


class ValidationError(RelayError):
    """Missing or malformed caller input. Never reaches the gateway."""

    status_code = 400
    code = "BAD_REQUEST"

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []


class MerchantValidationFailed(ValidationError):
    """The gateway did not hand back a usable wallet merchant session."""

    status_code = 500
    code = "VALIDATION_FAILED"


class ConfigError(RelayError):
    """Unknown region, or a region without a complete credential pair."""

    status_code = 400
    code = "CONFIG_ERROR"

    def __init__(self, region: Optional[str]):
        super().__init__(f"Invalid or unconfigured region: {region}")
        self.region = region


class GatewayUnreachable(RelayError):
    """Network or timeout failure before the gateway produced a response."""

    code = "GATEWAY_UNREACHABLE"


class GatewayRejected(RelayError):
    """
    The gateway answered a step with a failure.

    The caller gets the gateway's status code and payload untouched so it can
    inspect gateway-specific error codes.
    """

    step = "gateway"

    def __init__(self, status_code: int, payload: Any):
        super().__init__(f"{self.step} failed with status {status_code}", status_code=status_code)
        self.payload = payload

    def to_body(self) -> Any:
        return self.payload


class OrderCreationFailed(GatewayRejected):
    step = "order creation"


class PaymentCreationFailed(GatewayRejected):
    step = "payment creation"


class UnparseableResponse(RelayError):
    """Neither a known JSON shape nor an extractable redirect URL was found."""

    code = "INVALID_RESPONSE"

    def __init__(self, message: str, gateway_status: int, details: str):
        super().__init__(message)
        self.gateway_status = gateway_status
        self.details = details

    def to_body(self) -> dict[str, Any]:
        body = super().to_body()
        body["error"]["details"] = self.details
        return body
