"""
Razorpay server-to-server gateway client.

Talks to three endpoints under the v1 REST API:
  - POST /orders                  - create an order
  - POST /payments/create/json    - S2S payment creation
  - POST /payments/create/ajax    - wallet merchant session (Apple Pay)

Every call is authenticated with HTTP Basic over the region's
key_id:key_secret pair. Transport failures (connection errors, timeouts)
become GatewayUnreachable. Anything the gateway actually answered is
returned to the caller as-is.
"""

import json
import logging
from typing import Any

import httpx

from app.engine.errors import GatewayUnreachable
from app.providers.base import (
    GatewayResponse,
    OrderRequest,
    OrderResult,
    PaymentGateway,
    PaymentRequest,
    RawPaymentResponse,
)
from app.regions.resolver import RegionConfig

logger = logging.getLogger("payment_relay.gateway")

DETAILS_LIMIT = 200


class RazorpayGateway(PaymentGateway):
    """Razorpay REST API over a shared httpx.AsyncClient."""

    def __init__(self, client: httpx.AsyncClient, base_url: str = "https://api.razorpay.com/v1"):
        self._client = client
        self._base_url = base_url.rstrip("/")

    @property
    def name(self) -> str:
        return "razorpay"

    async def _post(self, config: RegionConfig, endpoint: str, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        logger.info("Gateway call: POST /%s (region=%s)", endpoint.lstrip("/"), config.region)
        try:
            return await self._client.post(
                url,
                json=payload,
                auth=httpx.BasicAuth(config.key_id, config.key_secret),
            )
        except httpx.TransportError as e:
            logger.error("Gateway unreachable on /%s: %s", endpoint.lstrip("/"), type(e).__name__)
            raise GatewayUnreachable(f"Payment gateway unreachable: {type(e).__name__}") from e

    async def create_order(self, config: RegionConfig, request: OrderRequest) -> OrderResult:
        response = await self._post(config, "orders", request.to_payload())
        return OrderResult(status_code=response.status_code, payload=_decode_json(response))

    async def create_payment(self, config: RegionConfig, request: PaymentRequest) -> RawPaymentResponse:
        response = await self._post(config, "payments/create/json", request.to_payload())
        content_type = response.headers.get("content-type", "")
        logger.info("Payment response: status=%d content-type=%s", response.status_code, content_type or "-")
        return RawPaymentResponse(
            status_code=response.status_code,
            content_type=content_type,
            body=response.text,
        )

    async def create_wallet_session(self, config: RegionConfig, payload: dict[str, Any]) -> GatewayResponse:
        response = await self._post(config, "payments/create/ajax", payload)
        return GatewayResponse(status_code=response.status_code, payload=_decode_json(response))


def _decode_json(response: httpx.Response) -> Any:
    """Decode a JSON body, or describe the non-JSON body in the gateway's error shape."""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {
            "error": {
                "code": "INVALID_RESPONSE",
                "description": "Gateway returned a non-JSON response",
                "details": response.text[:DETAILS_LIMIT],
            }
        }
