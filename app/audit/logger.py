"""
Audit trail for payment operations.

The relay keeps no state, so the trail lives in the log stream: every step
boundary (order created/failed, payment completed/redirected/failed) gets
one AUDIT line with the region, the payment family and a details dict.

Details are redacted before they are written. Card numbers are reduced to
their last four digits, and CVVs, secrets and passwords are dropped
entirely. Gateway payloads can echo request fields back, so they go
through the same filter.
"""

import json
import logging
from typing import Any, Optional

logger = logging.getLogger("payment_relay.audit")

REDACTED_KEYS = {"cvv", "key_secret", "secret", "password", "authorization"}
DETAILS_LIMIT = 200


def redact(value: Any) -> Any:
    """Return a copy of `value` that is safe to log."""
    if isinstance(value, dict):
        cleaned = {}
        for key, item in value.items():
            lowered = str(key).lower()
            if lowered in REDACTED_KEYS:
                continue
            if lowered == "number" and isinstance(item, str):
                cleaned["last4"] = item[-4:]
                continue
            cleaned[key] = redact(item)
        return cleaned
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def log_event(
    action: str,
    region: Optional[str] = None,
    family: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """
    Write an audit line.

    Args:
        action: What happened (e.g. "order_created", "payment_redirect").
        region: Merchant region whose credentials were used.
        family: Payment family ("card" or "app").
        details: Arbitrary context, redacted and truncated before logging.
    """
    logger.info(
        "AUDIT | region=%s family=%s action=%s | %s",
        region or "-",
        family or "-",
        action,
        json.dumps(redact(details), default=str)[:DETAILS_LIMIT] if details else "",
    )
