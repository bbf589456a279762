"""
Payment response normalizer.

The payment-create endpoint is not uniformly typed across authentication
flows. Depending on region, method and risk state it answers with:

  1. JSON carrying redirect instructions in a `next` array
     (step-up authentication, hosted wallet page)
  2. JSON carrying a terminal payment result
  3. A legacy HTML document with a meta-refresh redirect

normalize() reduces all of them to one NormalizedOutcome. Redirect
detection runs before any look at the HTTP status: step-up responses may
carry a non-success status alongside a perfectly usable redirect.

Pure function: the same RawPaymentResponse always yields an equal outcome.
"""

import json
import re
from typing import Any, Optional

from app.models.outcomes import Completed, NormalizedOutcome, RedirectRequired, Unparseable
from app.providers.base import RawPaymentResponse


UNKNOWN_PAYMENT_ID = "unknown"
DETAILS_LIMIT = 200

# <meta http-equiv="refresh" content="0;url=https://..."> and url="https://..."
REDIRECT_URL_RE = re.compile(r"""url=["']?([^"'\s>]+)""", re.IGNORECASE)
PATH_PAYMENT_ID_RE = re.compile(r"payments/([^/?#\"'\s]+)")
DOC_PAYMENT_ID_RE = re.compile(r"razorpay_payment_id[=:]([a-zA-Z0-9_]+)")


def is_json_content_type(content_type: Optional[str]) -> bool:
    """True for application/json and structured-syntax types like application/problem+json."""
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def normalize(response: RawPaymentResponse) -> NormalizedOutcome:
    """Classify a raw payment-create response."""
    if is_json_content_type(response.content_type):
        return _normalize_json(response)
    return _normalize_html(response)


def _normalize_json(response: RawPaymentResponse) -> NormalizedOutcome:
    try:
        body = json.loads(response.body)
    except json.JSONDecodeError:
        return _unparseable(response)

    if not isinstance(body, dict):
        return _unparseable(response)

    url = _find_redirect_url(body.get("next"))
    if url:
        payment_id = body.get("razorpay_payment_id") or body.get("id") or UNKNOWN_PAYMENT_ID
        return RedirectRequired(payment_id=str(payment_id), url=url, status_code=response.status_code)

    return Completed(payload=body, status_code=response.status_code)


def _find_redirect_url(next_actions: Any) -> Optional[str]:
    """First `{"action": "redirect", "url": ...}` entry with a non-empty URL."""
    if not isinstance(next_actions, list):
        return None
    for entry in next_actions:
        if not isinstance(entry, dict) or entry.get("action") != "redirect":
            continue
        url = entry.get("url")
        if isinstance(url, str) and url:
            return url
    return None


def _normalize_html(response: RawPaymentResponse) -> NormalizedOutcome:
    text = response.body
    match = REDIRECT_URL_RE.search(text)
    if not match:
        return _unparseable(response)

    url = match.group(1).replace("&amp;", "&")
    return RedirectRequired(
        payment_id=_extract_payment_id(url, text),
        url=url,
        status_code=response.status_code,
    )


def _extract_payment_id(url: str, document: str) -> str:
    """Payment id from the URL path, else from the document, else the sentinel."""
    path_match = PATH_PAYMENT_ID_RE.search(url)
    if path_match:
        return path_match.group(1)
    doc_match = DOC_PAYMENT_ID_RE.search(document)
    if doc_match:
        return doc_match.group(1)
    return UNKNOWN_PAYMENT_ID


def _unparseable(response: RawPaymentResponse) -> Unparseable:
    return Unparseable(status_code=response.status_code, body=response.body[:DETAILS_LIMIT])
