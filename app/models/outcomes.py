"""
Normalized payment outcomes.

Whatever transport shape the gateway used (JSON result, JSON redirect
instructions, legacy HTML meta-refresh), the normalizer reduces a
payment-create response to exactly one of these.
"""

from dataclasses import dataclass, field
from typing import Any, Union

from app.models.enums import OutcomeKind


@dataclass(frozen=True)
class Completed:
    """Terminal payment result, passed through as the gateway sent it."""

    payload: dict[str, Any]
    status_code: int = 200
    kind: OutcomeKind = field(default=OutcomeKind.COMPLETED, init=False)

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class RedirectRequired:
    """The browser must visit `url` (3-D Secure/OTP or a hosted wallet page)."""

    payment_id: str
    url: str
    status_code: int = 200
    kind: OutcomeKind = field(default=OutcomeKind.REDIRECT_REQUIRED, init=False)


@dataclass(frozen=True)
class Unparseable:
    """No recognized JSON shape and no extractable redirect URL."""

    status_code: int
    body: str  # Truncated, diagnostics only
    kind: OutcomeKind = field(default=OutcomeKind.UNPARSEABLE, init=False)


NormalizedOutcome = Union[Completed, RedirectRequired, Unparseable]
