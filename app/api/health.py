"""
Service info and health endpoints.

GET /        - Service name, version and endpoint index.
GET /health  - Per-region configuration flags and settlement currency.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_resolver
from app.regions.resolver import CredentialResolver

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(resolver: CredentialResolver = Depends(get_resolver)):
    """Report which regions can take payments. Never exposes credentials."""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "regions": {
            config.region: {"configured": config.is_configured, "currency": config.currency}
            for config in resolver.regions()
        },
    }


@router.get("/")
async def index():
    return {
        "name": "Payment Relay",
        "version": "0.1.0",
        "endpoints": {
            "card": "POST /api/create-payment",
            "applePay": "POST /api/create-applepay-payment",
            "merchantValidation": "POST /api/validate-apple-merchant",
            "health": "GET /health",
        },
    }
