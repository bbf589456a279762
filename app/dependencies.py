"""Gateway client construction and request-scoped dependency accessors."""

import httpx
from fastapi import Request

from app.config import Settings
from app.engine.orchestrator import PaymentOrchestrator
from app.providers.razorpay import RazorpayGateway
from app.regions.resolver import CredentialResolver


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """One pooled client per process; the only timeout the relay relies on."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.gateway_timeout_seconds),
        follow_redirects=True,
    )


def build_orchestrator(settings: Settings, client: httpx.AsyncClient) -> PaymentOrchestrator:
    resolver = CredentialResolver.from_settings(settings)
    gateway = RazorpayGateway(client, base_url=settings.razorpay_api_base)
    return PaymentOrchestrator(resolver, gateway)


def get_orchestrator(request: Request) -> PaymentOrchestrator:
    return request.app.state.orchestrator


def get_resolver(request: Request) -> CredentialResolver:
    return request.app.state.orchestrator.resolver
