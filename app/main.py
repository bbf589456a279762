"""
Payment Relay: server-side Razorpay S2S payment API.

Lets a browser checkout start card and Apple Pay payments without ever
seeing the merchant's secret keys. Each request is relayed as a
create-order → create-payment sequence under the region's merchant
credentials, and the gateway's mixed JSON/HTML responses are normalized
into one JSON contract.

Start the server:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.health import router as health_router
from app.api.payments import router as payments_router
from app.config import settings
from app.dependencies import build_orchestrator, create_http_client
from app.engine.errors import RelayError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("payment_relay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the gateway HTTP client and build the orchestrator on startup."""
    client = create_http_client(settings)
    app.state.orchestrator = build_orchestrator(settings, client)
    for config in app.state.orchestrator.resolver.regions():
        if config.is_configured:
            logger.info("Region %s configured (%s)", config.region, config.currency)
        else:
            logger.warning("Region %s not configured: RAZORPAY_KEY_ID_%s / RAZORPAY_KEY_SECRET_%s missing",
                           config.region, config.region, config.region)
    yield
    await client.aclose()


app = FastAPI(
    title="Payment Relay",
    description=(
        "Server-side relay for Razorpay S2S payments. Attaches per-region merchant "
        "credentials, sequences order and payment creation, and normalizes 3-D Secure "
        "and hosted-wallet redirects into a single JSON contract."
    ),
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'] if part != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": {"code": "BAD_REQUEST", "description": f"Invalid request body: {problems}"}},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        error = {"code": "NOT_FOUND", "description": f"Endpoint {request.method} {request.url.path} not found"}
    elif exc.status_code == 405:
        error = {"code": "METHOD_NOT_ALLOWED", "description": "Method not allowed"}
    else:
        error = {"code": "HTTP_ERROR", "description": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content={"error": error})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "INTERNAL_SERVER_ERROR", "description": "Internal server error"}},
    )


app.include_router(health_router)
app.include_router(payments_router, prefix="/api")
