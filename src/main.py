"""
KHQR Gateway - Main Application Entry Point

A Bakong KHQR payment service that generates payment QR codes and
tracks their settlement through the Bakong open API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from src import __version__
from src.core.config import settings
from src.core.dependencies import get_bakong_client, get_payment_repository, get_payment_service
from src.core.logging import setup_logging
from src.core.metrics import get_metrics, get_metrics_content_type
from src.presentation.api import api_router
from src.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Set up logging
    - Report merchant and Bakong configuration
    - Let background deeplink tasks finish on shutdown
    """
    setup_logging()

    logger = structlog.get_logger(__name__)
    bakong_client = get_bakong_client()

    logger.info(
        "application_started",
        version=__version__,
        port=settings.port,
        bakong_account_configured=bool(settings.bakong_account_id),
        merchant_name=settings.merchant_name or None,
        api_token_configured=bakong_client.has_token,
        api_base_url=bakong_client.base_url,
        deeplink_mode=settings.deeplink_mode,
        manual_settle_enabled=settings.demo_manual_settle_enabled,
    )

    if not settings.merchant_configured:
        logger.warning("merchant_not_configured")

    if bakong_client.is_using_dev_environment():
        logger.warning(
            "bakong_dev_environment",
            message="DEV API URL is active; real payments may not resolve to completed.",
        )

    yield

    payment_service = get_payment_service(get_payment_repository(), bakong_client)
    await payment_service.wait_for_background_tasks()
    logger.info("application_stopped")


app = FastAPI(
    title="KHQR Gateway",
    description="Bakong KHQR Payment Integration Service",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Prometheus metrics endpoint."""
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type(),
    )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")
