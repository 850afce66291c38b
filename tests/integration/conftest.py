"""
Fixtures for integration tests.

Provides:
- Test client for the FastAPI app with the Bakong client mocked
- Client variants for an unconfigured merchant and disabled manual settle
"""

from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from src.main import app
from src.application.services import KHQRService, PaymentService
from src.core.config import Settings
from src.core.dependencies import (
    get_bakong_client,
    get_payment_repository,
    get_payment_service,
)
from src.infrastructure.repositories import InMemoryPaymentRepository


async def _client_for(
    payment_service: PaymentService,
    payment_repository: InMemoryPaymentRepository,
    bakong_client,
) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_payment_service] = lambda: payment_service
    app.dependency_overrides[get_payment_repository] = lambda: payment_repository
    app.dependency_overrides[get_bakong_client] = lambda: bakong_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await payment_service.wait_for_background_tasks()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(
    payment_service,
    payment_repository,
    mock_bakong_client,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses a fresh in-memory payment ledger
    - Mocks the Bakong API client
    - Has a configured merchant and inline deeplinks
    """
    async for ac in _client_for(payment_service, payment_repository, mock_bakong_client):
        yield ac


@pytest_asyncio.fixture
async def unconfigured_client(mock_bakong_client) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client whose merchant account is not configured."""
    repository = InMemoryPaymentRepository()
    service = PaymentService(
        payment_repository=repository,
        bakong_client=mock_bakong_client,
        khqr_service=KHQRService(),
        settings=Settings(_env_file=None),
    )
    async for ac in _client_for(service, repository, mock_bakong_client):
        yield ac


@pytest_asyncio.fixture
async def manual_settle_disabled_client(mock_bakong_client) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with demo manual settlement turned off."""
    repository = InMemoryPaymentRepository()
    service = PaymentService(
        payment_repository=repository,
        bakong_client=mock_bakong_client,
        khqr_service=KHQRService(),
        settings=Settings(
            _env_file=None,
            bakong_account_id="john_smith@devb",
            merchant_name="Demo Shop",
            demo_manual_settle_enabled=False,
        ),
    )
    async for ac in _client_for(service, repository, mock_bakong_client):
        yield ac
