"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from src.application.services import AccountService, KHQRService, PaymentService
from src.infrastructure.clients import HttpBakongAPIClient
from src.infrastructure.repositories import InMemoryPaymentRepository


# Repository dependencies
@lru_cache
def get_payment_repository() -> InMemoryPaymentRepository:
    """Get the process-wide payment ledger."""
    return InMemoryPaymentRepository()


# External client dependencies
@lru_cache
def get_bakong_client() -> HttpBakongAPIClient:
    """Get a BakongAPIClient instance."""
    return HttpBakongAPIClient()


def get_khqr_service() -> KHQRService:
    """Get a KHQRService instance."""
    return KHQRService()


# Service dependencies
@lru_cache
def _payment_service(
    payment_repo: InMemoryPaymentRepository,
    bakong_client: HttpBakongAPIClient,
) -> PaymentService:
    return PaymentService(
        payment_repository=payment_repo,
        bakong_client=bakong_client,
        khqr_service=KHQRService(),
    )


def get_payment_service(
    payment_repo: Annotated[InMemoryPaymentRepository, Depends(get_payment_repository)],
    bakong_client: Annotated[HttpBakongAPIClient, Depends(get_bakong_client)],
) -> PaymentService:
    """
    Get a PaymentService instance with all dependencies.

    One service is kept per repository/client pair so background
    deeplink tasks stay tracked across requests.
    """
    return _payment_service(payment_repo, bakong_client)


def get_account_service(
    bakong_client: Annotated[HttpBakongAPIClient, Depends(get_bakong_client)],
) -> AccountService:
    """Get an AccountService instance."""
    return AccountService(bakong_client=bakong_client)
