"""Application services (use cases)."""

from .khqr_service import KHQRService
from .payment_service import PaymentService
from .account_service import AccountService

__all__ = [
    "KHQRService",
    "PaymentService",
    "AccountService",
]
