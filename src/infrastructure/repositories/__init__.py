"""Repository implementations."""

from .payment_repository import InMemoryPaymentRepository

__all__ = [
    "InMemoryPaymentRepository",
]
