"""Domain Entities - Core business objects."""

from .payment import Payment, PaymentStatus, ProviderError

__all__ = [
    "Payment",
    "PaymentStatus",
    "ProviderError",
]
