"""
Domain Interfaces (Ports)
"""

from .repositories import PaymentRepository
from .clients import BakongAPIClient, ProviderResponse

__all__ = [
    "PaymentRepository",
    "BakongAPIClient",
    "ProviderResponse",
]
