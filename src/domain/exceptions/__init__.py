"""Domain Exceptions - Business rule violations and domain errors."""

from .base import DomainException
from .payment import (
    InvalidPaymentRequestException,
    ManualSettleDisabledException,
    MerchantNotConfiguredException,
    PaymentNotFoundException,
)
from .khqr import KHQRDecodeException, KHQRGenerationException
from .bakong import (
    BakongAPIException,
    BakongAPITimeoutException,
    BakongInvalidResponseException,
    BakongNetworkException,
)

__all__ = [
    "DomainException",
    "InvalidPaymentRequestException",
    "ManualSettleDisabledException",
    "MerchantNotConfiguredException",
    "PaymentNotFoundException",
    "KHQRDecodeException",
    "KHQRGenerationException",
    "BakongAPIException",
    "BakongAPITimeoutException",
    "BakongInvalidResponseException",
    "BakongNetworkException",
]
