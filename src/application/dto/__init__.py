"""Data Transfer Objects for application layer."""

from .payment import (
    AccountCheckResult,
    CreatePaymentRequest,
    CreatePaymentResult,
    DecodedKHQR,
    GeneratedKHQR,
    MarkPaidRequest,
    PaymentStatusResult,
    SUPPORTED_CURRENCIES,
    normalize_optional_text,
    parse_amount,
)

__all__ = [
    "AccountCheckResult",
    "CreatePaymentRequest",
    "CreatePaymentResult",
    "DecodedKHQR",
    "GeneratedKHQR",
    "MarkPaidRequest",
    "PaymentStatusResult",
    "SUPPORTED_CURRENCIES",
    "normalize_optional_text",
    "parse_amount",
]
