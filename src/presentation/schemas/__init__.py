"""Pydantic schemas for API request/response validation."""

from .khqr import (
    DecodeKHQRRequestSchema,
    DecodeKHQRResponseSchema,
    DecodedKHQRSchema,
    GenerateKHQRRequestSchema,
    GenerateKHQRResponseSchema,
    GeneratedKHQRSchema,
)
from .payment import (
    MarkPaidRequestSchema,
    MarkPaidResponseSchema,
    PaymentCheckRequestSchema,
    PaymentCheckResponseSchema,
    PaymentListResponseSchema,
    PaymentResponseSchema,
    PaymentSchema,
)
from .account import AccountCheckRequestSchema, AccountCheckResponseSchema
from .error import ErrorResponseSchema

__all__ = [
    "DecodeKHQRRequestSchema",
    "DecodeKHQRResponseSchema",
    "DecodedKHQRSchema",
    "GenerateKHQRRequestSchema",
    "GenerateKHQRResponseSchema",
    "GeneratedKHQRSchema",
    "MarkPaidRequestSchema",
    "MarkPaidResponseSchema",
    "PaymentCheckRequestSchema",
    "PaymentCheckResponseSchema",
    "PaymentListResponseSchema",
    "PaymentResponseSchema",
    "PaymentSchema",
    "AccountCheckRequestSchema",
    "AccountCheckResponseSchema",
    "ErrorResponseSchema",
]
