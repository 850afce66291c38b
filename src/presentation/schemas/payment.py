"""Payment-related Pydantic schemas."""

from typing import Any, List, Optional

from pydantic import Field

from .base import CamelModel


class PaymentCheckRequestSchema(CamelModel):
    """Schema for POST /api/payment/check request body."""

    md5: Optional[str] = Field(None, description="MD5 of the payment's QR string")


class MarkPaidRequestSchema(CamelModel):
    """Schema for POST /api/payment/mark-paid request body."""

    md5: Optional[str] = None
    from_account_id: Optional[str] = None
    transaction_hash: Optional[str] = None


class ProviderErrorSchema(CamelModel):
    checked_at: Optional[str] = None
    checked_by: str
    response_code: Any = None
    error_code: Any = None
    response_message: Optional[str] = None


class PaymentSchema(CamelModel):
    """A payment ledger record."""

    md5: str
    bill_number: str
    amount: float
    currency: str
    qr_string: str
    description: Optional[str] = None
    status: str
    created_at: str
    deeplink_url: Optional[str] = None
    completed_at: Optional[str] = None
    transaction_hash: Optional[str] = None
    from_account: Optional[str] = None
    manual_settled_at: Optional[str] = None
    last_provider_error: Optional[ProviderErrorSchema] = None


class PaymentResponseSchema(CamelModel):
    success: bool = True
    data: PaymentSchema


class PaymentListResponseSchema(CamelModel):
    success: bool = True
    data: List[PaymentSchema]


class MarkPaidResponseSchema(CamelModel):
    """Schema for POST /api/payment/mark-paid response body."""

    success: bool = True
    status: str = "completed"
    message: str
    data: PaymentSchema
    manual_settle_enabled: bool = True


class PaymentCheckResponseSchema(CamelModel):
    """Schema for POST /api/payment/check response body."""

    success: bool
    status: str = Field(..., description="pending, completed, failed, or error")
    data: Optional[Any] = None
    deeplink_url: Optional[str] = None
    message: str
    error_code: Any = None
    checked_by: str = Field(..., description="md5, short_hash, or manual")
    provider: Optional[dict[str, Any]] = None
    warning: Optional[str] = None
    manual_settle_enabled: bool
