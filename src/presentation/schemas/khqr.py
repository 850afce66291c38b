"""KHQR-related Pydantic schemas."""

from typing import Any, Optional

from pydantic import ConfigDict, Field

from .base import CamelModel


class GenerateKHQRRequestSchema(CamelModel):
    """Schema for POST /api/khqr/generate request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "amount": 5.0,
                    "currency": "USD",
                    "billNumber": "INV-1001",
                    "description": "Coffee",
                }
            ]
        }
    )

    # Validated by the service so errors keep their API messages
    amount: Any = Field(None, description="Amount to charge, greater than 0")
    currency: Optional[str] = Field("USD", description="USD or KHR")
    bill_number: Optional[str] = Field(None, description="Defaults to INV-<epoch ms>")
    description: Optional[str] = Field(None, description="Purpose of transaction")
    store_label: Optional[str] = Field(None, description="Defaults to the merchant name")


class GeneratedKHQRSchema(CamelModel):
    bill_number: str
    qr_string: str
    qr_code_image: str = Field(..., description="PNG data URL")
    md5: str
    deeplink_url: Optional[str] = None
    amount: float
    currency: str
    manual_settle_enabled: bool


class GenerateKHQRResponseSchema(CamelModel):
    """Schema for POST /api/khqr/generate response body."""

    success: bool = True
    data: GeneratedKHQRSchema
    warning: Optional[str] = None


class DecodeKHQRRequestSchema(CamelModel):
    """Schema for POST /api/khqr/decode request body."""

    qr_string: Optional[str] = None


class DecodedKHQRSchema(CamelModel):
    decoded: dict[str, Any]
    is_valid: bool


class DecodeKHQRResponseSchema(CamelModel):
    """Schema for POST /api/khqr/decode response body."""

    success: bool = True
    data: DecodedKHQRSchema
