"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    success: bool = Field(
        False,
        description="Always false for errors",
    )
    error: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Amount is required and must be greater than 0"],
    )
    code: str = Field(
        ...,
        description="Error code",
        examples=["INVALID_PAYMENT_REQUEST"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "success": False,
                    "error": "Payment not found",
                    "code": "PAYMENT_NOT_FOUND",
                    "request_id": "abc123",
                }
            ]
        }
    }
