"""Account-related Pydantic schemas."""

from typing import Any, Optional

from .base import CamelModel


class AccountCheckRequestSchema(CamelModel):
    """Schema for POST /api/account/check request body."""

    account_id: Optional[str] = None


class AccountCheckResponseSchema(CamelModel):
    success: bool
    exists: bool
    message: Optional[str] = None
    error_code: Any = None
