"""Bakong account API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.application.services import AccountService
from src.core.dependencies import get_account_service
from src.presentation.schemas import (
    AccountCheckRequestSchema,
    AccountCheckResponseSchema,
    ErrorResponseSchema,
)

account_router = APIRouter(
    prefix="/api/account",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
    },
)


@account_router.post(
    "/check",
    response_model=AccountCheckResponseSchema,
    summary="Check Bakong Account",
    description="Check whether a Bakong account ID exists. Requires an API token.",
)
async def check_account(
    body: AccountCheckRequestSchema,
    account_service: Annotated[AccountService, Depends(get_account_service)],
) -> AccountCheckResponseSchema:
    result = await account_service.check_account(body.account_id)

    return AccountCheckResponseSchema(
        success=result.success,
        exists=result.exists,
        message=result.message,
        error_code=result.error_code,
    )
