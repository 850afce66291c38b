"""Payment API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from src.application.dto import MarkPaidRequest
from src.application.services import PaymentService
from src.application.services.payment_service import MANUAL_SETTLE_MESSAGE
from src.core.dependencies import get_payment_service
from src.domain.entities import Payment
from src.presentation.schemas import (
    ErrorResponseSchema,
    MarkPaidRequestSchema,
    MarkPaidResponseSchema,
    PaymentCheckRequestSchema,
    PaymentCheckResponseSchema,
    PaymentListResponseSchema,
    PaymentResponseSchema,
    PaymentSchema,
)

payment_router = APIRouter(
    prefix="/api",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        404: {"model": ErrorResponseSchema, "description": "Payment not found"},
    },
)


def to_schema(payment: Payment) -> PaymentSchema:
    return PaymentSchema.model_validate(payment.to_dict())


@payment_router.post(
    "/payment/check",
    response_model=PaymentCheckResponseSchema,
    summary="Check Payment Status",
    description="""
    Check settlement status with Bakong by MD5.

    Status is one of pending, completed, failed, or error. Provider and
    network problems come back as status error with HTTP 200.
    """,
)
async def check_payment(
    body: PaymentCheckRequestSchema,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentCheckResponseSchema:
    result = await payment_service.check_payment(body.md5)

    return PaymentCheckResponseSchema(
        success=result.success,
        status=result.status,
        data=result.data,
        deeplink_url=result.deeplink_url,
        message=result.message,
        error_code=result.error_code,
        checked_by=result.checked_by,
        provider=result.provider,
        warning=result.warning,
        manual_settle_enabled=result.manual_settle_enabled,
    )


@payment_router.post(
    "/payment/mark-paid",
    response_model=MarkPaidResponseSchema,
    summary="Mark Payment Paid (Demo)",
    description="Settle a payment manually. Only available when demo manual settle is enabled.",
    responses={
        403: {"model": ErrorResponseSchema, "description": "Manual settle disabled"},
    },
)
async def mark_paid(
    body: MarkPaidRequestSchema,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> MarkPaidResponseSchema:
    payment = await payment_service.mark_paid(
        MarkPaidRequest(
            md5=body.md5,
            from_account_id=body.from_account_id,
            transaction_hash=body.transaction_hash,
        )
    )

    return MarkPaidResponseSchema(
        success=True,
        status="completed",
        message=MANUAL_SETTLE_MESSAGE,
        data=PaymentSchema.model_validate(payment),
        manual_settle_enabled=True,
    )


@payment_router.get(
    "/payment-md5/{md5}",
    response_model=PaymentResponseSchema,
    summary="Get Payment by MD5",
)
async def get_payment_by_md5(
    md5: Annotated[str, Path(min_length=1, description="MD5 of the payment's QR string")],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentResponseSchema:
    payment = await payment_service.get_by_md5(md5)
    return PaymentResponseSchema(success=True, data=to_schema(payment))


@payment_router.get(
    "/payment/{bill_number}",
    response_model=PaymentResponseSchema,
    summary="Get Payment by Bill Number",
)
async def get_payment_by_bill_number(
    bill_number: Annotated[str, Path(min_length=1)],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentResponseSchema:
    payment = await payment_service.get_by_bill_number(bill_number)
    return PaymentResponseSchema(success=True, data=to_schema(payment))


@payment_router.get(
    "/payments",
    response_model=PaymentListResponseSchema,
    summary="List Payments",
    description="List every payment in the ledger in creation order.",
)
async def list_payments(
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentListResponseSchema:
    payments = await payment_service.list_payments()
    return PaymentListResponseSchema(
        success=True,
        data=[to_schema(payment) for payment in payments],
    )
