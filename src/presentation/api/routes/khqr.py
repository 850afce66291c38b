"""KHQR API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.application.dto import CreatePaymentRequest
from src.application.services import KHQRService, PaymentService
from src.core.dependencies import get_khqr_service, get_payment_service
from src.domain.exceptions import KHQRDecodeException
from src.presentation.schemas import (
    DecodeKHQRRequestSchema,
    DecodeKHQRResponseSchema,
    DecodedKHQRSchema,
    ErrorResponseSchema,
    GenerateKHQRRequestSchema,
    GenerateKHQRResponseSchema,
    GeneratedKHQRSchema,
)

CALLBACK_PATH = "/payment/callback"

khqr_router = APIRouter(
    prefix="/api/khqr",
    responses={
        400: {"model": ErrorResponseSchema, "description": "Invalid request"},
        500: {"model": ErrorResponseSchema, "description": "Server misconfigured"},
    },
)


@khqr_router.post(
    "/generate",
    response_model=GenerateKHQRResponseSchema,
    summary="Generate Payment KHQR",
    description="""
    Generate a dynamic KHQR for a payment and record it as pending.

    The response carries the QR string, a PNG data URL, and the MD5 used
    to check settlement. Deeplink problems are reported as a warning.
    """,
)
async def generate_khqr(
    body: GenerateKHQRRequestSchema,
    request: Request,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> GenerateKHQRResponseSchema:
    callback_url = str(request.base_url).rstrip("/") + CALLBACK_PATH

    result = await payment_service.create_payment(
        CreatePaymentRequest(
            amount=body.amount,
            currency=body.currency,
            bill_number=body.bill_number,
            description=body.description,
            store_label=body.store_label,
            callback_url=callback_url,
        )
    )

    return GenerateKHQRResponseSchema(
        success=True,
        data=GeneratedKHQRSchema(
            bill_number=result.bill_number,
            qr_string=result.qr_string,
            qr_code_image=result.qr_code_image,
            md5=result.md5,
            deeplink_url=result.deeplink_url,
            amount=result.amount,
            currency=result.currency,
            manual_settle_enabled=result.manual_settle_enabled,
        ),
        warning=result.warning,
    )


@khqr_router.post(
    "/decode",
    response_model=DecodeKHQRResponseSchema,
    summary="Decode KHQR",
    description="Decode a KHQR string into named fields and verify its CRC.",
)
async def decode_khqr(
    body: DecodeKHQRRequestSchema,
    khqr_service: Annotated[KHQRService, Depends(get_khqr_service)],
) -> DecodeKHQRResponseSchema:
    if not body.qr_string:
        raise KHQRDecodeException("QR string is required")

    result = khqr_service.inspect_khqr(body.qr_string)

    return DecodeKHQRResponseSchema(
        success=True,
        data=DecodedKHQRSchema(decoded=result.decoded, is_valid=result.is_valid),
    )
