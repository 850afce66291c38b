"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from src.domain.exceptions import (
    DomainException,
    InvalidPaymentRequestException,
    KHQRDecodeException,
    KHQRGenerationException,
    ManualSettleDisabledException,
    MerchantNotConfiguredException,
    PaymentNotFoundException,
)
from .request_context import get_request_id

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": message,
            "code": code,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(PaymentNotFoundException)
    async def payment_not_found_handler(
        request: Request,
        exc: PaymentNotFoundException,
    ) -> JSONResponse:
        """Handle payment not found errors."""
        return error_response(404, exc.message, exc.code)

    @app.exception_handler(InvalidPaymentRequestException)
    async def invalid_request_handler(
        request: Request,
        exc: InvalidPaymentRequestException,
    ) -> JSONResponse:
        """Handle invalid request errors."""
        return error_response(400, exc.message, exc.code)

    @app.exception_handler(KHQRDecodeException)
    async def khqr_decode_handler(
        request: Request,
        exc: KHQRDecodeException,
    ) -> JSONResponse:
        """Handle malformed KHQR strings."""
        return error_response(400, exc.message, exc.code)

    @app.exception_handler(ManualSettleDisabledException)
    async def manual_settle_disabled_handler(
        request: Request,
        exc: ManualSettleDisabledException,
    ) -> JSONResponse:
        return error_response(403, exc.message, exc.code)

    @app.exception_handler(MerchantNotConfiguredException)
    async def merchant_not_configured_handler(
        request: Request,
        exc: MerchantNotConfiguredException,
    ) -> JSONResponse:
        """Handle missing BAKONG_ACCOUNT_ID / MERCHANT_NAME."""
        logger.error(
            "merchant_not_configured",
            request_id=get_request_id(),
        )
        return error_response(500, exc.message, exc.code)

    @app.exception_handler(KHQRGenerationException)
    async def khqr_generation_handler(
        request: Request,
        exc: KHQRGenerationException,
    ) -> JSONResponse:
        """Handle KHQR payloads the codec rejected."""
        logger.error(
            "khqr_generation_error",
            request_id=get_request_id(),
            message=exc.message,
        )
        return error_response(500, exc.message, exc.code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle malformed request bodies."""
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning(
            "request_validation_failed",
            request_id=get_request_id(),
            errors=len(errors),
        )
        return error_response(400, message, "VALIDATION_ERROR")

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return error_response(400, exc.message, exc.code)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return error_response(500, "An unexpected error occurred.", "INTERNAL_ERROR")
