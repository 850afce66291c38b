"""KHQR payload domain exceptions."""

from .base import DomainException


class KHQRGenerationException(DomainException):
    """Raised when a KHQR payload cannot be generated."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="KHQR_GENERATION_FAILED",
        )


class KHQRDecodeException(DomainException):
    """Raised when a KHQR string cannot be decoded."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="KHQR_DECODE_FAILED",
        )
