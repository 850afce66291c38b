"""Payment-related domain exceptions."""

from .base import DomainException


class PaymentNotFoundException(DomainException):
    """Raised when a payment cannot be found in the ledger."""

    def __init__(self, key: str):
        super().__init__(
            message="Payment not found",
            code="PAYMENT_NOT_FOUND",
        )
        self.key = key


class InvalidPaymentRequestException(DomainException):
    """Raised when a payment request fails validation."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="INVALID_PAYMENT_REQUEST",
        )


class ManualSettleDisabledException(DomainException):
    """Raised when manual settlement is requested but disabled."""

    def __init__(self):
        super().__init__(
            message="Manual settle mode is disabled",
            code="MANUAL_SETTLE_DISABLED",
        )


class MerchantNotConfiguredException(DomainException):
    """Raised when the Bakong account or merchant name is not configured."""

    def __init__(self):
        super().__init__(
            message="Server is missing required Bakong configuration",
            code="MERCHANT_NOT_CONFIGURED",
        )
