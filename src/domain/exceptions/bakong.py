"""Bakong API transport exceptions."""

from .base import DomainException


class BakongAPIException(DomainException):
    """
    Raised when a Bakong API call fails before a provider response.

    ``code`` doubles as the synthetic ``errorCode`` reported to callers.
    """

    def __init__(self, message: str, code: str = "NETWORK_ERROR"):
        super().__init__(message=message, code=code)


class BakongAPITimeoutException(BakongAPIException):
    """Raised when a Bakong API call exceeds its timeout."""

    def __init__(self, message: str):
        super().__init__(message=message, code="TIMEOUT")


class BakongNetworkException(BakongAPIException):
    """Raised on connection-level failures."""

    def __init__(self, message: str):
        super().__init__(message=message, code="NETWORK_ERROR")


class BakongInvalidResponseException(BakongAPIException):
    """Raised when the Bakong API returns a non-JSON body."""

    def __init__(self, status_code: int):
        super().__init__(
            message=f"Invalid response from Bakong API (HTTP {status_code})",
            code="INVALID_RESPONSE",
        )
        self.status_code = status_code
