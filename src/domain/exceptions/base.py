"""Base domain exception."""


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Carries a human-readable message and a stable error code that the
    presentation layer maps to an HTTP status.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)
