"""External client interfaces."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

# Raw Bakong API response body: responseCode, responseMessage, errorCode, data
ProviderResponse = Dict[str, Any]


class BakongAPIClient(ABC):
    """
    Abstract client for the Bakong open API.

    Methods never raise for transport problems. Failures are reported as
    a response with ``responseCode == -1`` and a synthetic ``errorCode``
    (MISSING_TOKEN, TIMEOUT, NETWORK_ERROR, INVALID_RESPONSE, or the HTTP
    status).
    """

    @abstractmethod
    def is_using_dev_environment(self) -> bool:
        """True if the client targets the Bakong DEV API."""
        ...

    @property
    @abstractmethod
    def has_token(self) -> bool:
        """True if an API token is configured."""
        ...

    @abstractmethod
    async def request_token(
        self,
        email: str,
        organization: str,
        project: str,
    ) -> ProviderResponse:
        """Request a new API token; a verification code is emailed."""
        ...

    @abstractmethod
    async def verify_token(self, code: str) -> ProviderResponse:
        """Exchange an emailed verification code for a token."""
        ...

    @abstractmethod
    async def renew_token(self, email: str) -> ProviderResponse:
        """Renew an expired token."""
        ...

    @abstractmethod
    async def generate_deeplink(
        self,
        qr_string: str,
        source_info: Optional[Dict[str, str]] = None,
    ) -> ProviderResponse:
        """
        Request a deeplink for a KHQR string.

        Returns:
            Provider response; ``data.shortLink`` holds the URL on success
        """
        ...

    @abstractmethod
    async def check_transaction_by_md5(self, md5: str) -> ProviderResponse:
        """Look up a transaction by the MD5 of its QR string."""
        ...

    @abstractmethod
    async def check_transaction_by_hash(self, full_hash: str) -> ProviderResponse:
        """Look up a transaction by its full transaction hash."""
        ...

    @abstractmethod
    async def check_transaction_by_short_hash(
        self,
        short_hash: str,
        amount: float,
        currency: str,
    ) -> ProviderResponse:
        """Look up a transaction by short hash, amount, and currency."""
        ...

    @abstractmethod
    async def check_bakong_account(self, account_id: str) -> ProviderResponse:
        """Check whether a Bakong account ID exists."""
        ...
