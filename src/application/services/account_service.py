"""Account service - Bakong account lookups."""

import structlog

from src.application.dto import AccountCheckResult
from src.domain.exceptions import InvalidPaymentRequestException
from src.domain.interfaces import BakongAPIClient

logger = structlog.get_logger(__name__)


class AccountService:
    """Application service for Bakong account use cases."""

    def __init__(self, bakong_client: BakongAPIClient):
        self._bakong_client = bakong_client

    async def check_account(self, account_id: str | None) -> AccountCheckResult:
        """
        Check whether a Bakong account ID exists.

        Raises:
            InvalidPaymentRequestException: If account_id is missing
        """
        if not account_id:
            raise InvalidPaymentRequestException("Account ID is required")

        result = await self._bakong_client.check_bakong_account(account_id)
        exists = result.get("responseCode") == 0

        logger.info("account_checked", account_id=account_id, exists=exists)

        return AccountCheckResult(
            exists=exists,
            message=result.get("responseMessage"),
            error_code=result.get("errorCode"),
        )
