"""
Shared fixtures.

Provides:
- Mock Bakong API client with configurable responses
- Settings with a configured merchant
- Fresh in-memory payment ledger
- PaymentService wired to the mocks
"""

from typing import Any, Dict, List, Optional

import pytest

from src.application.services import KHQRService, PaymentService
from src.core.config import Settings
from src.domain.interfaces import BakongAPIClient, ProviderResponse
from src.infrastructure.repositories import InMemoryPaymentRepository

NOT_FOUND = {
    "responseCode": 1,
    "responseMessage": "Transaction could not be found. Please check and try again.",
    "errorCode": 1,
    "data": None,
}

COMPLETED = {
    "responseCode": 0,
    "responseMessage": "Getting transaction successfully.",
    "errorCode": None,
    "data": {
        "hash": "8465d722d7d5065f2886c2fd1a6ec8f0d1e9d7b3e8b9c2a1f6e5d4c3b2a19080",
        "fromAccountId": "payer@devb",
        "toAccountId": "john_smith@devb",
        "currency": "USD",
        "amount": 1.0,
    },
}

FAILED = {
    "responseCode": 1,
    "responseMessage": "Transaction failed.",
    "errorCode": 3,
    "data": None,
}

TIMEOUT = {
    "responseCode": -1,
    "responseMessage": "Bakong API request timed out after 18000ms (including IPv4 fallback)",
    "errorCode": "TIMEOUT",
}


# =============================================================================
# Mock Clients
# =============================================================================

class MockBakongAPIClient(BakongAPIClient):
    """Mock Bakong client returning canned responses and recording calls."""

    def __init__(self, has_token: bool = True, dev: bool = False):
        self._has_token = has_token
        self.dev = dev
        self.md5_response: ProviderResponse = dict(NOT_FOUND)
        self.short_hash_response: ProviderResponse = dict(NOT_FOUND)
        self.deeplink_response: ProviderResponse = {
            "responseCode": 0,
            "responseMessage": "Success",
            "errorCode": None,
            "data": {"shortLink": "https://bakong.page.link/demo"},
        }
        self.account_response: ProviderResponse = {
            "responseCode": 0,
            "responseMessage": "Account exists",
            "errorCode": None,
            "data": None,
        }
        self.calls: List[Dict[str, Any]] = []

    @property
    def has_token(self) -> bool:
        return self._has_token

    def is_using_dev_environment(self) -> bool:
        return self.dev

    def calls_to(self, name: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["method"] == name]

    async def request_token(self, email: str, organization: str, project: str) -> ProviderResponse:
        self.calls.append({"method": "request_token", "email": email})
        return {"responseCode": 0, "responseMessage": "We've sent you an email", "errorCode": None}

    async def verify_token(self, code: str) -> ProviderResponse:
        self.calls.append({"method": "verify_token", "code": code})
        return {"responseCode": 0, "errorCode": None, "data": {"token": "token-123"}}

    async def renew_token(self, email: str) -> ProviderResponse:
        self.calls.append({"method": "renew_token", "email": email})
        return {"responseCode": 0, "errorCode": None, "data": {"token": "token-456"}}

    async def generate_deeplink(
        self,
        qr_string: str,
        source_info: Optional[Dict[str, str]] = None,
    ) -> ProviderResponse:
        self.calls.append({"method": "generate_deeplink", "qr": qr_string, "source_info": source_info})
        return self.deeplink_response

    async def check_transaction_by_md5(self, md5: str) -> ProviderResponse:
        self.calls.append({"method": "check_transaction_by_md5", "md5": md5})
        if not self._has_token:
            return {
                "responseCode": -1,
                "errorCode": "MISSING_TOKEN",
                "responseMessage": "Bakong API token is missing",
            }
        return self.md5_response

    async def check_transaction_by_hash(self, full_hash: str) -> ProviderResponse:
        self.calls.append({"method": "check_transaction_by_hash", "hash": full_hash})
        return self.md5_response

    async def check_transaction_by_short_hash(
        self,
        short_hash: str,
        amount: float,
        currency: str,
    ) -> ProviderResponse:
        self.calls.append({
            "method": "check_transaction_by_short_hash",
            "hash": short_hash,
            "amount": amount,
            "currency": currency,
        })
        return self.short_hash_response

    async def check_bakong_account(self, account_id: str) -> ProviderResponse:
        self.calls.append({"method": "check_bakong_account", "account_id": account_id})
        return self.account_response


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def mock_bakong_client() -> MockBakongAPIClient:
    """Create a mock Bakong client with a token configured."""
    return MockBakongAPIClient()


@pytest.fixture
def tokenless_bakong_client() -> MockBakongAPIClient:
    """Create a mock Bakong client without an API token."""
    return MockBakongAPIClient(has_token=False)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a configured merchant and inline deeplinks."""
    return Settings(
        _env_file=None,
        bakong_account_id="john_smith@devb",
        merchant_name="Demo Shop",
        merchant_city="Phnom Penh",
        deeplink_mode="sync",
        demo_manual_settle_enabled=True,
    )


@pytest.fixture
def payment_repository() -> InMemoryPaymentRepository:
    return InMemoryPaymentRepository()


@pytest.fixture
def payment_service(
    payment_repository: InMemoryPaymentRepository,
    mock_bakong_client: MockBakongAPIClient,
    test_settings: Settings,
) -> PaymentService:
    """PaymentService wired to the mock client and a fresh ledger."""
    return PaymentService(
        payment_repository=payment_repository,
        bakong_client=mock_bakong_client,
        khqr_service=KHQRService(expiration_minutes=10),
        settings=test_settings,
    )
