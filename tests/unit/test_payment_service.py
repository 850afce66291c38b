"""
Unit Tests for PaymentService.

These tests verify:
1. Payment QR generation, validation, and warnings
2. Sync and background deeplink generation
3. Settlement checks with the short-hash fallback
4. Ledger status transitions
5. Demo manual settlement
"""

import pytest

from src.application.dto import CreatePaymentRequest, MarkPaidRequest
from src.application.services import KHQRService, PaymentService
from src.core.config import Settings
from src.domain.entities import PaymentStatus
from src.domain.exceptions import (
    InvalidPaymentRequestException,
    ManualSettleDisabledException,
    MerchantNotConfiguredException,
    PaymentNotFoundException,
)
from src.infrastructure.repositories import InMemoryPaymentRepository
from src.service.khqr import decode, short_hash, verify
from tests.conftest import COMPLETED, FAILED, TIMEOUT, MockBakongAPIClient


def service_with(client, repository=None, **overrides) -> PaymentService:
    options = {
        "bakong_account_id": "john_smith@devb",
        "merchant_name": "Demo Shop",
        "deeplink_mode": "sync",
    }
    options.update(overrides)
    return PaymentService(
        payment_repository=repository or InMemoryPaymentRepository(),
        bakong_client=client,
        khqr_service=KHQRService(expiration_minutes=10),
        settings=Settings(_env_file=None, **options),
    )


async def create(service: PaymentService, **kwargs):
    request = {"amount": 1, "currency": "USD", "bill_number": "INV-1001"}
    request.update(kwargs)
    return await service.create_payment(CreatePaymentRequest(**request))


# =============================================================================
# Create Payment Tests
# =============================================================================

class TestCreatePayment:

    @pytest.mark.asyncio
    async def test_creates_pending_payment(self, payment_service, payment_repository):
        result = await create(payment_service, description="Coffee")

        assert result.bill_number == "INV-1001"
        assert result.amount == 1.0
        assert result.currency == "USD"
        assert result.manual_settle_enabled is True
        assert result.qr_code_image.startswith("data:image/png;base64,")
        assert verify(result.qr_string)

        payment = await payment_repository.get_by_md5(result.md5)
        assert payment is not None
        assert payment.status is PaymentStatus.PENDING
        assert payment.description == "Coffee"

    @pytest.mark.asyncio
    async def test_qr_carries_merchant_and_bill_details(self, payment_service):
        result = await create(payment_service, description="Coffee")

        decoded = decode(result.qr_string)
        assert decoded["bakongAccountID"] == "john_smith@devb"
        assert decoded["merchantName"] == "Demo Shop"
        assert decoded["billNumber"] == "INV-1001"
        assert decoded["purposeOfTransaction"] == "Coffee"
        assert decoded["storeLabel"] == "Demo Shop"
        assert decoded["transactionAmount"] == "1.00"

    @pytest.mark.asyncio
    async def test_sync_deeplink_is_attached(self, payment_service, mock_bakong_client):
        result = await create(payment_service, callback_url="http://test/payment/callback")

        assert result.deeplink_url == "https://bakong.page.link/demo"
        assert result.warning is None
        call = mock_bakong_client.calls_to("generate_deeplink")[0]
        assert call["source_info"]["appName"] == "Demo Shop"
        assert call["source_info"]["appDeepLinkCallback"] == "http://test/payment/callback"

    @pytest.mark.asyncio
    async def test_sync_deeplink_failure_is_a_warning(self, payment_service, mock_bakong_client):
        mock_bakong_client.deeplink_response = {
            "responseCode": -1,
            "errorCode": "TIMEOUT",
            "responseMessage": "Bakong API request timed out after 3500ms",
        }

        result = await create(payment_service)

        assert result.deeplink_url is None
        assert result.warning == "Bakong API request timed out after 3500ms"

    @pytest.mark.asyncio
    async def test_background_deeplink_fills_record_later(self, mock_bakong_client):
        repository = InMemoryPaymentRepository()
        service = service_with(mock_bakong_client, repository, deeplink_mode="async")

        result = await create(service)

        assert result.deeplink_url is None
        assert result.warning == (
            "Deeplink is being prepared in background. QR scan payment works immediately."
        )

        await service.wait_for_background_tasks()

        payment = await repository.get_by_md5(result.md5)
        assert payment.deeplink_url == "https://bakong.page.link/demo"

    @pytest.mark.asyncio
    async def test_no_token_warns_and_skips_deeplink(self, tokenless_bakong_client):
        service = service_with(tokenless_bakong_client)

        result = await create(service)

        assert result.deeplink_url is None
        assert result.warning == "BAKONG_API_TOKEN is not configured, deeplink is unavailable"
        assert tokenless_bakong_client.calls_to("generate_deeplink") == []

    @pytest.mark.asyncio
    async def test_dev_environment_warning_is_appended(self):
        client = MockBakongAPIClient(has_token=False, dev=True)
        service = service_with(client)

        result = await create(service)

        assert result.warning.startswith("BAKONG_API_TOKEN is not configured")
        assert " | Using Bakong DEV API base URL." in result.warning

    @pytest.mark.asyncio
    async def test_default_bill_number(self, payment_service):
        result = await payment_service.create_payment(CreatePaymentRequest(amount="2.50"))

        assert result.bill_number.startswith("INV-")
        assert result.amount == 2.5

    @pytest.mark.asyncio
    async def test_currency_is_case_insensitive(self, payment_service):
        result = await create(payment_service, amount=10000, currency="khr")

        assert result.currency == "KHR"
        assert decode(result.qr_string)["transactionCurrency"] == "KHR"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [None, 0, -5, "abc", "12.5abc", "NaN", True])
    async def test_invalid_amount_rejected(self, payment_service, amount):
        with pytest.raises(InvalidPaymentRequestException) as exc_info:
            await create(payment_service, amount=amount)

        assert exc_info.value.message == "Amount is required and must be greater than 0"

    @pytest.mark.asyncio
    async def test_unsupported_currency_rejected(self, payment_service):
        with pytest.raises(InvalidPaymentRequestException) as exc_info:
            await create(payment_service, currency="EUR")

        assert exc_info.value.message == "Currency must be either USD or KHR"

    @pytest.mark.asyncio
    async def test_unconfigured_merchant_rejected(self, mock_bakong_client):
        service = service_with(mock_bakong_client, bakong_account_id="", merchant_name="")

        with pytest.raises(MerchantNotConfiguredException):
            await create(service)


# =============================================================================
# Check Payment Tests
# =============================================================================

class TestCheckPayment:

    @pytest.mark.asyncio
    async def test_missing_md5_rejected(self, payment_service):
        with pytest.raises(InvalidPaymentRequestException, match="MD5 hash is required"):
            await payment_service.check_payment("")

    @pytest.mark.asyncio
    async def test_pending_tries_short_hash(self, payment_service, mock_bakong_client):
        created = await create(payment_service)

        result = await payment_service.check_payment(created.md5)

        assert result.status == "pending"
        assert result.success is False
        assert result.checked_by == "md5"
        assert result.provider["fallback"]["checkedBy"] == "short_hash"
        call = mock_bakong_client.calls_to("check_transaction_by_short_hash")[0]
        assert call["hash"] == short_hash(created.qr_string)
        assert call["amount"] == 1.0
        assert call["currency"] == "USD"

    @pytest.mark.asyncio
    async def test_short_hash_completion_is_adopted(
        self, payment_service, payment_repository, mock_bakong_client
    ):
        created = await create(payment_service)
        mock_bakong_client.short_hash_response = COMPLETED

        result = await payment_service.check_payment(created.md5)

        assert result.status == "completed"
        assert result.success is True
        assert result.checked_by == "short_hash"
        assert result.message == "Payment completed"

        payment = await payment_repository.get_by_md5(created.md5)
        assert payment.status is PaymentStatus.COMPLETED
        assert payment.transaction_hash == COMPLETED["data"]["hash"]
        assert payment.from_account == "payer@devb"
        assert payment.completed_at is not None

    @pytest.mark.asyncio
    async def test_short_hash_failure_is_adopted(
        self, payment_service, payment_repository, mock_bakong_client
    ):
        created = await create(payment_service)
        mock_bakong_client.short_hash_response = FAILED

        result = await payment_service.check_payment(created.md5)

        assert result.status == "failed"
        assert result.success is False
        assert result.checked_by == "short_hash"
        assert result.message == "Transaction failed."

        payment = await payment_repository.get_by_md5(created.md5)
        assert payment.status is PaymentStatus.FAILED
        assert payment.completed_at is None

    @pytest.mark.asyncio
    async def test_short_hash_error_is_not_adopted(
        self, payment_service, payment_repository, mock_bakong_client
    ):
        created = await create(payment_service)
        mock_bakong_client.short_hash_response = TIMEOUT

        result = await payment_service.check_payment(created.md5)

        assert result.status == "pending"
        assert result.checked_by == "md5"
        assert result.provider["fallback"]["errorCode"] == "TIMEOUT"
        payment = await payment_repository.get_by_md5(created.md5)
        assert payment.status is PaymentStatus.PENDING

    @pytest.mark.asyncio
    async def test_md5_completion_skips_short_hash(self, payment_service, mock_bakong_client):
        created = await create(payment_service)
        mock_bakong_client.md5_response = COMPLETED

        result = await payment_service.check_payment(created.md5)

        assert result.status == "completed"
        assert result.checked_by == "md5"
        assert result.data == COMPLETED["data"]
        assert result.provider["fallback"] is None
        assert mock_bakong_client.calls_to("check_transaction_by_short_hash") == []

    @pytest.mark.asyncio
    async def test_failed_payment(self, payment_service, payment_repository, mock_bakong_client):
        created = await create(payment_service)
        mock_bakong_client.md5_response = FAILED

        result = await payment_service.check_payment(created.md5)

        assert result.status == "failed"
        assert result.error_code == 3
        payment = await payment_repository.get_by_md5(created.md5)
        assert payment.status is PaymentStatus.FAILED

    @pytest.mark.asyncio
    async def test_provider_error_is_recoverable(
        self, payment_service, payment_repository, mock_bakong_client
    ):
        created = await create(payment_service)
        mock_bakong_client.md5_response = TIMEOUT

        result = await payment_service.check_payment(created.md5)

        assert result.status == "error"
        assert result.error_code == "TIMEOUT"
        assert "Provider status lookup failed" in result.warning
        payment = await payment_repository.get_by_md5(created.md5)
        assert payment.status is PaymentStatus.ERROR
        assert payment.last_provider_error.error_code == "TIMEOUT"
        assert payment.last_provider_error.checked_by == "md5"

        mock_bakong_client.md5_response = COMPLETED
        result = await payment_service.check_payment(created.md5)

        assert result.status == "completed"
        assert payment.status is PaymentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_completed_is_never_downgraded(
        self, payment_service, payment_repository, mock_bakong_client
    ):
        created = await create(payment_service)
        mock_bakong_client.md5_response = COMPLETED
        await payment_service.check_payment(created.md5)

        mock_bakong_client.md5_response = TIMEOUT
        result = await payment_service.check_payment(created.md5)

        assert result.status == "error"
        payment = await payment_repository.get_by_md5(created.md5)
        assert payment.status is PaymentStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_unknown_md5_is_checked_without_fallback(self, payment_service, mock_bakong_client):
        result = await payment_service.check_payment("0" * 32)

        assert result.status == "pending"
        assert result.deeplink_url is None
        assert mock_bakong_client.calls_to("check_transaction_by_short_hash") == []

    @pytest.mark.asyncio
    async def test_missing_token_is_error(self, tokenless_bakong_client):
        service = service_with(tokenless_bakong_client)
        created = await create(service)

        result = await service.check_payment(created.md5)

        assert result.status == "error"
        assert result.error_code == "MISSING_TOKEN"
        assert tokenless_bakong_client.calls_to("check_transaction_by_short_hash") == []


# =============================================================================
# Manual Settlement Tests
# =============================================================================

class TestMarkPaid:

    @pytest.mark.asyncio
    async def test_mark_paid_completes_payment(self, payment_service):
        created = await create(payment_service)

        data = await payment_service.mark_paid(MarkPaidRequest(md5=created.md5))

        assert data["status"] == "completed"
        assert data["md5"] == created.md5
        assert data["fromAccount"] == "demo@manual"
        assert data["transactionHash"].startswith("manual-")
        assert data["manualSettledAt"] == data["completedAt"]

    @pytest.mark.asyncio
    async def test_mark_paid_uses_given_details(self, payment_service):
        created = await create(payment_service)

        data = await payment_service.mark_paid(
            MarkPaidRequest(
                md5=created.md5,
                from_account_id="  payer@devb ",
                transaction_hash="abc123",
            )
        )

        assert data["fromAccount"] == "payer@devb"
        assert data["transactionHash"] == "abc123"

    @pytest.mark.asyncio
    async def test_manual_settlement_short_circuits_checks(
        self, payment_service, mock_bakong_client
    ):
        created = await create(payment_service)
        await payment_service.mark_paid(MarkPaidRequest(md5=created.md5))

        result = await payment_service.check_payment(created.md5)

        assert result.status == "completed"
        assert result.checked_by == "manual"
        assert result.data["fromAccountId"] == "demo@manual"
        assert mock_bakong_client.calls_to("check_transaction_by_md5") == []

    @pytest.mark.asyncio
    async def test_mark_paid_disabled(self, mock_bakong_client):
        service = service_with(mock_bakong_client, demo_manual_settle_enabled=False)

        with pytest.raises(ManualSettleDisabledException):
            await service.mark_paid(MarkPaidRequest(md5="abc"))

    @pytest.mark.asyncio
    async def test_mark_paid_unknown_payment(self, payment_service):
        with pytest.raises(PaymentNotFoundException):
            await payment_service.mark_paid(MarkPaidRequest(md5="missing"))

    @pytest.mark.asyncio
    async def test_mark_paid_requires_md5(self, payment_service):
        with pytest.raises(InvalidPaymentRequestException):
            await payment_service.mark_paid(MarkPaidRequest(md5=None))


# =============================================================================
# Lookup Tests
# =============================================================================

class TestLookups:

    @pytest.mark.asyncio
    async def test_lookup_by_bill_number_and_md5(self, payment_service):
        created = await create(payment_service, bill_number="INV-42")

        by_bill = await payment_service.get_by_bill_number("INV-42")
        by_md5 = await payment_service.get_by_md5(created.md5)

        assert by_bill is by_md5

    @pytest.mark.asyncio
    async def test_unknown_bill_number(self, payment_service):
        with pytest.raises(PaymentNotFoundException):
            await payment_service.get_by_bill_number("nope")

    @pytest.mark.asyncio
    async def test_list_in_creation_order(self, payment_service):
        await create(payment_service, bill_number="A")
        await create(payment_service, bill_number="B")

        payments = await payment_service.list_payments()

        assert [p.bill_number for p in payments] == ["A", "B"]
