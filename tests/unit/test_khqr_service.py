"""Unit Tests for KHQRService and AccountService."""

import re

import pytest

from src.application.services import AccountService, KHQRService
from src.domain.exceptions import (
    InvalidPaymentRequestException,
    KHQRDecodeException,
    KHQRGenerationException,
)


@pytest.fixture
def khqr_service() -> KHQRService:
    return KHQRService(expiration_minutes=10)


class TestKHQRService:

    def test_generate_md5_is_deterministic(self, khqr_service):
        assert khqr_service.generate_md5("sample-qr-content") == "f2ef9121db78fb8e510b6607b3185cd8"

    def test_missing_account_id(self, khqr_service):
        with pytest.raises(KHQRGenerationException) as exc_info:
            khqr_service.generate_individual_qr(
                account_id="",
                merchant_name="Demo Shop",
                amount=1,
                currency="USD",
            )

        assert exc_info.value.message == "Bakong account ID is required"

    def test_missing_merchant_name(self, khqr_service):
        with pytest.raises(KHQRGenerationException, match="Merchant name is required"):
            khqr_service.generate_individual_qr(account_id="jonhsmith@nbcq", merchant_name=" ")

    def test_valid_individual_qr(self, khqr_service):
        generated = khqr_service.generate_individual_qr(
            account_id="jonhsmith@nbcq",
            merchant_name="Demo Shop",
            merchant_city="Phnom Penh",
            amount=1,
            currency="USD",
            bill_number="INV-TEST-001",
        )

        assert re.fullmatch(r"[a-f0-9]{32}", generated.md5)
        assert generated.md5 == khqr_service.generate_md5(generated.qr_string)
        assert khqr_service.verify_khqr(generated.qr_string)

    def test_static_qr_without_amount(self, khqr_service):
        generated = khqr_service.generate_individual_qr(
            account_id="jonhsmith@nbcq",
            merchant_name="Demo Shop",
        )

        decoded = khqr_service.decode_khqr(generated.qr_string)
        assert decoded["pointOfInitiationMethod"] == "11"
        assert decoded["expirationTimestamp"] is None

    def test_codec_errors_are_wrapped(self, khqr_service):
        with pytest.raises(KHQRGenerationException):
            khqr_service.generate_individual_qr(
                account_id="no-at-sign",
                merchant_name="Demo Shop",
            )

    def test_merchant_qr(self, khqr_service):
        generated = khqr_service.generate_merchant_qr(
            account_id="shop@devb",
            merchant_name="Demo Shop",
            merchant_id="123456",
            acquiring_bank="Dev Bank",
            amount=20000,
            currency="KHR",
        )

        decoded = khqr_service.decode_khqr(generated.qr_string)
        assert decoded["merchantType"] == "merchant"
        assert decoded["transactionCurrency"] == "KHR"

    def test_decode_malformed(self, khqr_service):
        with pytest.raises(KHQRDecodeException):
            khqr_service.decode_khqr("0002")

    def test_inspect_reports_validity(self, khqr_service):
        generated = khqr_service.generate_individual_qr(
            account_id="jonhsmith@nbcq",
            merchant_name="Demo Shop",
        )

        inspected = khqr_service.inspect_khqr(generated.qr_string[:-4] + "0000")

        assert inspected.decoded["merchantName"] == "Demo Shop"
        if generated.qr_string[-4:] != "0000":
            assert inspected.is_valid is False


class TestAccountService:

    @pytest.mark.asyncio
    async def test_existing_account(self, mock_bakong_client):
        result = await AccountService(mock_bakong_client).check_account("john_smith@devb")

        assert result.exists is True
        assert result.success is True
        assert mock_bakong_client.calls_to("check_bakong_account")[0]["account_id"] == "john_smith@devb"

    @pytest.mark.asyncio
    async def test_unknown_account(self, mock_bakong_client):
        mock_bakong_client.account_response = {
            "responseCode": 1,
            "responseMessage": "Account could not be found",
            "errorCode": 11,
        }

        result = await AccountService(mock_bakong_client).check_account("ghost@devb")

        assert result.exists is False
        assert result.message == "Account could not be found"
        assert result.error_code == 11

    @pytest.mark.asyncio
    async def test_account_id_required(self, mock_bakong_client):
        with pytest.raises(InvalidPaymentRequestException, match="Account ID is required"):
            await AccountService(mock_bakong_client).check_account("")
