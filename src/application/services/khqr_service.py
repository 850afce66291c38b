"""KHQR service - generates, verifies, and decodes payment QR strings."""

import time
from typing import Any, Dict, Optional

import structlog

from src.application.dto import DecodedKHQR, GeneratedKHQR
from src.core.config import settings
from src.domain.exceptions import KHQRDecodeException, KHQRGenerationException
from src.service import khqr
from src.service.khqr import Currency, IndividualInfo, KHQRError, MerchantInfo

logger = structlog.get_logger(__name__)


class KHQRService:
    """
    Application service wrapping the KHQR codec.

    Dynamic QR codes (those with an amount) expire after
    ``expiration_minutes``.
    """

    def __init__(self, expiration_minutes: int | None = None):
        self._expiration_minutes = (
            expiration_minutes
            if expiration_minutes is not None
            else settings.qr_expiration_minutes
        )

    @staticmethod
    def resolve_currency(currency: Optional[str]) -> Currency:
        return Currency.KHR if currency == "KHR" else Currency.USD

    def generate_individual_qr(
        self,
        account_id: Optional[str],
        merchant_name: Optional[str],
        merchant_city: str = "Phnom Penh",
        amount: float = 0,
        currency: str = "USD",
        bill_number: Optional[str] = None,
        mobile_number: Optional[str] = None,
        store_label: Optional[str] = None,
        terminal_label: Optional[str] = None,
        purpose_of_transaction: Optional[str] = None,
    ) -> GeneratedKHQR:
        """
        Generate a KHQR string for an individual Bakong account.

        Raises:
            KHQRGenerationException: If required fields are missing or the
                codec rejects the input
        """
        self._validate_required_fields(account_id, merchant_name)

        info = IndividualInfo(
            bakong_account_id=account_id,
            merchant_name=merchant_name,
            merchant_city=merchant_city,
            **self._optional_data(
                amount=amount,
                currency=currency,
                bill_number=bill_number,
                mobile_number=mobile_number,
                store_label=store_label,
                terminal_label=terminal_label,
                purpose_of_transaction=purpose_of_transaction,
            ),
        )

        return self._generate(khqr.build_individual, info)

    def generate_merchant_qr(
        self,
        account_id: Optional[str],
        merchant_name: Optional[str],
        merchant_id: Optional[str],
        acquiring_bank: Optional[str],
        merchant_city: str = "Phnom Penh",
        amount: float = 0,
        currency: str = "USD",
        bill_number: Optional[str] = None,
        mobile_number: Optional[str] = None,
        store_label: Optional[str] = None,
        terminal_label: Optional[str] = None,
    ) -> GeneratedKHQR:
        """
        Generate a KHQR string for a registered merchant account.

        Raises:
            KHQRGenerationException: If required fields are missing or the
                codec rejects the input
        """
        self._validate_required_fields(account_id, merchant_name)

        info = MerchantInfo(
            bakong_account_id=account_id,
            merchant_name=merchant_name,
            merchant_city=merchant_city,
            merchant_id=merchant_id,
            acquiring_bank=acquiring_bank,
            **self._optional_data(
                amount=amount,
                currency=currency,
                bill_number=bill_number,
                mobile_number=mobile_number,
                store_label=store_label,
                terminal_label=terminal_label,
            ),
        )

        return self._generate(khqr.build_merchant, info)

    def verify_khqr(self, qr_string: str) -> bool:
        return khqr.verify(qr_string)

    def decode_khqr(self, qr_string: str) -> Dict[str, Any]:
        """
        Decode a KHQR string into named fields.

        Raises:
            KHQRDecodeException: If the string is not a parseable payload
        """
        try:
            return khqr.decode(qr_string)
        except KHQRError as e:
            raise KHQRDecodeException(str(e))

    def inspect_khqr(self, qr_string: str) -> DecodedKHQR:
        """Decode and verify a KHQR string in one step."""
        return DecodedKHQR(
            decoded=self.decode_khqr(qr_string),
            is_valid=self.verify_khqr(qr_string),
        )

    def generate_md5(self, qr_string: str) -> str:
        return khqr.md5(qr_string)

    def generate_short_hash(self, qr_string: str) -> str:
        return khqr.short_hash(qr_string)

    def _generate(self, build, info: IndividualInfo) -> GeneratedKHQR:
        try:
            qr_string = build(info)
        except KHQRError as e:
            logger.warning(
                "khqr_generation_failed",
                account_id=info.bakong_account_id,
                error=str(e),
            )
            raise KHQRGenerationException(str(e))

        return GeneratedKHQR(qr_string=qr_string, md5=self.generate_md5(qr_string))

    def _optional_data(
        self,
        amount: float,
        currency: str,
        **fields: Optional[str],
    ) -> Dict[str, Any]:
        data: Dict[str, Any] = {"currency": self.resolve_currency(currency)}

        if amount and amount > 0:
            data["amount"] = amount
            data["expiration_timestamp"] = (
                int(time.time() * 1000) + self._expiration_minutes * 60 * 1000
            )

        data.update({name: value for name, value in fields.items() if value})
        return data

    @staticmethod
    def _validate_required_fields(
        account_id: Optional[str],
        merchant_name: Optional[str],
    ) -> None:
        if not account_id or not str(account_id).strip():
            raise KHQRGenerationException("Bakong account ID is required")

        if not merchant_name or not str(merchant_name).strip():
            raise KHQRGenerationException("Merchant name is required")
