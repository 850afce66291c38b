"""Payment service - orchestrates QR generation and settlement checks."""

import asyncio
import time
from typing import Any, Dict, Optional, Set

import structlog

from src.application.dto import (
    CreatePaymentRequest,
    CreatePaymentResult,
    MarkPaidRequest,
    PaymentStatusResult,
    normalize_optional_text,
)
from src.application.services.khqr_service import KHQRService
from src.core.config import Settings, settings as default_settings
from src.core.metrics import (
    record_deeplink,
    record_khqr_generated,
    record_manual_settle,
    record_payment_status,
)
from src.domain.entities import Payment, PaymentStatus, ProviderError
from src.domain.exceptions import (
    InvalidPaymentRequestException,
    ManualSettleDisabledException,
    MerchantNotConfiguredException,
    PaymentNotFoundException,
)
from src.domain.interfaces import BakongAPIClient, PaymentRepository, ProviderResponse
from src.infrastructure.imaging import render_qr_data_url
from src.service.settlement import (
    build_status_message,
    provider_summary,
    resolve_payment_status,
)

logger = structlog.get_logger(__name__)

DEEPLINK_ICON_URL = "https://bakong.nbc.org.kh/images/logo.svg"
MANUAL_SETTLE_MESSAGE = "Payment marked as completed manually (demo mode)"
MANUAL_FROM_ACCOUNT = "demo@manual"


def append_warning(existing: Optional[str], warning: str) -> str:
    return f"{existing} | {warning}" if existing else warning


def deeplink_short_link(deeplink: ProviderResponse) -> Optional[str]:
    """Short link from a deeplink response, or None when the provider gave none."""
    data = deeplink.get("data")
    if isinstance(data, dict):
        return data.get("shortLink") or None
    return None


class PaymentService:
    """
    Application service for KHQR payment use cases.

    Generates payment QR codes, tracks them in the ledger, and reconciles
    their status against the Bakong API.
    """

    def __init__(
        self,
        payment_repository: PaymentRepository,
        bakong_client: BakongAPIClient,
        khqr_service: KHQRService,
        settings: Settings | None = None,
    ):
        self._payment_repo = payment_repository
        self._bakong_client = bakong_client
        self._khqr_service = khqr_service
        self._settings = settings or default_settings
        self._background_tasks: Set[asyncio.Task] = set()

    @property
    def manual_settle_enabled(self) -> bool:
        return self._settings.demo_manual_settle_enabled

    async def create_payment(self, request: CreatePaymentRequest) -> CreatePaymentResult:
        """
        Generate a payment QR and record it as pending.

        Deeplink generation never fails the request: problems surface as
        a warning and ``deeplink_url`` stays None.

        Raises:
            InvalidPaymentRequestException: If amount or currency is invalid
            MerchantNotConfiguredException: If the merchant is not configured
            KHQRGenerationException: If the QR payload cannot be built
        """
        errors = request.validate()
        if errors:
            raise InvalidPaymentRequestException("; ".join(errors))

        if not self._settings.merchant_configured:
            raise MerchantNotConfiguredException()

        amount = request.parsed_amount
        currency = request.resolved_currency
        bill_number = (
            normalize_optional_text(request.bill_number) or f"INV-{int(time.time() * 1000)}"
        )
        description = normalize_optional_text(request.description)
        store_label = normalize_optional_text(request.store_label) or self._settings.merchant_name

        log = logger.bind(bill_number=bill_number, amount=amount, currency=currency)

        generated = self._khqr_service.generate_individual_qr(
            account_id=self._settings.bakong_account_id,
            merchant_name=self._settings.merchant_name,
            merchant_city=self._settings.merchant_city,
            amount=amount,
            currency=currency,
            bill_number=bill_number,
            mobile_number=self._settings.merchant_phone,
            store_label=store_label,
            purpose_of_transaction=description,
        )
        record_khqr_generated(currency)
        log.info("khqr_generated", md5=generated.md5)

        qr_code_image = render_qr_data_url(generated.qr_string, width=300, margin=1)

        source_info = self._source_info(request.callback_url)
        deeplink_url = None
        warning = None

        if self._bakong_client.has_token:
            if self._settings.deeplink_in_background:
                warning = append_warning(
                    warning,
                    "Deeplink is being prepared in background. QR scan payment works immediately.",
                )
            else:
                deeplink = await self._bakong_client.generate_deeplink(
                    generated.qr_string, source_info
                )
                deeplink_url = deeplink_short_link(deeplink)
                record_deeplink("sync", "success" if deeplink_url else "unavailable")
                if not deeplink_url and deeplink.get("responseCode") != 0:
                    warning = deeplink.get("responseMessage") or "Unable to generate deeplink"
        else:
            warning = "BAKONG_API_TOKEN is not configured, deeplink is unavailable"

        if self._bakong_client.is_using_dev_environment():
            warning = append_warning(
                warning,
                "Using Bakong DEV API base URL. Live payments may not reflect in status checks.",
            )

        payment = Payment(
            bill_number=bill_number,
            amount=amount,
            currency=currency,
            qr_string=generated.qr_string,
            md5=generated.md5,
            description=description,
            deeplink_url=deeplink_url,
        )
        await self._payment_repo.save(payment)
        log.info("payment_created", md5=payment.md5)

        if self._bakong_client.has_token and self._settings.deeplink_in_background:
            self._spawn(self._fill_deeplink(payment.md5, generated.qr_string, source_info))

        return CreatePaymentResult(
            bill_number=bill_number,
            qr_string=generated.qr_string,
            qr_code_image=qr_code_image,
            md5=generated.md5,
            deeplink_url=deeplink_url,
            amount=amount,
            currency=currency,
            manual_settle_enabled=self.manual_settle_enabled,
            warning=warning,
        )

    async def check_payment(self, md5: Optional[str]) -> PaymentStatusResult:
        """
        Check settlement status for a payment.

        Looks up by MD5 first. If that reports pending and the payment is
        known locally, a short-hash lookup is tried and adopted only when
        it reaches a final status.

        Raises:
            InvalidPaymentRequestException: If md5 is missing
        """
        if not md5:
            raise InvalidPaymentRequestException("MD5 hash is required")

        payment = await self._payment_repo.get_by_md5(md5)

        if payment is not None and payment.is_manually_settled:
            record_payment_status(PaymentStatus.COMPLETED.value, "manual")
            return PaymentStatusResult(
                status=PaymentStatus.COMPLETED.value,
                message=MANUAL_SETTLE_MESSAGE,
                checked_by="manual",
                manual_settle_enabled=self.manual_settle_enabled,
                data={
                    "hash": payment.transaction_hash,
                    "fromAccountId": payment.from_account or MANUAL_FROM_ACCOUNT,
                    "amount": payment.amount,
                    "currency": payment.currency,
                },
                deeplink_url=payment.deeplink_url,
                warning="Demo manual settle override is enabled.",
            )

        result = await self._bakong_client.check_transaction_by_md5(md5)
        status = resolve_payment_status(result)
        checked_by = "md5"
        fallback = None

        if (
            status is PaymentStatus.PENDING
            and payment is not None
            and payment.qr_string
            and self._bakong_client.has_token
        ):
            short_hash = self._khqr_service.generate_short_hash(payment.qr_string)
            short_hash_result = await self._bakong_client.check_transaction_by_short_hash(
                short_hash, payment.amount, payment.currency
            )
            short_hash_status = resolve_payment_status(short_hash_result)
            fallback = {"checkedBy": "short_hash", **provider_summary(short_hash_result)}

            if short_hash_status.is_final:
                result = short_hash_result
                status = short_hash_status
                checked_by = "short_hash"

        if payment is not None:
            await self._apply_status(payment, status, result, checked_by)

        record_payment_status(status.value, checked_by)
        logger.info("payment_checked", md5=md5, status=status.value, checked_by=checked_by)

        warning = None
        if self._bakong_client.is_using_dev_environment():
            warning = append_warning(
                warning,
                "Using Bakong DEV API base URL. Live payments may remain pending.",
            )
        if status is PaymentStatus.ERROR:
            warning = append_warning(
                warning,
                "Provider status lookup failed. Please verify API base URL/token and retry.",
            )

        return PaymentStatusResult(
            status=status.value,
            message=build_status_message(status, result),
            checked_by=checked_by,
            manual_settle_enabled=self.manual_settle_enabled,
            data=result.get("data"),
            deeplink_url=payment.deeplink_url if payment is not None else None,
            error_code=result.get("errorCode"),
            provider={
                "checkedBy": checked_by,
                **provider_summary(result),
                "fallback": fallback,
            },
            warning=warning,
        )

    async def mark_paid(self, request: MarkPaidRequest) -> Dict[str, Any]:
        """
        Mark a payment as completed without a provider lookup (demo mode).

        Raises:
            ManualSettleDisabledException: If manual settlement is disabled
            InvalidPaymentRequestException: If md5 is missing
            PaymentNotFoundException: If the payment is unknown
        """
        if not self.manual_settle_enabled:
            raise ManualSettleDisabledException()

        if not request.md5:
            raise InvalidPaymentRequestException("MD5 hash is required")

        payment = await self._require(request.md5)
        payment.mark_manually_settled(
            from_account=normalize_optional_text(request.from_account_id) or MANUAL_FROM_ACCOUNT,
            transaction_hash=(
                normalize_optional_text(request.transaction_hash)
                or f"manual-{int(time.time() * 1000)}"
            ),
        )
        await self._payment_repo.save(payment)

        record_manual_settle()
        logger.info("payment_manually_settled", md5=payment.md5, bill_number=payment.bill_number)

        return payment.to_dict()

    async def get_by_md5(self, md5: str) -> Payment:
        return await self._require(md5)

    async def get_by_bill_number(self, bill_number: str) -> Payment:
        payment = await self._payment_repo.get_by_bill_number(bill_number)
        if payment is None:
            logger.warning("payment_not_found", bill_number=bill_number)
            raise PaymentNotFoundException(bill_number)
        return payment

    async def list_payments(self) -> list[Payment]:
        return await self._payment_repo.list_all()

    async def wait_for_background_tasks(self) -> None:
        """Wait for pending background deeplink tasks to finish."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    async def _require(self, md5: str) -> Payment:
        payment = await self._payment_repo.get_by_md5(md5)
        if payment is None:
            logger.warning("payment_not_found", md5=md5)
            raise PaymentNotFoundException(md5)
        return payment

    async def _apply_status(
        self,
        payment: Payment,
        status: PaymentStatus,
        result: ProviderResponse,
        checked_by: str,
    ) -> None:
        # Completed and failed are terminal; later lookups do not move them.
        if payment.status.is_final:
            return

        data = result.get("data") if isinstance(result.get("data"), dict) else {}

        if status is PaymentStatus.COMPLETED:
            payment.mark_completed(
                transaction_hash=data.get("hash"),
                from_account=data.get("fromAccountId"),
            )
        elif status is PaymentStatus.FAILED:
            payment.mark_failed()
        elif status is PaymentStatus.ERROR:
            payment.status = PaymentStatus.ERROR
            summary = provider_summary(result)
            payment.record_provider_error(
                ProviderError(
                    checked_by=checked_by,
                    response_code=summary["responseCode"],
                    error_code=summary["errorCode"],
                    response_message=summary["responseMessage"],
                )
            )
        else:
            payment.status = PaymentStatus.PENDING

        await self._payment_repo.save(payment)

    async def _fill_deeplink(
        self,
        md5: str,
        qr_string: str,
        source_info: Dict[str, str],
    ) -> None:
        try:
            deeplink = await self._bakong_client.generate_deeplink(qr_string, source_info)
            short_link = deeplink_short_link(deeplink)
            if not short_link:
                record_deeplink("async", "unavailable")
                logger.info(
                    "deeplink_unavailable",
                    md5=md5,
                    error_code=deeplink.get("errorCode"),
                    message=deeplink.get("responseMessage"),
                )
                return

            payment = await self._payment_repo.get_by_md5(md5)
            if payment is None:
                return

            payment.deeplink_url = short_link
            await self._payment_repo.save(payment)
            record_deeplink("async", "success")
            logger.info("deeplink_attached", md5=md5)
        except Exception as e:
            record_deeplink("async", "error")
            logger.exception("background_deeplink_failed", md5=md5, error=str(e))

    def _spawn(self, coro) -> None:
        task = asyncio.create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    def _source_info(self, callback_url: Optional[str]) -> Dict[str, str]:
        return {
            "appIconUrl": DEEPLINK_ICON_URL,
            "appName": self._settings.merchant_name or "",
            "appDeepLinkCallback": callback_url or "",
        }
