"""Payment entity tracked in the in-memory ledger."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Render a UTC timestamp as ISO 8601 with millisecond precision and Z."""
    if value is None:
        return None
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    ERROR = "error"

    @property
    def is_final(self) -> bool:
        return self in (PaymentStatus.COMPLETED, PaymentStatus.FAILED)


@dataclass
class ProviderError:
    """Last provider error seen while checking a payment."""

    checked_by: str
    response_code: Any = None
    error_code: Any = None
    response_message: Optional[str] = None
    checked_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "checkedAt": isoformat(self.checked_at),
            "checkedBy": self.checked_by,
            "responseCode": self.response_code,
            "errorCode": self.error_code,
            "responseMessage": self.response_message,
        }


@dataclass
class Payment:
    """
    A KHQR payment awaiting or having reached settlement.

    Keyed by ``md5``, the MD5 of ``qr_string``. Status moves from pending
    to completed or failed; error marks a provider lookup problem and the
    payment remains eligible for re-checking.
    """

    bill_number: str
    amount: float
    currency: str
    qr_string: str
    md5: str
    description: Optional[str] = None
    status: PaymentStatus = PaymentStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    deeplink_url: Optional[str] = None
    completed_at: Optional[datetime] = None
    transaction_hash: Optional[str] = None
    from_account: Optional[str] = None
    manual_settled_at: Optional[datetime] = None
    last_provider_error: Optional[ProviderError] = None

    @property
    def is_manually_settled(self) -> bool:
        return self.manual_settled_at is not None

    def mark_completed(
        self,
        transaction_hash: Optional[str],
        from_account: Optional[str],
    ) -> None:
        self.status = PaymentStatus.COMPLETED
        self.completed_at = utcnow()
        self.transaction_hash = transaction_hash
        self.from_account = from_account

    def mark_failed(self) -> None:
        self.status = PaymentStatus.FAILED

    def mark_manually_settled(self, from_account: str, transaction_hash: str) -> None:
        self.mark_completed(transaction_hash=transaction_hash, from_account=from_account)
        self.manual_settled_at = self.completed_at

    def record_provider_error(self, error: ProviderError) -> None:
        self.last_provider_error = error

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase dictionary exposed by the API."""
        data: Dict[str, Any] = {
            "md5": self.md5,
            "billNumber": self.bill_number,
            "amount": self.amount,
            "currency": self.currency,
            "qrString": self.qr_string,
            "description": self.description,
            "status": self.status.value,
            "createdAt": isoformat(self.created_at),
            "deeplinkUrl": self.deeplink_url,
        }
        if self.completed_at is not None:
            data["completedAt"] = isoformat(self.completed_at)
            data["transactionHash"] = self.transaction_hash
            data["fromAccount"] = self.from_account
        if self.manual_settled_at is not None:
            data["manualSettledAt"] = isoformat(self.manual_settled_at)
        if self.last_provider_error is not None:
            data["lastProviderError"] = self.last_provider_error.to_dict()
        return data
