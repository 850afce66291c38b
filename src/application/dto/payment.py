"""Data transfer objects for payment operations."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SUPPORTED_CURRENCIES = frozenset({"USD", "KHR"})


def normalize_optional_text(value: Any) -> Optional[str]:
    """Strip a string; non-strings and blank strings become None."""
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped or None


def parse_amount(value: Any) -> Optional[float]:
    """Parse a positive finite amount from a number or numeric string."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


@dataclass(frozen=True)
class CreatePaymentRequest:
    """Input data for generating a payment QR."""

    amount: Any
    currency: Any = "USD"
    bill_number: Optional[str] = None
    description: Optional[str] = None
    store_label: Optional[str] = None
    callback_url: Optional[str] = None

    @property
    def parsed_amount(self) -> Optional[float]:
        return parse_amount(self.amount)

    @property
    def resolved_currency(self) -> str:
        return str(self.currency if self.currency is not None else "USD").upper()

    def validate(self) -> List[str]:
        errors = []

        if self.parsed_amount is None:
            errors.append("Amount is required and must be greater than 0")

        if self.resolved_currency not in SUPPORTED_CURRENCIES:
            errors.append("Currency must be either USD or KHR")

        return errors


@dataclass(frozen=True)
class CreatePaymentResult:
    """Result of generating a payment QR."""

    bill_number: str
    qr_string: str
    qr_code_image: str
    md5: str
    deeplink_url: Optional[str]
    amount: float
    currency: str
    manual_settle_enabled: bool
    warning: Optional[str] = None


@dataclass(frozen=True)
class PaymentStatusResult:
    """Result of a settlement status check."""

    status: str
    message: str
    checked_by: str
    manual_settle_enabled: bool
    data: Optional[Dict[str, Any]] = None
    deeplink_url: Optional[str] = None
    error_code: Any = None
    provider: Optional[Dict[str, Any]] = None
    warning: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == "completed"


@dataclass(frozen=True)
class MarkPaidRequest:
    """Input data for a demo manual settlement."""

    md5: Optional[str]
    from_account_id: Optional[str] = None
    transaction_hash: Optional[str] = None


@dataclass(frozen=True)
class AccountCheckResult:
    """Result of checking a Bakong account."""

    exists: bool
    message: Optional[str] = None
    error_code: Any = None

    @property
    def success(self) -> bool:
        return self.exists


@dataclass(frozen=True)
class GeneratedKHQR:
    """A generated KHQR string and its MD5 fingerprint."""

    qr_string: str
    md5: str


@dataclass(frozen=True)
class DecodedKHQR:
    """Decoded KHQR fields and verification outcome."""

    decoded: Dict[str, Any] = field(default_factory=dict)
    is_valid: bool = False
