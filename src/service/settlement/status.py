"""
Settlement status classification.

Maps a Bakong API response (or a locally synthesized transport failure)
onto one of the four payment statuses.
"""

import re
from typing import Any, Dict, Optional

from src.domain.entities import PaymentStatus

TRANSPORT_ERROR_CODES = frozenset(
    {"MISSING_TOKEN", "TIMEOUT", "NETWORK_ERROR", "INVALID_RESPONSE"}
)

# Bakong errorCode values
ERROR_CODE_NOT_FOUND = 1
ERROR_CODE_FAILED = 3

_PENDING_MESSAGE = re.compile(r"(not found|not yet|pending|processing|wait)", re.IGNORECASE)


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def is_likely_pending_message(message: Any) -> bool:
    """True if a provider message reads like "not settled yet"."""
    if not isinstance(message, str) or not message.strip():
        return False
    return bool(_PENDING_MESSAGE.search(message))


def resolve_payment_status(result: Any) -> PaymentStatus:
    """
    Classify a provider response.

    Rules, in order:
        1. Not a mapping: error
        2. responseCode 0: completed
        3. errorCode 3: failed
        4. errorCode 1 or a pending-sounding message: pending
        5. Anything else (transport errors, unknown codes): error
    """
    if not isinstance(result, dict):
        return PaymentStatus.ERROR

    response_code = _as_number(result.get("responseCode"))
    error_code = _as_number(result.get("errorCode"))

    if response_code == 0:
        return PaymentStatus.COMPLETED

    if error_code == ERROR_CODE_FAILED:
        return PaymentStatus.FAILED

    if error_code == ERROR_CODE_NOT_FOUND or is_likely_pending_message(
        result.get("responseMessage")
    ):
        return PaymentStatus.PENDING

    return PaymentStatus.ERROR


def provider_summary(result: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Extract the response/error code triple from a provider response."""
    result = result if isinstance(result, dict) else {}
    return {
        "responseCode": result.get("responseCode"),
        "errorCode": result.get("errorCode"),
        "responseMessage": result.get("responseMessage"),
    }


def build_status_message(status: PaymentStatus, result: Optional[Dict[str, Any]]) -> str:
    """Human-readable message for a resolved status."""
    if status is PaymentStatus.COMPLETED:
        return "Payment completed"

    message = result.get("responseMessage") if isinstance(result, dict) else None

    if status is PaymentStatus.FAILED:
        return message or "Payment failed"

    if status is PaymentStatus.PENDING:
        return message or "Payment is still pending"

    return message or "Unable to confirm payment status due to provider error"
