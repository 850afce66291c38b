"""Settlement status classification for Bakong transaction lookups."""

from .status import (
    TRANSPORT_ERROR_CODES,
    build_status_message,
    is_likely_pending_message,
    provider_summary,
    resolve_payment_status,
)

__all__ = [
    "TRANSPORT_ERROR_CODES",
    "build_status_message",
    "is_likely_pending_message",
    "provider_summary",
    "resolve_payment_status",
]
