"""Content fingerprints of QR strings used as settlement lookup keys."""

import hashlib


def md5(qr_string: str) -> str:
    """Hex MD5 digest of the QR string."""
    return hashlib.md5(qr_string.encode("utf-8")).hexdigest()


def short_hash(qr_string: str) -> str:
    """First 8 hex characters of the QR string's SHA-256 digest."""
    return hashlib.sha256(qr_string.encode("utf-8")).hexdigest()[:8]
