"""
KHQR payload codec.

Encodes, decodes, and verifies Bakong KHQR strings and computes the
content fingerprints used for settlement lookups.
"""

from .models import (
    Currency,
    IndividualInfo,
    KHQRDecodeError,
    KHQRError,
    KHQRValidationError,
    MerchantInfo,
    MerchantType,
)
from .crc import crc16_ccitt
from .tlv import TLVItem, build_tlv, parse_tlv
from .encoder import build_individual, build_merchant, format_amount
from .decoder import decode, verify
from .hashing import md5, short_hash

__all__ = [
    # Models
    "Currency",
    "IndividualInfo",
    "MerchantInfo",
    "MerchantType",
    # Errors
    "KHQRError",
    "KHQRValidationError",
    "KHQRDecodeError",
    # Primitives
    "crc16_ccitt",
    "TLVItem",
    "build_tlv",
    "parse_tlv",
    # Encoding
    "build_individual",
    "build_merchant",
    "format_amount",
    # Decoding
    "decode",
    "verify",
    # Hashing
    "md5",
    "short_hash",
]
