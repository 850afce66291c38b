"""
KHQR payload decoder and verifier.

``decode`` maps tags to named fields and expands the nested account,
additional data, and timestamp templates. ``verify`` checks the CRC,
structure, and mandatory tags without raising.
"""

from typing import Any, Dict, Optional

from . import constants as c
from .crc import crc16_ccitt
from .models import Currency, KHQRDecodeError, MerchantType
from .tlv import parse_tlv

ROOT_FIELDS = {
    c.PAYLOAD_FORMAT_INDICATOR: "payloadFormatIndicator",
    c.POINT_OF_INITIATION_METHOD: "pointOfInitiationMethod",
    c.MERCHANT_CATEGORY_CODE: "merchantCategoryCode",
    c.TRANSACTION_CURRENCY: "transactionCurrency",
    c.TRANSACTION_AMOUNT: "transactionAmount",
    c.COUNTRY_CODE: "countryCode",
    c.MERCHANT_NAME: "merchantName",
    c.MERCHANT_CITY: "merchantCity",
    c.CRC: "crc",
}

ADDITIONAL_FIELDS = {
    c.ADDITIONAL_BILL_NUMBER: "billNumber",
    c.ADDITIONAL_MOBILE_NUMBER: "mobileNumber",
    c.ADDITIONAL_STORE_LABEL: "storeLabel",
    c.ADDITIONAL_TERMINAL_LABEL: "terminalLabel",
    c.ADDITIONAL_PURPOSE: "purposeOfTransaction",
}

TIMESTAMP_FIELDS = {
    c.TIMESTAMP_CREATION: "creationTimestamp",
    c.TIMESTAMP_EXPIRATION: "expirationTimestamp",
}

ALL_FIELDS = (
    "payloadFormatIndicator",
    "pointOfInitiationMethod",
    "merchantType",
    "bakongAccountID",
    "accountInformation",
    "merchantID",
    "acquiringBank",
    "merchantCategoryCode",
    "countryCode",
    "merchantName",
    "merchantCity",
    "transactionCurrency",
    "transactionAmount",
    "billNumber",
    "mobileNumber",
    "storeLabel",
    "terminalLabel",
    "purposeOfTransaction",
    "creationTimestamp",
    "expirationTimestamp",
    "crc",
)


def decode(qr_string: str) -> Dict[str, Any]:
    """
    Decode a KHQR payload into named fields.

    Every known field is present in the result; absent tags decode to None.
    The currency is reported as its ISO code (``USD``/``KHR``) when known.

    Raises:
        KHQRDecodeError: If the payload is empty or not valid TLV
    """
    if not qr_string or not qr_string.strip():
        raise KHQRDecodeError("QR string is empty")

    result: Dict[str, Any] = dict.fromkeys(ALL_FIELDS)

    for item in parse_tlv(qr_string.strip()):
        if item.tag in ROOT_FIELDS:
            result[ROOT_FIELDS[item.tag]] = item.value
        elif item.tag == c.INDIVIDUAL_ACCOUNT_INFORMATION:
            result["merchantType"] = MerchantType.INDIVIDUAL.value
            _decode_account(item.value, result, info_field="accountInformation")
        elif item.tag == c.MERCHANT_ACCOUNT_INFORMATION:
            result["merchantType"] = MerchantType.MERCHANT.value
            _decode_account(item.value, result, info_field="merchantID")
        elif item.tag == c.ADDITIONAL_DATA:
            _decode_template(item.value, ADDITIONAL_FIELDS, result)
        elif item.tag == c.TIMESTAMP:
            _decode_template(item.value, TIMESTAMP_FIELDS, result)

    currency = Currency.from_numeric_code(result["transactionCurrency"] or "")
    if currency is not None:
        result["transactionCurrency"] = currency.value

    return result


def verify(qr_string: str) -> bool:
    """Return True if the payload has a valid CRC, structure, and required tags."""
    if not qr_string:
        return False

    qr_string = qr_string.strip()
    crc_position = len(qr_string) - 8
    if crc_position <= 0 or qr_string[crc_position:crc_position + 4] != c.CRC_PREFIX:
        return False

    expected = qr_string[-4:].upper()
    if crc16_ccitt(qr_string[:-4]) != expected:
        return False

    try:
        items = parse_tlv(qr_string)
    except KHQRDecodeError:
        return False

    tags = {item.tag for item in items}
    if not all(tag in tags for tag in c.REQUIRED_TAGS):
        return False

    if c.INDIVIDUAL_ACCOUNT_INFORMATION not in tags and c.MERCHANT_ACCOUNT_INFORMATION not in tags:
        return False

    return items[-1].tag == c.CRC


def _decode_account(value: str, result: Dict[str, Any], info_field: str) -> None:
    for sub in parse_tlv(value):
        if sub.tag == c.ACCOUNT_BAKONG_ID:
            result["bakongAccountID"] = sub.value
        elif sub.tag == c.ACCOUNT_INFORMATION:
            result[info_field] = sub.value
        elif sub.tag == c.ACCOUNT_ACQUIRING_BANK:
            result["acquiringBank"] = sub.value


def _decode_template(
    value: str,
    fields: Dict[str, str],
    result: Dict[str, Any],
) -> None:
    for sub in parse_tlv(value):
        name: Optional[str] = fields.get(sub.tag)
        if name:
            result[name] = sub.value
