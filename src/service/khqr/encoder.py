"""
KHQR payload encoder.

Builds the full payload string for an individual (tag 29) or merchant
(tag 30) account and appends the CRC tag. Root tags are emitted in
ascending order with the CRC last.
"""

import time
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from . import constants as c
from .crc import crc16_ccitt
from .models import Currency, IndividualInfo, KHQRValidationError, MerchantInfo
from .tlv import TLVItem, build_tlv


def build_individual(info: IndividualInfo) -> str:
    """Build a KHQR payload for a personal Bakong account."""
    _validate_common(info)

    account = [TLVItem(c.ACCOUNT_BAKONG_ID, info.bakong_account_id)]
    if info.account_information:
        _check_length(
            info.account_information,
            c.MAX_ACCOUNT_INFORMATION_LENGTH,
            "Account Information",
        )
        account.append(TLVItem(c.ACCOUNT_INFORMATION, info.account_information))
    if info.acquiring_bank:
        _check_length(info.acquiring_bank, c.MAX_ACQUIRING_BANK_LENGTH, "Acquiring Bank")
        account.append(TLVItem(c.ACCOUNT_ACQUIRING_BANK, info.acquiring_bank))

    return _assemble(info, TLVItem(c.INDIVIDUAL_ACCOUNT_INFORMATION, build_tlv(account)))


def build_merchant(info: MerchantInfo) -> str:
    """Build a KHQR payload for a registered merchant account."""
    _validate_common(info)

    if not info.merchant_id or not info.merchant_id.strip():
        raise KHQRValidationError("Merchant ID is required")
    if not info.acquiring_bank or not info.acquiring_bank.strip():
        raise KHQRValidationError("Acquiring Bank is required")
    _check_length(info.merchant_id, c.MAX_ACCOUNT_INFORMATION_LENGTH, "Merchant ID")
    _check_length(info.acquiring_bank, c.MAX_ACQUIRING_BANK_LENGTH, "Acquiring Bank")

    account = [
        TLVItem(c.ACCOUNT_BAKONG_ID, info.bakong_account_id),
        TLVItem(c.ACCOUNT_INFORMATION, info.merchant_id),
        TLVItem(c.ACCOUNT_ACQUIRING_BANK, info.acquiring_bank),
    ]

    return _assemble(info, TLVItem(c.MERCHANT_ACCOUNT_INFORMATION, build_tlv(account)))


def format_amount(amount: float, currency: Currency) -> str:
    """
    Format a transaction amount for tag 54.

    USD allows at most two decimal places and is always rendered with two.
    KHR must be a whole number.
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise KHQRValidationError("Amount is invalid")

    if not value.is_finite() or value <= 0:
        raise KHQRValidationError("Amount is invalid")

    if currency is Currency.KHR:
        if value != value.to_integral_value():
            raise KHQRValidationError("KHR amount must be a whole number")
        formatted = str(int(value))
    else:
        if value != value.quantize(Decimal("0.01")):
            raise KHQRValidationError("USD amount cannot have more than 2 decimal places")
        formatted = f"{value:.2f}"

    _check_length(formatted, c.MAX_AMOUNT_LENGTH, "Amount")
    return formatted


def _assemble(info: IndividualInfo, account_item: TLVItem) -> str:
    items: List[TLVItem] = [
        TLVItem(c.PAYLOAD_FORMAT_INDICATOR, c.PAYLOAD_FORMAT_VALUE),
        TLVItem(
            c.POINT_OF_INITIATION_METHOD,
            c.DYNAMIC_QR if info.is_dynamic else c.STATIC_QR,
        ),
        account_item,
        TLVItem(c.MERCHANT_CATEGORY_CODE, c.DEFAULT_MERCHANT_CATEGORY_CODE),
        TLVItem(c.TRANSACTION_CURRENCY, info.currency.numeric_code),
    ]

    if info.is_dynamic:
        items.append(TLVItem(c.TRANSACTION_AMOUNT, format_amount(info.amount, info.currency)))

    items.extend([
        TLVItem(c.COUNTRY_CODE, c.DEFAULT_COUNTRY_CODE),
        TLVItem(c.MERCHANT_NAME, info.merchant_name),
        TLVItem(c.MERCHANT_CITY, info.merchant_city),
    ])

    additional = _additional_data(info)
    if additional:
        items.append(TLVItem(c.ADDITIONAL_DATA, additional))

    if info.is_dynamic:
        items.append(TLVItem(c.TIMESTAMP, _timestamp_data(info.expiration_timestamp)))

    payload = build_tlv(items) + c.CRC_PREFIX
    return payload + crc16_ccitt(payload)


def _additional_data(info: IndividualInfo) -> str:
    fields = [
        (c.ADDITIONAL_BILL_NUMBER, info.bill_number, "Bill Number"),
        (c.ADDITIONAL_MOBILE_NUMBER, info.mobile_number, "Mobile Number"),
        (c.ADDITIONAL_STORE_LABEL, info.store_label, "Store Label"),
        (c.ADDITIONAL_TERMINAL_LABEL, info.terminal_label, "Terminal Label"),
        (c.ADDITIONAL_PURPOSE, info.purpose_of_transaction, "Purpose of Transaction"),
    ]

    items = []
    for tag, value, label in fields:
        if not value:
            continue
        _check_length(value, c.MAX_ADDITIONAL_FIELD_LENGTH, label)
        items.append(TLVItem(tag, value))

    return build_tlv(items)


def _timestamp_data(expiration_timestamp: Optional[int]) -> str:
    if expiration_timestamp is None:
        raise KHQRValidationError("Expiration timestamp is required for dynamic KHQR")

    created = int(time.time() * 1000)
    if expiration_timestamp <= created:
        raise KHQRValidationError("Expiration timestamp must be in the future")

    return build_tlv([
        TLVItem(c.TIMESTAMP_CREATION, str(created)),
        TLVItem(c.TIMESTAMP_EXPIRATION, str(expiration_timestamp)),
    ])


def _validate_common(info: IndividualInfo) -> None:
    if not info.bakong_account_id or not info.bakong_account_id.strip():
        raise KHQRValidationError("Bakong Account ID is required")
    _check_length(info.bakong_account_id, c.MAX_ACCOUNT_ID_LENGTH, "Bakong Account ID")
    if "@" not in info.bakong_account_id:
        raise KHQRValidationError("Bakong Account ID is invalid")

    if not info.merchant_name or not info.merchant_name.strip():
        raise KHQRValidationError("Merchant name is required")
    _check_length(info.merchant_name, c.MAX_MERCHANT_NAME_LENGTH, "Merchant name")

    if not info.merchant_city or not info.merchant_city.strip():
        raise KHQRValidationError("Merchant city is required")
    _check_length(info.merchant_city, c.MAX_MERCHANT_CITY_LENGTH, "Merchant city")

    if not isinstance(info.currency, Currency):
        raise KHQRValidationError("Currency is not supported")


def _check_length(value: str, limit: int, label: str) -> None:
    if len(value) > limit:
        raise KHQRValidationError(f"{label} length is invalid")
