"""
Data models for KHQR payload generation.

IndividualInfo and MerchantInfo carry everything needed to build a
payload; the optional fields map onto the additional data template (62)
and the timestamp template (99).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import CURRENCY_KHR, CURRENCY_USD


class KHQRError(Exception):
    """Base error for KHQR payload handling."""


class KHQRValidationError(KHQRError):
    """Raised when payload input violates KHQR field rules."""


class KHQRDecodeError(KHQRError):
    """Raised when a payload string cannot be parsed."""


class Currency(str, Enum):
    USD = "USD"
    KHR = "KHR"

    @property
    def numeric_code(self) -> str:
        return CURRENCY_USD if self is Currency.USD else CURRENCY_KHR

    @classmethod
    def from_numeric_code(cls, code: str) -> Optional["Currency"]:
        for currency in cls:
            if currency.numeric_code == code:
                return currency
        return None


class MerchantType(str, Enum):
    INDIVIDUAL = "individual"
    MERCHANT = "merchant"


@dataclass
class IndividualInfo:
    """
    Payee details for a personal Bakong account.

    Attributes:
        bakong_account_id: Bakong account ID, e.g. ``john_smith@aclb``
        merchant_name: Name shown to the payer
        merchant_city: City shown to the payer
        currency: Transaction currency
        amount: Transaction amount; None or 0 produces a static QR
        expiration_timestamp: Expiry in epoch milliseconds, required for
            dynamic QR
        account_information: Optional account number or phone
        acquiring_bank: Optional name of the account's bank
    """

    bakong_account_id: str
    merchant_name: str
    merchant_city: str = "Phnom Penh"
    currency: Currency = Currency.USD
    amount: Optional[float] = None
    expiration_timestamp: Optional[int] = None
    account_information: Optional[str] = None
    acquiring_bank: Optional[str] = None
    bill_number: Optional[str] = None
    mobile_number: Optional[str] = None
    store_label: Optional[str] = None
    terminal_label: Optional[str] = None
    purpose_of_transaction: Optional[str] = None

    @property
    def is_dynamic(self) -> bool:
        return bool(self.amount)


@dataclass
class MerchantInfo(IndividualInfo):
    """Payee details for a registered merchant account."""

    merchant_id: Optional[str] = None
