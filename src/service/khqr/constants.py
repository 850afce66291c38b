"""
KHQR tag identifiers, fixed values, and field length limits.

Tags follow the EMV merchant-presented QR layout used by the Bakong
KHQR standard. Sub-tags are scoped to their parent template.
"""

# === Root tags ===
PAYLOAD_FORMAT_INDICATOR = "00"
POINT_OF_INITIATION_METHOD = "01"
INDIVIDUAL_ACCOUNT_INFORMATION = "29"
MERCHANT_ACCOUNT_INFORMATION = "30"
MERCHANT_CATEGORY_CODE = "52"
TRANSACTION_CURRENCY = "53"
TRANSACTION_AMOUNT = "54"
COUNTRY_CODE = "58"
MERCHANT_NAME = "59"
MERCHANT_CITY = "60"
ADDITIONAL_DATA = "62"
CRC = "63"
TIMESTAMP = "99"

# === Account information sub-tags (29 / 30) ===
ACCOUNT_BAKONG_ID = "00"
ACCOUNT_INFORMATION = "01"  # individual: account info, merchant: merchant ID
ACCOUNT_ACQUIRING_BANK = "02"

# === Additional data sub-tags (62) ===
ADDITIONAL_BILL_NUMBER = "01"
ADDITIONAL_MOBILE_NUMBER = "02"
ADDITIONAL_STORE_LABEL = "03"
ADDITIONAL_TERMINAL_LABEL = "07"
ADDITIONAL_PURPOSE = "08"

# === Timestamp sub-tags (99) ===
TIMESTAMP_CREATION = "00"
TIMESTAMP_EXPIRATION = "01"

# === Fixed values ===
PAYLOAD_FORMAT_VALUE = "01"
STATIC_QR = "11"
DYNAMIC_QR = "12"
DEFAULT_MERCHANT_CATEGORY_CODE = "5999"
DEFAULT_COUNTRY_CODE = "KH"
CRC_PREFIX = CRC + "04"

# ISO 4217 numeric codes
CURRENCY_USD = "840"
CURRENCY_KHR = "116"

# === Field length limits ===
MAX_ACCOUNT_ID_LENGTH = 32
MAX_ACCOUNT_INFORMATION_LENGTH = 32
MAX_ACQUIRING_BANK_LENGTH = 32
MAX_MERCHANT_NAME_LENGTH = 25
MAX_MERCHANT_CITY_LENGTH = 15
MAX_AMOUNT_LENGTH = 13
MAX_ADDITIONAL_FIELD_LENGTH = 25

REQUIRED_TAGS = (
    PAYLOAD_FORMAT_INDICATOR,
    MERCHANT_CATEGORY_CODE,
    TRANSACTION_CURRENCY,
    COUNTRY_CODE,
    MERCHANT_NAME,
    MERCHANT_CITY,
    CRC,
)
