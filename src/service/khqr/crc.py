"""CRC-16/CCITT-FALSE checksum used by the KHQR CRC tag (63)."""

CRC_INIT_VALUE = 0xFFFF
CRC_POLYNOMIAL = 0x1021


def crc16_ccitt(data: str) -> str:
    """
    Calculate CRC-16/CCITT-FALSE over a UTF-8 string.

    Returns:
        Four uppercase hexadecimal digits
    """
    crc = CRC_INIT_VALUE

    for byte in data.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ CRC_POLYNOMIAL
            else:
                crc = crc << 1
            crc &= 0xFFFF

    return f"{crc:04X}"
