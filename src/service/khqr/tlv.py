"""Tag-length-value primitives for KHQR payloads."""

from dataclasses import dataclass
from typing import Iterable, List

from .models import KHQRDecodeError, KHQRValidationError


@dataclass(frozen=True)
class TLVItem:
    """A single tag-length-value entry. Length is derived from the value."""

    tag: str
    value: str

    def encode(self) -> str:
        if len(self.value) > 99:
            raise KHQRValidationError(f"Value for tag {self.tag} is too long")
        return f"{self.tag}{len(self.value):02d}{self.value}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Concatenate encoded TLV items, in the order given."""
    return "".join(item.encode() for item in items)


def parse_tlv(data: str) -> List[TLVItem]:
    """
    Parse a flat TLV string into items.

    Raises:
        KHQRDecodeError: If a header is truncated, a length is not numeric,
            or a value runs past the end of the input
    """
    items = []
    i = 0

    while i < len(data):
        if i + 4 > len(data):
            raise KHQRDecodeError(f"Truncated TLV header at position {i}")

        tag = data[i:i + 2]
        length_str = data[i + 2:i + 4]
        if not length_str.isdigit():
            raise KHQRDecodeError(f"Invalid length for tag {tag}: {length_str!r}")

        length = int(length_str)
        end = i + 4 + length
        if end > len(data):
            raise KHQRDecodeError(f"Value for tag {tag} exceeds payload length")

        items.append(TLVItem(tag=tag, value=data[i + 4:end]))
        i = end

    return items
