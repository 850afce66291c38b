"""External API client implementations."""

from .bakong_client import HttpBakongAPIClient

__all__ = [
    "HttpBakongAPIClient",
]
