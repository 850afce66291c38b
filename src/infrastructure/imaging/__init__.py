"""QR code image rendering."""

from .qr_image import render_qr_data_url

__all__ = ["render_qr_data_url"]
