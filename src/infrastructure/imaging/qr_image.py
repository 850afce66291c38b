"""Render QR payloads as base64 PNG data URLs."""

import base64
from io import BytesIO

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M


def render_qr_data_url(data: str, width: int = 300, margin: int = 1) -> str:
    """
    Render ``data`` as a PNG QR code and return it as a data URL.

    Args:
        data: The string to encode
        width: Side length of the square output image in pixels
        margin: Quiet zone width in modules

    Returns:
        A ``data:image/png;base64,...`` URL
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_M,
        box_size=1,
        border=margin,
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr.box_size = max(1, width // (qr.modules_count + 2 * margin))
    img = qr.make_image(fill_color="black", back_color="white").get_image()
    if img.size != (width, width):
        img = img.convert("L").resize((width, width), Image.NEAREST)

    buffered = BytesIO()
    img.save(buffered, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffered.getvalue()).decode("ascii")
