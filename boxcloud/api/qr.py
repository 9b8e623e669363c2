"""
QR codes for public box links.

The public link of a box is ``{PUBLIC_BASE_URL}/view/{box_id}``; the QR image
is returned as a PNG data URL so clients can drop it into an ``<img>`` tag.
"""

import base64
import io

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from boxcloud.database.config.config import settings


def build_public_url(box_id: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/view/{box_id}"


def encode_qr_data_url(url: str) -> str:
    """Render `url` as a black-on-white PNG QR code (error correction M, border 1)."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=1)
    qr.add_data(url)
    qr.make(fit=True)
    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")
