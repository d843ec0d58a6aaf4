"""QR code generation utilities."""

from __future__ import annotations

import base64
from io import BytesIO

import qrcode
from django.urls import reverse
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

from fleetfix.apps.core.config import PortalConfig

QR_BOX_SIZE = 10
QR_BOX_SIZE_BULK = 6  # Smaller boxes for printing a sheet of codes
QR_BORDER = 4


def equipment_portal_url(config: PortalConfig, equipment_id: int) -> str:
    """Absolute URL of the public portal page an equipment's QR code points to."""
    return f"{config.site_url}{reverse('portal-equipment', args=[equipment_id])}"


def generate_qr_code(url: str, box_size: int = QR_BOX_SIZE) -> Image.Image:
    """Generate an RGB QR code image encoding ``url``."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=ERROR_CORRECT_M,
        box_size=box_size,
        border=QR_BORDER,
    )
    qr.add_data(url)
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white").convert("RGB")


def generate_qr_code_png(url: str, box_size: int = QR_BOX_SIZE) -> bytes:
    buffer = BytesIO()
    generate_qr_code(url, box_size).save(buffer, format="PNG")
    return buffer.getvalue()


def generate_qr_code_base64(url: str, box_size: int = QR_BOX_SIZE) -> str:
    """Generate a QR code and return it as a base64-encoded PNG string."""
    return base64.b64encode(generate_qr_code_png(url, box_size)).decode()
