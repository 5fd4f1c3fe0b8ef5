"""QR encoder: renders a ticket ID into a PNG data URL."""

from __future__ import annotations

import base64
import logging
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from qrtickets.core.constants import QR_DATA_URL_PREFIX

logger = logging.getLogger(__name__)


class QREncoder:
    """Turns an identifier string into a ``data:image/png;base64,…`` payload.

    Output depends only on the payload and the rendering parameters, so the
    same ticket ID always yields the same image.
    """

    def __init__(self, box_size: int = 10, border: int = 4) -> None:
        self.box_size = box_size
        self.border = border

    def render_png(self, payload: str) -> bytes:
        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECT_M,
            box_size=self.box_size,
            border=self.border,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def encode(self, payload: str) -> str:
        png = self.render_png(payload)
        logger.debug("Rendered QR (%d bytes) for %s", len(png), payload)
        return QR_DATA_URL_PREFIX + base64.b64encode(png).decode("ascii")
