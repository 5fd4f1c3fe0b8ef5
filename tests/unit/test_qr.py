"""Tests for the QR encoder."""

from __future__ import annotations

import base64

from qrtickets.core.constants import QR_DATA_URL_PREFIX
from qrtickets.services.qr import QREncoder

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _png_size(png: bytes) -> tuple[int, int]:
    # IHDR width/height follow the 8-byte signature and 8-byte chunk header
    return int.from_bytes(png[16:20], "big"), int.from_bytes(png[20:24], "big")


class TestQREncoder:
    def test_encode_returns_png_data_url(self):
        url = QREncoder().encode("3f2b8a9e-0000-4000-8000-000000000000")
        assert url.startswith(QR_DATA_URL_PREFIX)
        png = base64.b64decode(url.removeprefix(QR_DATA_URL_PREFIX))
        assert png.startswith(PNG_SIGNATURE)

    def test_encode_is_deterministic(self):
        encoder = QREncoder()
        assert encoder.encode("ticket-1") == encoder.encode("ticket-1")

    def test_different_payloads_differ(self):
        encoder = QREncoder()
        assert encoder.encode("ticket-1") != encoder.encode("ticket-2")

    def test_box_size_scales_image(self):
        small = _png_size(QREncoder(box_size=2, border=4).render_png("ticket-1"))
        large = _png_size(QREncoder(box_size=8, border=4).render_png("ticket-1"))
        assert small[0] == small[1]
        assert large[0] == small[0] * 4
