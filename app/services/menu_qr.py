"""QR codes pointing guests at a restaurant's public menu."""

import io

import segno

QR_SCALE = 10
QR_BORDER = 2


def menu_qr_png(menu_url: str) -> bytes:
    """Render menu_url as a PNG QR code at high error correction."""
    qr = segno.make(menu_url, error="h", micro=False)
    buffer = io.BytesIO()
    qr.save(buffer, kind="png", scale=QR_SCALE, border=QR_BORDER, dark="#000000", light="#ffffff")
    return buffer.getvalue()
