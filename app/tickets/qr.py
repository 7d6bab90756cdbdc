"""QR code payloads for tickets and extras.

Payloads are compact JSON so the check-in scanner can tell ticket codes
(``r``/``a``/``q``) from extras codes (``e``/``q``).
"""
import json
from io import BytesIO
from uuid import UUID

import qrcode

QR_MAIN_CID = "qrCodeMain"
QR_EXTRAS_CID = "qrCodeExtras"


def attendee_qr_data(registration_id: UUID, attendee_id: UUID, qr_uuid: UUID) -> str:
    """Payload identifying one attendee's ticket."""
    return json.dumps(
        {"r": str(registration_id), "a": str(attendee_id), "q": str(qr_uuid)},
        separators=(",", ":"),
    )


def extras_qr_data(extras_purchase_id: UUID, qr_uuid: UUID) -> str:
    """Payload identifying an extras purchase."""
    return json.dumps(
        {"e": str(extras_purchase_id), "q": str(qr_uuid)},
        separators=(",", ":"),
    )


def encode_qr_png(data: str) -> bytes:
    """Render ``data`` as a PNG QR code."""
    qr = qrcode.QRCode(version=1, box_size=10, border=4)
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffered = BytesIO()
    img.save(buffered, format="PNG")
    return buffered.getvalue()
