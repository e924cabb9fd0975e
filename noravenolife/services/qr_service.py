"""
QR code generation service
"""

import io
import qrcode

from noravenolife.core.config import settings

class QRService:
    """Service for generating QR codes"""

    @staticmethod
    def generate_qr(data: str, format: str = 'PNG', box_size: int = 10) -> bytes:
        """Render ``data`` as a QR code image"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=4,
        )
        qr.add_data(data)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffer = io.BytesIO()
        img.save(buffer, format=format)

        return buffer.getvalue()

    @staticmethod
    def generate_ticket_qr(qr_code_data: str) -> bytes:
        """QR code scanned at the door for a ticket"""
        return QRService.generate_qr(qr_code_data)

    @staticmethod
    def generate_event_qr(event_id: str) -> bytes:
        """QR code linking to an event's page, for sharing"""
        return QRService.generate_qr(QRService.get_event_url(event_id), box_size=8)

    @staticmethod
    def get_event_url(event_id: str) -> str:
        return f"{settings.BASE_URL}/events/{event_id}"
