"""
QR code generation service
"""

import io
import qrcode

from event_creator.services.invitation_service import InvitationService

class QRService:
    """Service for generating QR codes"""
    
    @staticmethod
    def generate_qr(url: str, format: str = 'PNG') -> bytes:
        """Render a URL as a QR code image"""
        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_L,
            box_size=10,
            border=4,
        )
        qr.add_data(url)
        qr.make(fit=True)
        
        # Create QR code image
        img = qr.make_image(fill_color="black", back_color="white")
        
        # Convert to bytes
        buffer = io.BytesIO()
        img.save(buffer, format=format)
        
        return buffer.getvalue()
    
    @staticmethod
    def generate_invitation_qr(event_id: str, guest_id: str) -> bytes:
        """QR code pointing at a guest's invitation link"""
        return QRService.generate_qr(InvitationService.invitation_url(event_id, guest_id))
