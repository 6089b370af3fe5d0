"""
Invitation links and guest-facing invitation lookup
"""

import re
from typing import Optional
from urllib.parse import quote, urlencode

from sqlalchemy.orm import Session

from event_creator.core.config import settings
from event_creator.models import Event, Guest
from event_creator.schemas.event import EventResponse, InvitationLinks, InvitationView
from event_creator.schemas.guest import GuestResponse
from event_creator.services.repositories import EventRepo, GuestRepo

INVALID_INVITATION = "This invitation link is not valid."

class InvitationService:
    """Builds share links and resolves them back to a guest"""

    @staticmethod
    def invitation_url(event_id: str, guest_id: str) -> str:
        return f"{settings.BASE_URL}/?{urlencode({'rsvp': event_id, 'guest': guest_id})}"

    @staticmethod
    def event_url(event_id: str) -> str:
        return f"{settings.BASE_URL}/?{urlencode({'event': event_id})}"

    @staticmethod
    def invitation_message(event: Event, guest: Guest) -> str:
        return (
            f"Hi {guest.name}! 🎉\n\n"
            f"You're invited to: {event.title}\n"
            f"📅 {event.date.isoformat()} at {event.time}\n"
            f"📍 {event.location}\n\n"
            f"Please confirm your attendance: {InvitationService.invitation_url(event.id, guest.id)}"
        )

    @staticmethod
    def whatsapp_url(event: Event, guest: Guest) -> Optional[str]:
        """wa.me link with the invitation message; None without a phone number"""
        digits = re.sub(r"\D", "", guest.phone or "")
        if not digits:
            return None
        message = InvitationService.invitation_message(event, guest)
        return f"https://wa.me/{digits}?text={quote(message)}"

    @staticmethod
    def links(event: Event, guest: Guest) -> InvitationLinks:
        return InvitationLinks(
            invitation_url=InvitationService.invitation_url(event.id, guest.id),
            event_url=InvitationService.event_url(event.id),
            whatsapp_url=InvitationService.whatsapp_url(event, guest),
            message=InvitationService.invitation_message(event, guest),
        )

    @staticmethod
    def open_invitation(
        db: Session,
        event_id: Optional[str],
        guest_id: Optional[str]
    ) -> InvitationView:
        """Resolve an invitation link; bad links give the invalid view"""
        event = EventRepo.get_by_id(db, event_id) if event_id else None
        guest = GuestRepo.get(db, event_id, guest_id) if event and guest_id else None
        if not event or not guest:
            return InvitationView(valid=False, message=INVALID_INVITATION)
        return InvitationService.view(event, guest)

    @staticmethod
    def open_by_token(db: Session, token: str) -> InvitationView:
        guest = GuestRepo.get_by_response_token(db, token) if token else None
        if not guest:
            return InvitationView(valid=False, message=INVALID_INVITATION)
        return InvitationService.view(guest.event, guest)

    @staticmethod
    def view(event: Event, guest: Guest) -> InvitationView:
        return InvitationView(
            valid=True,
            message=f"Hi {guest.name}, you're invited to:",
            event=EventResponse.model_validate(event),
            guest=GuestResponse.model_validate(guest),
        )
