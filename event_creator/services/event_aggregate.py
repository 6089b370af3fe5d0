"""
In-memory event aggregate and its pure mutation operations.

Every operation returns a new ``EventAggregate``; the value passed in is
never modified. Guests keep insertion order, which is the invitation order.
"""

import secrets
from datetime import date as date_type, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from event_creator.schemas.event import EventCategory, EventStatus, FieldUpdate
from event_creator.schemas.guest import GuestCreate, GuestDraft, RSVPStatus


class GuestValidationError(ValueError):
    """Guest data rejected before any state change"""


def new_event_id() -> str:
    return f"evt_{secrets.token_hex(8)}"


def new_guest_id() -> str:
    return f"guest_{secrets.token_hex(8)}"


def new_response_token() -> str:
    return secrets.token_urlsafe(16)


class GuestEntry(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    plus_one: bool = False
    plus_one_name: Optional[str] = None
    status: RSVPStatus = RSVPStatus.PENDING
    response_token: str
    responded_at: Optional[datetime] = None
    created_at: datetime

    class Config:
        frozen = True
        from_attributes = True


class EventAggregate(BaseModel):
    id: str
    title: str
    description: str = ""
    date: date_type
    time: str
    location: str
    category: EventCategory = EventCategory.SOCIAL
    cover_image: Optional[str] = None
    capacity: Optional[int] = None
    status: EventStatus = EventStatus.DRAFT
    created_by: Optional[str] = None
    created_at: datetime
    guests: Tuple[GuestEntry, ...] = ()

    class Config:
        frozen = True
        from_attributes = True


def new_event(now: Optional[datetime] = None, **fields) -> EventAggregate:
    """Build a draft event with a fresh id and an empty guest list"""
    fields.setdefault("status", EventStatus.DRAFT)
    return EventAggregate(
        id=new_event_id(),
        created_at=now or datetime.now(timezone.utc),
        guests=(),
        **fields
    )


def new_guest(draft: GuestDraft, now: Optional[datetime] = None) -> GuestEntry:
    """Create a pending guest with a fresh id and response token"""
    extra = {}
    if isinstance(draft, GuestCreate):
        extra = {
            "company": draft.company,
            "dietary_restrictions": draft.dietary_restrictions,
            "plus_one": draft.plus_one,
            "plus_one_name": draft.plus_one_name,
        }
    return GuestEntry(
        id=new_guest_id(),
        name=draft.name.strip(),
        email=draft.email,
        phone=draft.phone or None,
        status=RSVPStatus.PENDING,
        response_token=new_response_token(),
        created_at=now or datetime.now(timezone.utc),
        **extra
    )


def find_guest(event: EventAggregate, guest_id: str) -> Optional[GuestEntry]:
    for guest in event.guests:
        if guest.id == guest_id:
            return guest
    return None


def add_guest(
    event: EventAggregate,
    draft: GuestDraft,
    require_email: bool = True,
    now: Optional[datetime] = None
) -> EventAggregate:
    """Append a single guest; name is always required, email when asked"""
    if not draft.name or not draft.name.strip():
        raise GuestValidationError("Please provide name and email")
    if require_email and not (draft.email and draft.email.strip()):
        raise GuestValidationError("Please provide name and email")

    guest = new_guest(draft, now=now)
    return event.model_copy(update={"guests": event.guests + (guest,)})


def remove_guest(event: EventAggregate, guest_id: str) -> EventAggregate:
    remaining = tuple(g for g in event.guests if g.id != guest_id)
    if len(remaining) == len(event.guests):
        return event
    return event.model_copy(update={"guests": remaining})


def set_guest_status(
    event: EventAggregate,
    guest_id: str,
    status: RSVPStatus,
    now: Optional[datetime] = None,
    plus_one: Optional[bool] = None,
    plus_one_name: Optional[str] = None
) -> EventAggregate:
    """Record a guest's RSVP.

    The response timestamp is refreshed on every call away from pending, so
    repeating the same status is idempotent on status only. Resetting to
    pending clears it.
    """
    if find_guest(event, guest_id) is None:
        return event

    status = RSVPStatus(status)
    responded_at = None if status == RSVPStatus.PENDING else (now or datetime.now(timezone.utc))

    guests = []
    for guest in event.guests:
        if guest.id == guest_id:
            update = {"status": status, "responded_at": responded_at}
            if plus_one is not None:
                update["plus_one"] = plus_one
                update["plus_one_name"] = plus_one_name if plus_one else None
            guest = guest.model_copy(update=update)
        guests.append(guest)
    return event.model_copy(update={"guests": tuple(guests)})


def set_guests_status(
    event: EventAggregate,
    guest_ids: Iterable[str],
    status: RSVPStatus,
    now: Optional[datetime] = None
) -> EventAggregate:
    """Record the same RSVP for several guests with one shared timestamp"""
    now = now or datetime.now(timezone.utc)
    for guest_id in guest_ids:
        event = set_guest_status(event, guest_id, status, now=now)
    return event


def set_status(event: EventAggregate, status: EventStatus) -> EventAggregate:
    # No transition guard: cancelled events can be republished.
    return event.model_copy(update={"status": EventStatus(status)})


def toggle_publish(event: EventAggregate) -> EventAggregate:
    """Published events go back to draft; anything else is published"""
    if event.status == EventStatus.PUBLISHED:
        return set_status(event, EventStatus.DRAFT)
    return set_status(event, EventStatus.PUBLISHED)


def merge_imported_guests(
    event: EventAggregate,
    drafts: Iterable[GuestDraft],
    now: Optional[datetime] = None
) -> EventAggregate:
    """Extend the guest list with accepted import drafts; email is optional"""
    now = now or datetime.now(timezone.utc)
    imported = tuple(new_guest(draft, now=now) for draft in drafts)
    return event.model_copy(update={"guests": event.guests + imported})


# Blank edits of these fields fall back to a placeholder
EMPTY_FIELD_FALLBACKS = {
    "title": "Untitled Event",
    "description": "No description provided",
    "time": "18:00",
    "location": "Location not set",
}
EMPTY_DATE_OFFSET_DAYS = 14


def apply_updates(
    event: EventAggregate,
    updates: List[FieldUpdate],
    today: Optional[date_type] = None
) -> EventAggregate:
    """Apply explicit field updates in order.

    Clearing title, description, time or location stores its placeholder;
    clearing the date moves the event two weeks out.
    """
    changes = {}
    for update in updates:
        value = update.value
        if update.field in EMPTY_FIELD_FALLBACKS:
            value = (value or "").strip() or EMPTY_FIELD_FALLBACKS[update.field]
        elif update.field == "date" and value is None:
            value = (today or date_type.today()) + timedelta(days=EMPTY_DATE_OFFSET_DAYS)
        changes[update.field] = value
    if not changes:
        return event
    return event.model_copy(update=changes)


def summarize(event: EventAggregate) -> Dict[str, int]:
    counts = {"total": len(event.guests), "confirmed": 0, "declined": 0, "pending": 0}
    for guest in event.guests:
        counts[guest.status.value] += 1
    return counts
