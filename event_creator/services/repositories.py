"""
Repository layer over the SQLAlchemy models.
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from event_creator.core.db import utc_now
from event_creator.models import Event, Guest
from event_creator.schemas.event import EventStatistics, UpcomingEvent, UserDashboard
from event_creator.services.event_aggregate import EventAggregate, GuestEntry

logger = logging.getLogger(__name__)

EVENT_FIELDS = (
    "title", "description", "date", "time", "location", "category",
    "cover_image", "capacity", "status", "created_by",
)

GUEST_FIELDS = (
    "name", "email", "phone", "company", "dietary_restrictions", "plus_one",
    "plus_one_name", "status", "response_token", "responded_at", "created_at",
)


def _value(value: Any) -> Any:
    # Enums are stored by value
    return getattr(value, "value", value)


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, halves rounded up; 0 when there is no whole"""
    if not whole:
        return 0
    ratio = Decimal(100 * part) / Decimal(whole)
    return int(ratio.quantize(Decimal(1), rounding=ROUND_HALF_UP))


# -------- Event repository --------

class EventRepo:
    @staticmethod
    def get_by_id(db: Session, event_id: str) -> Optional[Event]:
        return db.query(Event).filter(Event.id == event_id).first()

    @staticmethod
    def list_all(db: Session, created_by: Optional[str] = None) -> List[Event]:
        query = db.query(Event)
        if created_by:
            query = query.filter(Event.created_by == created_by)
        return query.order_by(Event.created_at.desc()).all()

    @staticmethod
    def create(db: Session, aggregate: EventAggregate) -> Event:
        """Persist a new event together with any guests it already has"""
        event = Event(id=aggregate.id, created_at=aggregate.created_at)
        for field in EVENT_FIELDS:
            setattr(event, field, _value(getattr(aggregate, field)))
        db.add(event)
        for position, entry in enumerate(aggregate.guests):
            db.add(GuestRepo.build(aggregate.id, entry, position))
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def update_fields(db: Session, event: Event, aggregate: EventAggregate) -> Event:
        for field in EVENT_FIELDS:
            setattr(event, field, _value(getattr(aggregate, field)))
        event.updated_at = utc_now()
        db.commit()
        db.refresh(event)
        return event

    @staticmethod
    def delete(db: Session, event: Event) -> None:
        db.delete(event)
        db.commit()

    @staticmethod
    def load_aggregate(db: Session, event_id: str) -> Optional[EventAggregate]:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            return None
        return EventAggregate.model_validate(event)

    @staticmethod
    def search(
        db: Session,
        query: str,
        category: Optional[str] = None,
        status: Optional[str] = None
    ) -> List[Event]:
        builder = db.query(Event)
        if query:
            builder = builder.filter(or_(
                Event.title.ilike(f"%{query}%"),
                Event.description.ilike(f"%{query}%"),
            ))
        if category:
            builder = builder.filter(Event.category == category)
        if status:
            builder = builder.filter(Event.status == status)
        return builder.order_by(Event.created_at.desc()).all()

    @staticmethod
    def statistics(db: Session, event: Event) -> EventStatistics:
        counts = dict(
            db.query(Guest.status, func.count(Guest.id))
            .filter(Guest.event_id == event.id)
            .group_by(Guest.status)
            .all()
        )
        confirmed = counts.get("confirmed", 0)
        declined = counts.get("declined", 0)
        pending = counts.get("pending", 0)
        total = confirmed + declined + pending

        plus_ones = db.query(func.count(Guest.id)).filter(
            Guest.event_id == event.id,
            Guest.status == "confirmed",
            Guest.plus_one == True
        ).scalar() or 0

        capacity_percentage = percent(confirmed + plus_ones, event.capacity or 0)
        rsvp_rate = percent(confirmed + declined, total)

        return EventStatistics(
            total_guests=total,
            confirmed_guests=confirmed,
            declined_guests=declined,
            pending_guests=pending,
            plus_ones=plus_ones,
            capacity_percentage=capacity_percentage,
            rsvp_rate=rsvp_rate,
        )

    @staticmethod
    def dashboard(
        db: Session,
        created_by: Optional[str] = None,
        today: Optional[date] = None,
        upcoming_limit: int = 5
    ) -> UserDashboard:
        today = today or date.today()

        event_query = db.query(Event)
        if created_by:
            event_query = event_query.filter(Event.created_by == created_by)

        status_counts = dict(
            event_query.with_entities(Event.status, func.count(Event.id))
            .group_by(Event.status)
            .all()
        )

        guest_query = db.query(Guest).join(Event, Guest.event_id == Event.id)
        if created_by:
            guest_query = guest_query.filter(Event.created_by == created_by)
        guest_status_counts = dict(
            guest_query.with_entities(Guest.status, func.count(Guest.id))
            .group_by(Guest.status)
            .all()
        )
        total_guests = sum(guest_status_counts.values())
        confirmed_guests = guest_status_counts.get("confirmed", 0)

        guest_counts = (
            db.query(Guest.event_id, func.count(Guest.id).label("guest_count"))
            .group_by(Guest.event_id)
            .subquery()
        )
        upcoming_query = (
            db.query(Event.id, Event.title, Event.date, guest_counts.c.guest_count)
            .select_from(Event)
            .outerjoin(guest_counts, guest_counts.c.event_id == Event.id)
            .filter(Event.date >= today)
        )
        if created_by:
            upcoming_query = upcoming_query.filter(Event.created_by == created_by)
        upcoming_rows = upcoming_query.order_by(Event.date.asc()).limit(upcoming_limit).all()

        return UserDashboard(
            total_events=sum(status_counts.values()),
            published_events=status_counts.get("published", 0),
            draft_events=status_counts.get("draft", 0),
            cancelled_events=status_counts.get("cancelled", 0),
            total_guests=total_guests,
            confirmed_guests=confirmed_guests,
            pending_guests=guest_status_counts.get("pending", 0),
            declined_guests=guest_status_counts.get("declined", 0),
            confirmation_rate=percent(confirmed_guests, total_guests),
            upcoming_events=[
                UpcomingEvent(id=row[0], title=row[1], date=row[2], guest_count=row[3] or 0)
                for row in upcoming_rows
            ],
        )


# -------- Guest repository --------

class GuestRepo:
    @staticmethod
    def build(event_id: str, entry: GuestEntry, position: int) -> Guest:
        guest = Guest(id=entry.id, event_id=event_id, position=position)
        for field in GUEST_FIELDS:
            setattr(guest, field, _value(getattr(entry, field)))
        return guest

    @staticmethod
    def get(db: Session, event_id: str, guest_id: str) -> Optional[Guest]:
        return db.query(Guest).filter(
            Guest.id == guest_id,
            Guest.event_id == event_id
        ).first()

    @staticmethod
    def get_by_response_token(db: Session, token: str) -> Optional[Guest]:
        return db.query(Guest).filter(Guest.response_token == token).first()

    @staticmethod
    def list_for_event(db: Session, event_id: str) -> List[Guest]:
        return db.query(Guest).filter(Guest.event_id == event_id).order_by(Guest.position).all()

    @staticmethod
    def next_position(db: Session, event_id: str) -> int:
        current = db.query(func.max(Guest.position)).filter(Guest.event_id == event_id).scalar()
        return 0 if current is None else current + 1

    @staticmethod
    def create(db: Session, event_id: str, entry: GuestEntry) -> Guest:
        guest = GuestRepo.build(event_id, entry, GuestRepo.next_position(db, event_id))
        db.add(guest)
        db.commit()
        db.refresh(guest)
        return guest

    @staticmethod
    def bulk_create(db: Session, event_id: str, entries: Iterable[GuestEntry]) -> Dict[str, Any]:
        """Insert many guests at once; store failures are reported, not raised"""
        entries = list(entries)
        try:
            start = GuestRepo.next_position(db, event_id)
            for offset, entry in enumerate(entries):
                db.add(GuestRepo.build(event_id, entry, start + offset))
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Bulk guest insert failed for event {event_id}: {e}")
            return {"imported": 0, "failed": len(entries), "errors": [str(e)]}

        return {"imported": len(entries), "failed": 0, "errors": []}

    @staticmethod
    def update_from_entry(db: Session, guest: Guest, entry: GuestEntry) -> Guest:
        for field in ("status", "responded_at", "plus_one", "plus_one_name"):
            setattr(guest, field, _value(getattr(entry, field)))
        db.commit()
        db.refresh(guest)
        return guest

    @staticmethod
    def bulk_update_status(db: Session, event_id: str, entries: Iterable[GuestEntry]) -> List[Guest]:
        """Write RSVP fields for many guests of one event in a single commit"""
        by_id = {entry.id: entry for entry in entries}
        if not by_id:
            return []
        guests = db.query(Guest).filter(
            Guest.event_id == event_id,
            Guest.id.in_(list(by_id))
        ).order_by(Guest.position).all()
        for guest in guests:
            entry = by_id[guest.id]
            guest.status = _value(entry.status)
            guest.responded_at = entry.responded_at
        db.commit()
        return guests

    @staticmethod
    def delete(db: Session, guest: Guest) -> None:
        db.delete(guest)
        db.commit()

    @staticmethod
    def search(db: Session, query: str, event_id: Optional[str] = None) -> List[Guest]:
        builder = db.query(Guest)
        if query:
            builder = builder.filter(or_(
                Guest.name.ilike(f"%{query}%"),
                Guest.email.ilike(f"%{query}%"),
                Guest.company.ilike(f"%{query}%"),
            ))
        if event_id:
            builder = builder.filter(Guest.event_id == event_id)
        return builder.order_by(Guest.event_id, Guest.position).all()

    @staticmethod
    def list_with_events(db: Session, created_by: Optional[str] = None) -> List[Tuple[Guest, Event]]:
        query = db.query(Guest, Event).join(Event, Guest.event_id == Event.id)
        if created_by:
            query = query.filter(Event.created_by == created_by)
        return query.order_by(Event.date, Guest.position).all()
