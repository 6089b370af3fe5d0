"""
Event and guest operations backed by the repositories
"""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from event_creator.models import Event, Guest
from event_creator.schemas.event import (
    EventCategory, EventCreate, EventTemplate, EventTemplateId, FieldUpdate,
    GenerateEventRequest, GenerationEntryPoint
)
from event_creator.schemas.guest import GuestCreate, ImportResult, RSVPStatus
from event_creator.services import event_aggregate as aggregate
from event_creator.services.csv_service import CsvService, ParsedCsv
from event_creator.services.generator_service import GeneratorService
from event_creator.services.import_service import GuestImportService
from event_creator.services.repositories import EventRepo, GuestRepo

logger = logging.getLogger(__name__)

EVENT_TEMPLATES = [
    EventTemplate(
        id=EventTemplateId.BIRTHDAY, name="Birthday Party", category=EventCategory.CELEBRATION,
        description="Celebrate a special birthday", default_capacity=30,
    ),
    EventTemplate(
        id=EventTemplateId.BUSINESS, name="Business Meeting", category=EventCategory.BUSINESS,
        description="Professional business event", default_capacity=20,
    ),
    EventTemplate(
        id=EventTemplateId.NETWORKING, name="Networking Event", category=EventCategory.NETWORKING,
        description="Connect with like-minded people", default_capacity=50,
    ),
    EventTemplate(
        id=EventTemplateId.ENTERTAINMENT, name="Concert/Show", category=EventCategory.ENTERTAINMENT,
        description="Musical or entertainment event", default_capacity=100,
    ),
    EventTemplate(
        id=EventTemplateId.SOCIAL, name="Social Gathering", category=EventCategory.SOCIAL,
        description="Casual social meetup", default_capacity=25,
    ),
]

class EventService:
    """Service for event lifecycle and guest list operations"""

    @staticmethod
    def template(template_id: EventTemplateId) -> EventTemplate:
        return next(t for t in EVENT_TEMPLATES if t.id == template_id)

    @staticmethod
    def create_manual(db: Session, data: EventCreate) -> Event:
        """Create a draft event from the manual form.

        A chosen template supplies category and capacity unless the form
        sets them.
        """
        category = data.category
        capacity = data.capacity
        if data.template:
            template = EventService.template(data.template)
            if "category" not in data.model_fields_set:
                category = template.category
            if "capacity" not in data.model_fields_set:
                capacity = template.default_capacity

        event = aggregate.new_event(
            title=data.title,
            description=data.description,
            date=data.date,
            time=data.time,
            location=data.location,
            category=category,
            capacity=capacity,
            cover_image=data.cover_image or GeneratorService.cover_image_for(category),
            created_by=data.created_by,
        )
        created = EventRepo.create(db, event)
        logger.info(f"Created event {created.id} '{created.title}'")
        return created

    @staticmethod
    async def generate(
        db: Session,
        request: GenerateEventRequest,
        delay: Optional[float] = None
    ) -> Event:
        """Generate a draft event from a description and store it"""
        event = await GeneratorService.generate_event_deferred(
            request.prompt,
            entry_point=request.entry_point,
            delay=delay,
            created_by=request.created_by,
        )
        created = EventRepo.create(db, event)
        logger.info(f"Created generated event {created.id} '{created.title}'")
        return created

    @staticmethod
    def create_from_guest_list(
        db: Session,
        text: str,
        created_by: Optional[str] = None
    ) -> Tuple[Event, int]:
        """Start a new event from an uploaded list of name,email[,phone] lines"""
        drafts = CsvService.parse_guest_list(text)
        event = aggregate.new_event(
            title="Imported Event",
            description="Event created from imported guest list. Please update the details.",
            date=date.today() + timedelta(days=GeneratorService.DEFAULT_OFFSET_DAYS),
            time=GeneratorService.DEFAULT_TIME,
            location=GeneratorService.DEFAULT_LOCATIONS[GenerationEntryPoint.GENERATOR],
            category=EventCategory.SOCIAL,
            capacity=len(drafts) or None,
            created_by=created_by,
        )
        for draft in drafts:
            event = aggregate.add_guest(event, draft, require_email=True)

        created = EventRepo.create(db, event)
        logger.info(f"Created event {created.id} from guest list with {len(drafts)} guests")
        return created, len(drafts)

    @staticmethod
    def update(db: Session, event_id: str, changes: List[FieldUpdate]) -> Optional[Event]:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            return None
        updated = aggregate.apply_updates(aggregate.EventAggregate.model_validate(event), changes)
        return EventRepo.update_fields(db, event, updated)

    @staticmethod
    def toggle_publish(db: Session, event_id: str) -> Optional[Event]:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            return None
        updated = aggregate.toggle_publish(aggregate.EventAggregate.model_validate(event))
        logger.info(f"Event {event_id} status {event.status} -> {updated.status.value}")
        return EventRepo.update_fields(db, event, updated)

    @staticmethod
    def delete(db: Session, event_id: str) -> bool:
        event = EventRepo.get_by_id(db, event_id)
        if not event:
            return False
        EventRepo.delete(db, event)
        logger.info(f"Deleted event {event_id}")
        return True

    @staticmethod
    def add_guest(db: Session, event_id: str, data: GuestCreate) -> Optional[Guest]:
        """Single-guest add: name and email are both required"""
        current = EventRepo.load_aggregate(db, event_id)
        if current is None:
            return None
        updated = aggregate.add_guest(current, data, require_email=True)
        return GuestRepo.create(db, event_id, updated.guests[-1])

    @staticmethod
    def remove_guest(db: Session, event_id: str, guest_id: str) -> bool:
        current = EventRepo.load_aggregate(db, event_id)
        if current is None:
            return False
        if aggregate.remove_guest(current, guest_id) is current:
            return False
        guest = GuestRepo.get(db, event_id, guest_id)
        GuestRepo.delete(db, guest)
        return True

    @staticmethod
    def set_guest_status(
        db: Session,
        event_id: str,
        guest_id: str,
        status: RSVPStatus,
        plus_one: Optional[bool] = None,
        plus_one_name: Optional[str] = None
    ) -> Optional[Guest]:
        current = EventRepo.load_aggregate(db, event_id)
        guest = GuestRepo.get(db, event_id, guest_id)
        if current is None or guest is None:
            return None
        updated = aggregate.set_guest_status(
            current, guest_id, status, plus_one=plus_one, plus_one_name=plus_one_name
        )
        return GuestRepo.update_from_entry(db, guest, aggregate.find_guest(updated, guest_id))

    @staticmethod
    def bulk_set_guest_status(
        db: Session,
        event_id: str,
        guest_ids: List[str],
        status: RSVPStatus
    ) -> Optional[List[Guest]]:
        """Same RSVP for several guests; ids not on the event are ignored"""
        current = EventRepo.load_aggregate(db, event_id)
        if current is None:
            return None
        updated = aggregate.set_guests_status(current, guest_ids, status)
        entries = [
            aggregate.find_guest(updated, guest_id)
            for guest_id in guest_ids
            if aggregate.find_guest(current, guest_id) is not None
        ]
        guests = GuestRepo.bulk_update_status(db, event_id, entries)
        logger.info(f"Set {len(guests)} guests of event {event_id} to {RSVPStatus(status).value}")
        return guests

    @staticmethod
    def import_guests(
        db: Session,
        event_id: str,
        parsed: ParsedCsv,
        overrides: Optional[Dict[str, Optional[str]]] = None
    ) -> Optional[ImportResult]:
        """Run the import pipeline and insert accepted guests"""
        current = EventRepo.load_aggregate(db, event_id)
        if current is None:
            return None

        result, drafts = GuestImportService.prepare(parsed, overrides)
        if not result.success:
            return result

        merged = aggregate.merge_imported_guests(current, drafts)
        new_guests = merged.guests[len(current.guests):]
        outcome = GuestRepo.bulk_create(db, event_id, new_guests)
        if outcome["errors"]:
            return ImportResult(
                success=False,
                message="Failed to import guests",
                imported=0,
                failed=outcome["failed"],
                errors=outcome["errors"],
                skipped_lines=result.skipped_lines,
            )

        logger.info(f"Imported {outcome['imported']} guests into event {event_id}")
        return result
