"""
Event API routes
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query
from pydantic import EmailStr
from sqlalchemy.orm import Session

from event_creator.core.config import settings
from event_creator.core.db import get_db
from event_creator.schemas.event import (
    EventCategory, EventCreate, EventDetail, EventResponse, EventStatus,
    EventUpdate, GenerateEventRequest
)
from event_creator.schemas.guest import GuestResponse
from event_creator.services.event_service import EVENT_TEMPLATES, EventService
from event_creator.services.repositories import EventRepo
from event_creator.utils.responses import success_response, error_response, not_found_error

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/events/generate")
async def generate_event(
    request: GenerateEventRequest,
    db: Session = Depends(get_db)
):
    """Generate a draft event from a free-text description"""
    if not request.prompt.strip():
        return error_response(
            message="Please describe your event idea",
            status_code=422
        )
    
    event = await EventService.generate(db, request)
    
    return success_response(
        message="Event generated successfully!",
        data=EventResponse.model_validate(event),
        status_code=201
    )

@router.post("/events")
async def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db)
):
    """Create an event from the manual form"""
    event = EventService.create_manual(db, event_data)
    
    return success_response(
        message="Event created successfully!",
        data=EventResponse.model_validate(event),
        status_code=201
    )

@router.post("/events/import-guest-list")
async def create_event_from_guest_list(
    file: UploadFile = File(...),
    created_by: Optional[EmailStr] = Form(None),
    db: Session = Depends(get_db)
):
    """Create a new event pre-filled with the guests of an uploaded list"""
    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return error_response(message="File too large", status_code=413)
    
    try:
        text = file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = ""
    if not text.strip():
        return error_response(
            message="Failed to parse file. Please check the format.",
            status_code=400
        )
    
    event, guest_count = EventService.create_from_guest_list(db, text, created_by=created_by)
    
    return success_response(
        message=f"Imported {guest_count} guests successfully!",
        data={
            "event": EventResponse.model_validate(event),
            "guest_count": guest_count
        },
        status_code=201
    )

@router.get("/templates/events")
async def list_event_templates():
    """Templates offered by the manual event form"""
    return success_response(
        message="Event templates retrieved",
        data=EVENT_TEMPLATES
    )

@router.get("/events")
async def list_events(
    created_by: Optional[str] = Query(None),
    status: Optional[EventStatus] = Query(None),
    db: Session = Depends(get_db)
):
    """List events, newest first"""
    events = EventRepo.list_all(db, created_by=created_by)
    if status:
        events = [e for e in events if e.status == status.value]
    
    return success_response(
        message="Events retrieved successfully",
        data=[EventResponse.model_validate(e) for e in events]
    )

@router.get("/events/search")
async def search_events(
    q: str = Query(""),
    category: Optional[EventCategory] = Query(None),
    status: Optional[EventStatus] = Query(None),
    db: Session = Depends(get_db)
):
    """Search events by title or description"""
    events = EventRepo.search(
        db,
        q,
        category=category.value if category else None,
        status=status.value if status else None
    )
    
    return success_response(
        message="Events retrieved successfully",
        data=[EventResponse.model_validate(e) for e in events]
    )

@router.get("/events/{event_id}")
async def get_event_details(
    event_id: str,
    db: Session = Depends(get_db)
):
    """Get an event with its guest list and statistics"""
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        raise not_found_error("Event")
    
    detail = EventDetail(
        **EventResponse.model_validate(event).model_dump(),
        guests=[GuestResponse.model_validate(g) for g in event.guests],
        statistics=EventRepo.statistics(db, event)
    )
    
    return success_response(
        message="Event details retrieved",
        data=detail
    )

@router.patch("/events/{event_id}")
async def update_event(
    event_id: str,
    event_update: EventUpdate,
    db: Session = Depends(get_db)
):
    """Apply field updates to an event"""
    event = EventService.update(db, event_id, event_update.changes)
    if not event:
        raise not_found_error("Event")
    
    return success_response(
        message="Event updated successfully",
        data=EventResponse.model_validate(event)
    )

@router.post("/events/{event_id}/publish")
async def toggle_publish(
    event_id: str,
    db: Session = Depends(get_db)
):
    """Publish a draft or cancelled event, or unpublish a published one"""
    event = EventService.toggle_publish(db, event_id)
    if not event:
        raise not_found_error("Event")
    
    message = "Event published successfully!" if event.status == "published" else "Event unpublished"
    return success_response(
        message=message,
        data=EventResponse.model_validate(event)
    )

@router.get("/events/{event_id}/statistics")
async def get_event_statistics(
    event_id: str,
    db: Session = Depends(get_db)
):
    """RSVP statistics for an event"""
    event = EventRepo.get_by_id(db, event_id)
    if not event:
        raise not_found_error("Event")
    
    return success_response(
        message="Statistics retrieved successfully",
        data=EventRepo.statistics(db, event)
    )

@router.delete("/events/{event_id}")
async def delete_event(
    event_id: str,
    db: Session = Depends(get_db)
):
    """Delete an event and its guests"""
    if not EventService.delete(db, event_id):
        raise not_found_error("Event")
    
    return success_response(
        message="Event deleted successfully",
        data={"deleted_event_id": event_id}
    )

@router.get("/dashboard")
async def get_dashboard(
    created_by: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Event and guest totals plus upcoming events"""
    return success_response(
        message="Dashboard retrieved successfully",
        data=EventRepo.dashboard(db, created_by=created_by)
    )
