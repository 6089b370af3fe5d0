"""
Event-related Pydantic schemas
"""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Annotated, Optional, List, Union, Literal
from pydantic import BaseModel, EmailStr, Field, field_validator

from event_creator.schemas.guest import GuestResponse

class EventCategory(str, Enum):
    BUSINESS = "business"
    CELEBRATION = "celebration"
    NETWORKING = "networking"
    ENTERTAINMENT = "entertainment"
    SOCIAL = "social"

class EventStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CANCELLED = "cancelled"

class GenerationEntryPoint(str, Enum):
    """Screen the free-text description was typed into"""
    GENERATOR = "generator"
    LANDING = "landing"

class EventTemplateId(str, Enum):
    BIRTHDAY = "birthday"
    BUSINESS = "business"
    NETWORKING = "networking"
    ENTERTAINMENT = "entertainment"
    SOCIAL = "social"

class EventTemplate(BaseModel):
    """Starting point for the manual form"""
    id: EventTemplateId
    name: str
    category: EventCategory
    description: str
    default_capacity: int

class GenerateEventRequest(BaseModel):
    """Free-text event description"""
    prompt: str
    entry_point: GenerationEntryPoint = GenerationEntryPoint.GENERATOR
    created_by: Optional[EmailStr] = None

class EventCreate(BaseModel):
    """Schema for the manual event form"""
    title: str
    description: str = ""
    date: date_type
    time: str
    location: str
    category: EventCategory = EventCategory.SOCIAL
    capacity: Optional[int] = Field(default=None, gt=0)
    cover_image: Optional[str] = None
    created_by: Optional[EmailStr] = None
    # Fills category and capacity when those are not given
    template: Optional[EventTemplateId] = None
    
    @field_validator("title", "time", "location")
    @classmethod
    def required_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Please fill in all required fields")
        return value.strip()

# Explicit per-field updates

class TitleUpdate(BaseModel):
    field: Literal["title"]
    value: str

class DescriptionUpdate(BaseModel):
    field: Literal["description"]
    value: str

class DateUpdate(BaseModel):
    field: Literal["date"]
    value: Optional[date_type] = None

class TimeUpdate(BaseModel):
    field: Literal["time"]
    value: str

class LocationUpdate(BaseModel):
    field: Literal["location"]
    value: str

class CategoryUpdate(BaseModel):
    field: Literal["category"]
    value: EventCategory

class CapacityUpdate(BaseModel):
    field: Literal["capacity"]
    value: Optional[int] = Field(default=None, gt=0)

class CoverImageUpdate(BaseModel):
    field: Literal["cover_image"]
    value: Optional[str] = None

class StatusUpdate(BaseModel):
    field: Literal["status"]
    value: EventStatus

FieldUpdate = Annotated[
    Union[
        TitleUpdate,
        DescriptionUpdate,
        DateUpdate,
        TimeUpdate,
        LocationUpdate,
        CategoryUpdate,
        CapacityUpdate,
        CoverImageUpdate,
        StatusUpdate,
    ],
    Field(discriminator="field"),
]

class EventUpdate(BaseModel):
    """Schema for editing an event"""
    changes: List[FieldUpdate]

class EventResponse(BaseModel):
    """Basic event response"""
    id: str
    title: str
    description: str
    date: date_type
    time: str
    location: str
    category: EventCategory
    cover_image: Optional[str] = None
    capacity: Optional[int] = None
    status: EventStatus
    created_by: Optional[str] = None
    created_at: datetime
    
    class Config:
        from_attributes = True

class EventStatistics(BaseModel):
    """Computed RSVP statistics for an event"""
    total_guests: int = 0
    confirmed_guests: int = 0
    declined_guests: int = 0
    pending_guests: int = 0
    plus_ones: int = 0
    capacity_percentage: int = 0
    rsvp_rate: int = 0

class EventDetail(EventResponse):
    """Detailed event response with guests and statistics"""
    guests: List[GuestResponse]
    statistics: EventStatistics

class UpcomingEvent(BaseModel):
    id: str
    title: str
    date: date_type
    guest_count: int

class UserDashboard(BaseModel):
    """Summary shown on the dashboard"""
    total_events: int = 0
    published_events: int = 0
    draft_events: int = 0
    cancelled_events: int = 0
    total_guests: int = 0
    confirmed_guests: int = 0
    pending_guests: int = 0
    declined_guests: int = 0
    confirmation_rate: int = 0
    upcoming_events: List[UpcomingEvent] = []

class InvitationLinks(BaseModel):
    """Links used to share an invitation with a guest"""
    invitation_url: str
    event_url: str
    whatsapp_url: Optional[str] = None
    message: str

class InvitationView(BaseModel):
    """What a guest sees when opening an invitation link"""
    valid: bool
    message: str
    event: Optional[EventResponse] = None
    guest: Optional[GuestResponse] = None
