"""
Pydantic schemas package
"""

from .common import *
from .event import *
from .guest import *

__all__ = [
    "StandardResponse",
    "ErrorResponse",
    "EventCategory",
    "EventStatus",
    "GenerationEntryPoint",
    "EventTemplateId",
    "EventTemplate",
    "GenerateEventRequest",
    "EventCreate",
    "EventUpdate",
    "FieldUpdate",
    "EventResponse",
    "EventDetail",
    "EventStatistics",
    "UserDashboard",
    "InvitationLinks",
    "InvitationView",
    "RSVPStatus",
    "GuestDraft",
    "GuestCreate",
    "GuestStatusUpdate",
    "GuestBulkStatusUpdate",
    "GuestResponse",
    "RSVPRequest",
    "ColumnMapping",
    "ImportPreview",
    "ImportResult"
]
