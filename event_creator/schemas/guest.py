"""
Guest-related Pydantic schemas
"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Literal
from pydantic import BaseModel

class RSVPStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"

class GuestDraft(BaseModel):
    """Guest data before it is assigned an id"""
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None

class GuestCreate(GuestDraft):
    """Schema for adding a single guest"""
    company: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    plus_one: bool = False
    plus_one_name: Optional[str] = None

class GuestStatusUpdate(BaseModel):
    """Schema for changing a guest's RSVP status"""
    status: RSVPStatus

class GuestBulkStatusUpdate(BaseModel):
    """Schema for recording one RSVP answer for several guests"""
    guest_ids: List[str]
    status: Literal["confirmed", "declined"]

class GuestResponse(BaseModel):
    """Guest response schema"""
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    plus_one: bool = False
    plus_one_name: Optional[str] = None
    status: RSVPStatus
    response_token: str
    responded_at: Optional[datetime] = None
    created_at: datetime
    
    class Config:
        from_attributes = True

class RSVPRequest(BaseModel):
    """Guest response submitted through an invitation link"""
    event_id: str
    guest_id: str
    status: Literal["confirmed", "declined"]
    plus_one: Optional[bool] = None
    plus_one_name: Optional[str] = None

class ColumnMapping(BaseModel):
    """Association between uploaded headers and guest fields"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

class ImportPreview(BaseModel):
    """Parsed upload shown before the mapping is confirmed"""
    headers: List[str]
    mapping: ColumnMapping
    total_rows: int
    preview: List[Dict[str, str]]

class ImportResult(BaseModel):
    """Outcome of a guest import"""
    success: bool
    message: str
    imported: int = 0
    failed: int = 0
    errors: List[str] = []
    skipped_lines: List[int] = []
