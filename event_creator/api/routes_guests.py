"""
Guest list API routes
"""

import logging
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from event_creator.core.config import settings
from event_creator.core.db import get_db
from event_creator.schemas.guest import (
    GuestBulkStatusUpdate, GuestCreate, GuestResponse, GuestStatusUpdate
)
from event_creator.services.csv_service import ColumnMappingError, CsvService, ParsedCsv
from event_creator.services.event_aggregate import GuestValidationError
from event_creator.services.event_service import EventService
from event_creator.services.export_service import ExportService
from event_creator.services.import_service import GuestImportService
from event_creator.services.invitation_service import InvitationService
from event_creator.services.qr_service import QRService
from event_creator.services.repositories import EventRepo, GuestRepo
from event_creator.utils.responses import success_response, error_response, not_found_error

logger = logging.getLogger(__name__)

router = APIRouter()

async def read_upload(file: UploadFile) -> ParsedCsv:
    """Read an uploaded guest file into headers and rows"""
    file_content = await file.read()
    if len(file_content) > settings.MAX_UPLOAD_SIZE:
        return ParsedCsv(success=False, errors=["File too large"])
    return CsvService.parse_upload(file.filename, file_content)

@router.get("/events/{event_id}/guests")
async def list_guests(
    event_id: str,
    status: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """List guests in invitation order, optionally by RSVP status"""
    if not EventRepo.get_by_id(db, event_id):
        raise not_found_error("Event")
    
    guests = GuestRepo.list_for_event(db, event_id)
    if status and status != "all":
        guests = [g for g in guests if g.status == status]
    
    return success_response(
        message="Guests retrieved successfully",
        data=[GuestResponse.model_validate(g) for g in guests]
    )

@router.post("/events/{event_id}/guests")
async def add_guest(
    event_id: str,
    guest_data: GuestCreate,
    db: Session = Depends(get_db)
):
    """Add a single guest; name and email are required"""
    try:
        guest = EventService.add_guest(db, event_id, guest_data)
    except GuestValidationError as e:
        return error_response(message=str(e), status_code=422)
    
    if not guest:
        raise not_found_error("Event")
    
    return success_response(
        message="Guest added successfully!",
        data=GuestResponse.model_validate(guest),
        status_code=201
    )

@router.delete("/events/{event_id}/guests/{guest_id}")
async def remove_guest(
    event_id: str,
    guest_id: str,
    db: Session = Depends(get_db)
):
    """Remove a guest from an event"""
    if not EventService.remove_guest(db, event_id, guest_id):
        raise not_found_error("Guest")
    
    return success_response(
        message="Guest removed",
        data={"removed_guest_id": guest_id}
    )

@router.patch("/events/{event_id}/guests/status")
async def bulk_update_guest_status(
    event_id: str,
    status_update: GuestBulkStatusUpdate,
    db: Session = Depends(get_db)
):
    """Record the same RSVP answer for several guests at once"""
    guests = EventService.bulk_set_guest_status(
        db, event_id, status_update.guest_ids, status_update.status
    )
    if guests is None:
        raise not_found_error("Event")
    
    return success_response(
        message=f"Updated {len(guests)} guests",
        data=[GuestResponse.model_validate(g) for g in guests]
    )

@router.patch("/events/{event_id}/guests/{guest_id}/status")
async def update_guest_status(
    event_id: str,
    guest_id: str,
    status_update: GuestStatusUpdate,
    db: Session = Depends(get_db)
):
    """Set a guest's RSVP status on their behalf"""
    guest = EventService.set_guest_status(db, event_id, guest_id, status_update.status)
    if not guest:
        raise not_found_error("Guest")
    
    return success_response(
        message="Guest status updated",
        data=GuestResponse.model_validate(guest)
    )

@router.post("/events/{event_id}/guests/import/preview")
async def preview_import(
    event_id: str,
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """Parse an upload and propose a column mapping"""
    if not EventRepo.get_by_id(db, event_id):
        raise not_found_error("Event")
    
    parsed = await read_upload(file)
    if not parsed.success:
        return error_response(
            message=parsed.errors[0],
            details=parsed.errors,
            status_code=400
        )
    
    return success_response(
        message=f"Loaded {len(parsed.rows)} rows from CSV",
        data=GuestImportService.preview(parsed)
    )

@router.post("/events/{event_id}/guests/import")
async def import_guests(
    event_id: str,
    file: UploadFile = File(...),
    name_column: Optional[str] = Form(None),
    email_column: Optional[str] = Form(None),
    phone_column: Optional[str] = Form(None),
    db: Session = Depends(get_db)
):
    """Import guests using the detected mapping plus any overrides"""
    if not EventRepo.get_by_id(db, event_id):
        raise not_found_error("Event")
    
    parsed = await read_upload(file)
    if not parsed.success:
        return error_response(
            message=parsed.errors[0],
            details=parsed.errors,
            status_code=400
        )
    
    overrides = {"name": name_column, "email": email_column, "phone": phone_column}
    try:
        result = EventService.import_guests(db, event_id, parsed, overrides)
    except ColumnMappingError as e:
        return error_response(message=str(e), status_code=422)
    
    if not result.success:
        return error_response(
            message=result.message,
            details=result,
            status_code=422
        )
    
    return success_response(
        message=result.message,
        data=result
    )

@router.get("/events/{event_id}/guests/{guest_id}/invitation")
async def get_invitation_links(
    event_id: str,
    guest_id: str,
    db: Session = Depends(get_db)
):
    """Invitation link, event link and WhatsApp share URL for a guest"""
    event = EventRepo.get_by_id(db, event_id)
    guest = GuestRepo.get(db, event_id, guest_id) if event else None
    if not guest:
        raise not_found_error("Guest")
    
    return success_response(
        message="Invitation links generated",
        data=InvitationService.links(event, guest)
    )

@router.get("/events/{event_id}/guests/{guest_id}/qr.png")
async def get_invitation_qr(
    event_id: str,
    guest_id: str,
    db: Session = Depends(get_db)
):
    """QR code image of a guest's invitation link"""
    if not GuestRepo.get(db, event_id, guest_id):
        raise not_found_error("Guest")
    
    qr_bytes = QRService.generate_invitation_qr(event_id, guest_id)
    
    return Response(
        content=qr_bytes,
        media_type="image/png",
        headers={"Content-Disposition": f"inline; filename=invite_{guest_id}.png"}
    )

@router.get("/guests/search")
async def search_guests(
    q: str = Query(""),
    event_id: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Search guests by name, email or company"""
    guests = GuestRepo.search(db, q, event_id=event_id)
    
    return success_response(
        message="Guests retrieved successfully",
        data=[GuestResponse.model_validate(g) for g in guests]
    )

@router.get("/guests/export.csv")
async def export_guests(
    created_by: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Download every guest with their event as CSV"""
    content = ExportService.export_guests_csv(GuestRepo.list_with_events(db, created_by=created_by))
    filename = f"guests-export-{date.today().isoformat()}.csv"
    
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
