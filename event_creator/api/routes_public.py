"""
Public API routes - no authentication required
"""

from typing import Optional
from fastapi import APIRouter, Depends, Request, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from event_creator.core.db import get_db
from event_creator.schemas.guest import GuestResponse, RSVPRequest, RSVPStatus
from event_creator.services.event_service import EventService
from event_creator.services.export_service import ExportService
from event_creator.services.invitation_service import INVALID_INVITATION, InvitationService
from event_creator.utils.security import rate_limit_check, get_client_ip
from event_creator.utils.responses import success_response, error_response, rate_limit_error

router = APIRouter()

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok"}

@router.get("/rsvp")
async def open_invitation(
    request: Request,
    rsvp: Optional[str] = Query(None),
    guest: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """Resolve an invitation link for the guest page"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()
    
    view = InvitationService.open_invitation(db, rsvp, guest)
    return success_response(message=view.message, data=view)

@router.get("/rsvp/token/{token}")
async def open_invitation_by_token(
    token: str,
    request: Request,
    db: Session = Depends(get_db)
):
    """Resolve an invitation by the guest's response token"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()
    
    view = InvitationService.open_by_token(db, token)
    return success_response(message=view.message, data=view)

@router.post("/rsvp")
async def respond_to_invitation(
    request: Request,
    rsvp_data: RSVPRequest,
    db: Session = Depends(get_db)
):
    """Record a guest's confirmation or decline"""
    client_ip = get_client_ip(request)
    if not rate_limit_check(client_ip):
        raise rate_limit_error()
    
    guest = EventService.set_guest_status(
        db,
        rsvp_data.event_id,
        rsvp_data.guest_id,
        RSVPStatus(rsvp_data.status),
        plus_one=rsvp_data.plus_one,
        plus_one_name=rsvp_data.plus_one_name
    )
    if not guest:
        return error_response(message=INVALID_INVITATION, status_code=404)
    
    message = "Thanks for confirming!" if guest.status == "confirmed" else "Sorry you can't make it."
    return success_response(
        message=message,
        data=GuestResponse.model_validate(guest)
    )

@router.get("/template/guest-import-template.csv")
async def download_csv_template():
    """Download the CSV template for guest imports"""
    return Response(
        content=ExportService.csv_template(),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=guest-import-template.csv"}
    )

@router.get("/template/guest-import-template.xlsx")
async def download_excel_template():
    """Download the Excel template for guest imports"""
    return Response(
        content=ExportService.excel_template(),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=guest-import-template.xlsx"}
    )
